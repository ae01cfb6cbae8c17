"""YAML-LD ($-prefixed keys) to JSON-LD (@-prefixed keys) conversion"""

from typing import Any

from mdxld.core.linked_data import denormalize, normalize
from mdxld.core.models import Document, Mode


def _convert(value: Any, old: str, new: str) -> Any:
    if isinstance(value, dict):
        return {
            (new + k[1:] if isinstance(k, str) and k.startswith(old) else k): _convert(v, old, new)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_convert(v, old, new) for v in value]
    return value


def yamlld_to_jsonld(data: dict[str, Any]) -> dict[str, Any]:
    """Rename `$key` to `@key` at every nesting level."""
    return _convert(data, '$', '@')


def jsonld_to_yamlld(data: dict[str, Any]) -> dict[str, Any]:
    """Rename `@key` to `$key` at every nesting level."""
    return _convert(data, '@', '$')


def to_jsonld(doc: Document) -> dict[str, Any]:
    """The document's frontmatter as a JSON-LD object; the body is not included."""
    return yamlld_to_jsonld(denormalize(doc))


def from_jsonld(data: dict[str, Any], body: str = "", mode: Mode | str = Mode.expanded) -> Document:
    if not isinstance(data, dict):
        raise TypeError(f"Expected a mapping, got {type(data).__name__}")
    return normalize(jsonld_to_yamlld(data), mode=mode, body=body)
