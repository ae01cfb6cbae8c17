"""Document validation returning structured results instead of raising"""

from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from mdxld.core.linked_data import normalize
from mdxld.core.models import FIELD_SHAPES, RESERVED_KEYS, Document, Mode
from mdxld.core.parse import FrontmatterError, load_block, split_frontmatter


class ValidationResult(BaseModel):
    success: bool
    data:    Optional[Document] = None
    errors:  list[str] = Field(default_factory=list)


def _errors(e: ValidationError) -> list[str]:
    return [f"{'.'.join(str(p) for p in err['loc']) or 'document'}: {err['msg']}" for err in e.errors()]


def validate_document(value: Any) -> ValidationResult:
    """Check that value is (or can be built into) a Document."""
    if isinstance(value, Document):
        return ValidationResult(success=True, data=value)
    if not isinstance(value, dict):
        return ValidationResult(success=False, errors=[f"document: expected a mapping, got {type(value).__name__}"])
    if 'body' not in value:
        return ValidationResult(success=False, errors=["body: field required"])
    try:
        return ValidationResult(success=True, data=Document.model_validate(value))
    except ValidationError as e:
        return ValidationResult(success=False, errors=_errors(e))


def validate_data(data: Any, required: list[str] | None = None) -> list[str]:
    """Problems with a frontmatter mapping; an empty list means valid.

    Reserved keys must have a shape that can be lifted; required keys must be present.
    """
    if not isinstance(data, dict):
        return [f"data: expected a mapping, got {type(data).__name__}"]
    errors = [f"{k!r}: keys must be strings" for k in data if not isinstance(k, str)]
    for field, key in RESERVED_KEYS.items():
        if key in data and not FIELD_SHAPES[field](data[key]):
            errors.append(f"{key}: unsupported value {data[key]!r}")
    for key in required or []:
        if key not in data:
            errors.append(f"{key}: field required")
    return errors


def validate_text(text: str, mode: Mode | str = Mode.expanded) -> ValidationResult:
    """Strict parse: malformed frontmatter is reported rather than degraded."""
    if not isinstance(text, str):
        return ValidationResult(success=False, errors=[f"text: expected str, got {type(text).__name__}"])
    try:
        split = split_frontmatter(text)
        metadata, body = (load_block(split[0]), split[1]) if split else ({}, text)
    except FrontmatterError as e:
        return ValidationResult(success=False, errors=[str(e)])
    errors = validate_data(metadata)
    if errors:
        return ValidationResult(success=False, errors=errors)
    return ValidationResult(success=True, data=normalize(metadata, mode=mode, body=body))
