"""Local filesystem loader: document discovery and raw text loading"""

from pathlib import Path

from loguru import logger


MD_EXTENSIONS = {'.md', '.mdx'}


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    path = Path(path)
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS and p.is_file())


class FileLoader:
    """Reads documents as UTF-8 text. Paths are taken relative to root when given."""

    def __init__(self, root: Path | str | None = None, encoding: str = 'utf-8'):
        self.root = Path(root) if root is not None else None
        self.encoding = encoding

    def resolve(self, path: Path | str) -> Path:
        path = Path(path)
        if self.root is not None and not path.is_absolute():
            return self.root / path
        return path

    def load(self, path: Path | str) -> str:
        target = self.resolve(path)
        logger.debug("Loading {}", target)
        # newline='' keeps \r\n so the body stays byte-for-byte
        with open(target, encoding=self.encoding, newline='') as f:
            return f.read()
