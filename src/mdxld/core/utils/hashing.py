"""SHA-256 digests: full for stored content, truncated for relationship ids"""

import hashlib


def sha256(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def short_digest(*parts: str, length: int = 16, sep: str = ":") -> str:
    """First `length` hex chars of the SHA-256 of parts joined by sep."""
    return sha256(sep.join(parts))[:length]
