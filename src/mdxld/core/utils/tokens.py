"""Shared markdown-it token utilities"""


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def code_info(token) -> tuple[str | None, str | None]:
    """Split a fence info string into (lang, meta); (None, None) for indented code."""
    info = (token.info or '').strip()
    if not info:
        return None, None
    lang, _, meta = info.partition(' ')
    return lang, meta.strip() or None
