"""Slugs for wiki-link targets: `[[Guides/Getting Started]]` -> guides/getting-started"""

import re
import unicodedata


def _segment(text: str) -> str:
    text = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    text = re.sub(r'[^\w\s-]', '', text.lower())
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def slugify(text: str) -> str:
    """Lowercase, hyphenated, ASCII-only slug. `/` separates segments, which are slugged one by one."""
    segments = (_segment(part) for part in text.split('/'))
    return '/'.join(s for s in segments if s)
