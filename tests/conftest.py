"""Root test configuration: shared sample document and cleanup of runtime artifacts"""

from pathlib import Path

import pytest

from mdxld.core.parse import parse


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["mdxld.db", "test.db"]

SAMPLE_MDX = """\
---
$id: https://example.com/docs/intro
$type: Article
$context: https://schema.org
title: Intro
tags: [a, b]
---

import Chart from './chart.mdx'
import { useState } from 'react'

# Welcome

See [the guide](/guide "Guide") and ![logo](./logo.png).

<Video src="https://cdn.example.com/v.mp4" autoplay />

Ping @alice about [[Getting Started|the basics]].

Read the [spec][rfc] too.

[rfc]: https://www.rfc-editor.org/rfc/rfc3986
"""


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()


@pytest.fixture(name="sample_text")
def sample_text_fixture():
    return SAMPLE_MDX


@pytest.fixture(name="sample_doc")
def sample_doc_fixture():
    return parse(SAMPLE_MDX)
