"""Shared fixtures for core unit tests"""

import pytest
from lxml import html

from mdtree.core.node import HTMLNode


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text.

## Heading 2

- item one
- item two

```python
print("hello")
```

---

> Quoted paragraph.
"""


@pytest.fixture(name="fragment")
def fragment_fixture():
    """Parse a single HTML element and wrap it in an HTMLNode."""
    def _fragment(markup: str) -> HTMLNode:
        return HTMLNode(html.fragment_fromstring(markup))
    return _fragment


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD
