from __future__ import annotations

import sys
from pathlib import Path

# Add src directory to path immediately on import - MUST be before any other imports
_src_dir = Path(__file__).resolve().parents[1] / "src"
_src_str = str(_src_dir)
if _src_str not in sys.path:
    sys.path.insert(0, _src_str)

import pytest


WELL_FORMED_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>My Fan Page</title>
</head>
<body>
  <!-- Main heading -->
  <h1>Title</h1>
  <p>Text</p>
  <ul>
    <li>One</li>
    <li>Two</li>
  </ul>
</body>
</html>
"""


def pytest_configure(config: pytest.Config) -> None:
    """Ensure src directory is on sys.path so tests can import modules."""
    src_dir = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_dir)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


def page(body: str, title: str = "Fans", head_extra: str = "") -> str:
    """Wrap body markup in a minimal well-formed page."""
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        f"<title>{title}</title>{head_extra}\n"
        "</head>\n<body>\n"
        f"{body}\n"
        "</body>\n</html>\n"
    )


@pytest.fixture
def well_formed_html() -> str:
    return WELL_FORMED_HTML


@pytest.fixture
def make_page():
    return page


@pytest.fixture
def reject_markup(monkeypatch: pytest.MonkeyPatch):
    """Make the tree builder refuse any non-empty markup."""
    from bs4 import BeautifulSoup, ParserRejectedMarkup

    from parsers import document_model

    def refusing(markup, features):
        if markup:
            raise ParserRejectedMarkup("tokenizer gave up")
        return BeautifulSoup(markup, features)

    monkeypatch.setattr(document_model, "BeautifulSoup", refusing)
