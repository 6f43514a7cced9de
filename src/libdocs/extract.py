"""Text extraction from documentation HTML.

Parses markup with BeautifulSoup and concatenates the text of every element
matched by a CSS selector. No sanitisation beyond text extraction.
"""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup


def extract_text(html: str, selector: str) -> str:
    """Return the concatenated text of all elements matching ``selector``.

    Returns an empty string when nothing matches.
    """
    soup = BeautifulSoup(html, "html.parser")
    return "".join(element.get_text() for element in soup.select(selector))


@dataclass(frozen=True)
class ContentExtractor:
    """Per-provider extraction rule: which region of the page holds the docs."""

    selector: str

    def __call__(self, html: str) -> str:
        return extract_text(html, self.selector)
