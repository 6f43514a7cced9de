"""Unit tests for libdocs.extract."""

from __future__ import annotations

from libdocs.extract import ContentExtractor, extract_text

PAGE = """
<html>
  <body>
    <nav>Navigation</nav>
    <main><h1>Hooks</h1><p>useState lets you add state.</p></main>
    <div class="prose">First</div>
    <div class="prose">Second</div>
    <div id="page-doc">Express API</div>
  </body>
</html>
"""


class TestExtractText:
    def test_tag_selector(self) -> None:
        assert extract_text(PAGE, "main") == "HooksuseState lets you add state."

    def test_class_selector_concatenates_all_matches(self) -> None:
        assert extract_text(PAGE, ".prose") == "FirstSecond"

    def test_id_selector(self) -> None:
        assert extract_text(PAGE, "#page-doc") == "Express API"

    def test_no_match_returns_empty(self) -> None:
        assert extract_text(PAGE, "#apicontent") == ""

    def test_excludes_unselected_regions(self) -> None:
        assert "Navigation" not in extract_text(PAGE, "main")

    def test_malformed_markup_is_tolerated(self) -> None:
        assert extract_text("<main><p>unclosed", "main") == "unclosed"


class TestContentExtractor:
    def test_callable(self) -> None:
        extractor = ContentExtractor(".prose")
        assert extractor(PAGE) == "FirstSecond"
