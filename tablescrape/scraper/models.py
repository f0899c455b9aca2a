"""Data models for the fetch / parse stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from bs4 import BeautifulSoup, Tag


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass(frozen=True)
class Document:
    """A parsed page.

    Wraps the BeautifulSoup tree produced by the parser.  Downstream stages
    only read from it.  Every element gets a document-order position
    (depth-first, pre-order) so selections can be merged, deduplicated and
    sorted without comparing nodes structurally (``Tag.__eq__`` compares
    markup, not identity).
    """

    soup: BeautifulSoup
    url: str = ""
    _positions: Dict[int, int] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        for position, element in enumerate(self.soup.find_all(True)):
            self._positions[id(element)] = position

    @property
    def root(self) -> BeautifulSoup:
        return self.soup

    def elements(self) -> Iterator[Tag]:
        """Yield every element of the document in document order."""
        yield from self.soup.find_all(True)

    def position(self, node: Tag) -> int:
        """Return the document-order position of *node*.

        Raises:
            ValueError: If *node* does not belong to this document.
        """
        try:
            return self._positions[id(node)]
        except KeyError:
            raise ValueError(f"<{node.name}> does not belong to this document") from None

    def owns(self, node: Tag) -> bool:
        return id(node) in self._positions

    @property
    def title(self) -> str:
        """Return the text of the first ``<title>`` tag, or empty string."""
        tag = self.soup.find("title")
        if tag is None:
            return ""
        return tag.get_text().strip()

    def links(self) -> List[str]:
        """Return a deduplicated list of href values from ``<a>`` tags.

        Fragment-only links (``#anchor``) and empty hrefs are excluded.
        """
        seen: set[str] = set()
        links: List[str] = []
        for anchor in self.soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if href and not href.startswith("#") and href not in seen:
                seen.add(href)
                links.append(href)
        return links
