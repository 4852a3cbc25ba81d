"""Example extraction from puzzle description pages.

Responsibilities:
- Locate the worked example input announced by a "for example" paragraph.
- Collect the highlighted example answers for part 1 and, when visible, part 2.
"""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True, slots=True)
class Example:
    """Example input and expected answers scraped from a puzzle page.

    Attributes:
        data: Example input text.
        part1_answer: Expected part 1 answer for the example input.
        part2_answer: Expected part 2 answer, only present once part 1 is solved.
    """

    data: str
    part1_answer: str
    part2_answer: str | None = None

    @classmethod
    def parse(cls, html: str) -> Example | None:
        """Parse a puzzle page, returning `None` when no complete example is found."""

        soup = BeautifulSoup(html, "html.parser")

        found_for_example = False
        data: str | None = None
        part1_answer: str | None = None
        part2_answer: str | None = None
        in_part2 = False

        for article in soup.select("article.day-desc"):
            for element in article.find_all(True):
                if element.name == "p":
                    if "for example" in element.decode_contents().lower():
                        found_for_example = True
                elif element.name == "pre":
                    if data is None and found_for_example:
                        child = _single_child_tag(element, "code")
                        if child is not None:
                            data = child.get_text()
                elif element.name == "code":
                    child = _single_child_tag(element, "em")
                    if child is not None:
                        if in_part2:
                            part2_answer = child.get_text()
                        else:
                            part1_answer = child.get_text()
                elif element.name == "h2":
                    if str(element.get("id", "")).lower() == "part2":
                        in_part2 = True

        if data is None or part1_answer is None:
            return None
        return cls(data=data, part1_answer=part1_answer, part2_answer=part2_answer)


def _single_child_tag(element: Tag, name: str) -> Tag | None:
    """Return the only child of `element` when it is a `name` tag."""

    children = list(element.children)
    if len(children) != 1:
        return None
    child = children[0]
    if isinstance(child, Tag) and child.name == name:
        return child
    return None
