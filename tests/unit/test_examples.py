"""Unit tests for worked-example extraction from puzzle pages."""

from __future__ import annotations

from aocinput.examples import Example
from tests.fixture_paths import read_puzzle_page


def test_parse_extracts_example_input_and_both_answers() -> None:
    """A solved page should yield example data plus part 1 and part 2 answers."""

    example = Example.parse(read_puzzle_page("puzzle_page_part2"))

    assert example == Example(
        data="1abc2\npqr3stu8vwx\na1b2c3d4e5f\ntreb7uchet\n",
        part1_answer="142",
        part2_answer="281",
    )


def test_parse_without_part_two_section_leaves_part2_empty() -> None:
    """Before part 1 is solved only the part 1 answer is visible."""

    html = """
    <article class="day-desc">
      <p>Here is an example, for example:</p>
      <pre><code>3   4
4   3
</code></pre>
      <p>The total is <code><em>11</em></code>.</p>
    </article>
    """

    example = Example.parse(html)

    assert example is not None
    assert example.data == "3   4\n4   3\n"
    assert example.part1_answer == "11"
    assert example.part2_answer is None


def test_parse_returns_none_without_for_example_paragraph() -> None:
    """Code blocks not announced as an example should be ignored."""

    assert Example.parse(read_puzzle_page("puzzle_page_no_example")) is None


def test_parse_ignores_content_outside_puzzle_articles() -> None:
    """Only `article.day-desc` content should be considered."""

    html = """
    <p>For example:</p>
    <pre><code>outside</code></pre>
    <p><code><em>1</em></code></p>
    """

    assert Example.parse(html) is None
