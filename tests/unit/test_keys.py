"""Unit tests for resource key parsing, validation, and store tokens."""

from __future__ import annotations

import pytest

from aocinput.keys import ResourceKey


@pytest.mark.parametrize(
    "spelling",
    ["2023-day1", "2023/1", "2023-1", " 2023 day 1 ", "2023-DAY01", (2023, 1)],
)
def test_loose_spellings_parse_to_the_same_key(spelling: object) -> None:
    """Logically identical requests should produce equal keys."""

    assert ResourceKey.parse(spelling) == ResourceKey(2023, 1)


def test_part_suffix_selects_puzzle_page_key() -> None:
    """A part suffix should address the puzzle page as seen while solving that part."""

    key = ResourceKey.parse("2022-day5-part2")

    assert key == ResourceKey(2022, 5, 2)
    assert key.is_example
    assert str(key) == "2022-day5-part2"


def test_tokens_are_distinct_and_reversible() -> None:
    """Store tokens should never collide and should parse back to the same key."""

    keys = [ResourceKey(2023, 1), ResourceKey(2023, 1, 1), ResourceKey(2023, 1, 2)]
    tokens = [key.token for key in keys]

    assert tokens == ["2023/1", "examples/2023/1_1", "examples/2023/1_2"]
    assert [ResourceKey.from_token(token) for token in tokens] == keys
    assert ResourceKey.parse("examples/2023/1_2") == ResourceKey(2023, 1, 2)


def test_from_token_rejects_foreign_tokens() -> None:
    """Unknown or out-of-range tokens should not map to a key."""

    assert ResourceKey.from_token("notes/readme") is None
    assert ResourceKey.from_token("2023/26") is None
    assert ResourceKey.from_token("examples/2023/1_0") is None


@pytest.mark.parametrize("value", ["2014/1", "2023/26", "2023/0", "", "   ", 20231, (2023,)])
def test_parse_rejects_invalid_keys(value: object) -> None:
    """Out-of-range days, blank text and non-key values should raise `ValueError`."""

    with pytest.raises(ValueError):
        ResourceKey.parse(value)


def test_constructor_validates_types_and_ranges() -> None:
    """Direct construction should reject non-integers and bad parts."""

    with pytest.raises(ValueError, match="`day` must be an integer"):
        ResourceKey(2023, "1")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="`part` must be 0, 1 or 2"):
        ResourceKey(2023, 1, 3)


def test_keys_sort_by_year_day_part() -> None:
    """Keys should be ordered so listings are deterministic."""

    keys = [
        ResourceKey(2023, 2),
        ResourceKey(2022, 25),
        ResourceKey(2023, 1, 1),
        ResourceKey(2023, 1),
    ]

    assert sorted(keys) == [
        ResourceKey(2022, 25),
        ResourceKey(2023, 1),
        ResourceKey(2023, 1, 1),
        ResourceKey(2023, 2),
    ]


def test_opaque_strings_become_named_keys() -> None:
    """Strings that do not spell a puzzle day should still be usable keys."""

    key = ResourceKey.parse(" d1 ")

    assert key == ResourceKey.parse("d1") == ResourceKey.named("d1")
    assert key != ResourceKey.parse("d2")
    assert key.is_named
    assert not key.is_example
    assert str(key) == "d1"
    assert key.token == "keys/d1"
    assert ResourceKey.from_token("keys/d1") == key


def test_named_key_tokens_stay_within_one_path_segment() -> None:
    """Encoded names should never contain separators or dot segments."""

    dots = ResourceKey.named("...")
    nested = ResourceKey.named("a/b c")

    assert dots.token == "keys/%2E%2E%2E"
    assert nested.token == "keys/a%2Fb%20c"
    assert ResourceKey.parse(dots.token) == dots
    assert ResourceKey.from_token(nested.token) == nested


@pytest.mark.parametrize("token", ["keys/", "keys/a/b", "keys/%641", "keys/..", "keys/%20"])
def test_from_token_rejects_non_canonical_named_tokens(token: str) -> None:
    """Only the exact encoding of a non-blank name should map back to a key."""

    assert ResourceKey.from_token(token) is None


def test_named_keys_cannot_mix_with_puzzle_fields() -> None:
    """A named key carries only its name."""

    with pytest.raises(ValueError, match="Named keys cannot"):
        ResourceKey(2023, 1, 0, "d1")
    with pytest.raises(ValueError, match="must not be blank"):
        ResourceKey.named("  ")
