"""Canonical identity for cacheable puzzle resources.

Responsibilities:
- Give every fetchable resource one hashable, ordered key.
- Parse the loose spellings hosts use (`"2023-day1"`, `"2023/1"`, tuples).
- Accept any other non-blank string as an opaque named key.
- Map keys to and from stable relative store tokens so distinct keys never collide.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from urllib.parse import quote, unquote


FIRST_EVENT_YEAR = 2015
LAST_PUZZLE_DAY = 25

_EXAMPLES_PREFIX = "examples"
_NAMED_PREFIX = "keys"
_LOOSE_KEY_PATTERN = re.compile(
    r"""
    ^\s*(?P<year>\d{4})
    \s*[-/_:. ]?\s*(?:day\s*)?(?P<day>\d{1,2})
    (?:\s*[-/_:. ]\s*(?:part\s*)?(?P<part>[012]))?
    \s*$
    """,
    re.IGNORECASE | re.VERBOSE,
)
_INPUT_TOKEN_PATTERN = re.compile(r"^(?P<year>\d{4})/(?P<day>\d{1,2})$")
_EXAMPLE_TOKEN_PATTERN = re.compile(
    rf"^{_EXAMPLES_PREFIX}/(?P<year>\d{{4}})/(?P<day>\d{{1,2}})_(?P<part>[12])$"
)


def _encode_name(name: str) -> str:
    """Percent-encode a name into one path segment that cannot be `.` or `..`."""

    return quote(name, safe="").replace(".", "%2E")


@dataclass(frozen=True, slots=True, order=True)
class ResourceKey:
    """Identity of one fetchable resource.

    Attributes:
        year: Event year (`0` for named keys).
        day: Puzzle day within the event (`0` for named keys).
        part: `0` for the personal puzzle input, `1`/`2` for the puzzle page
            as seen while solving that part.
        name: Opaque host-chosen name; empty for puzzle keys.
    """

    year: int
    day: int
    part: int = 0
    name: str = ""

    def __post_init__(self) -> None:
        """Validate key ranges so malformed keys never reach cache or store."""

        for field_name in ("year", "day", "part"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"`{field_name}` must be an integer, got {value!r}.")
        if not isinstance(self.name, str):
            raise ValueError(f"`name` must be a string, got {self.name!r}.")
        if self.name:
            if not self.name.strip():
                raise ValueError("`name` must not be blank.")
            if (self.year, self.day, self.part) != (0, 0, 0):
                raise ValueError("Named keys cannot also carry a year, day or part.")
            return
        if self.year < FIRST_EVENT_YEAR:
            raise ValueError(f"`year` must be {FIRST_EVENT_YEAR} or later, got {self.year}.")
        if not 1 <= self.day <= LAST_PUZZLE_DAY:
            raise ValueError(f"`day` must be between 1 and {LAST_PUZZLE_DAY}, got {self.day}.")
        if self.part not in (0, 1, 2):
            raise ValueError(f"`part` must be 0, 1 or 2, got {self.part}.")

    @classmethod
    def named(cls, name: str) -> ResourceKey:
        """Return the opaque key for a host-chosen name."""

        return cls(0, 0, 0, name)

    @property
    def is_named(self) -> bool:
        """Return whether this is an opaque named key."""

        return bool(self.name)

    @property
    def is_example(self) -> bool:
        """Return whether this key addresses a puzzle page rather than an input."""

        return self.part != 0

    @property
    def token(self) -> str:
        """Return the canonical relative store path for this key."""

        if self.is_named:
            return f"{_NAMED_PREFIX}/{_encode_name(self.name)}"
        if self.is_example:
            return f"{_EXAMPLES_PREFIX}/{self.year}/{self.day}_{self.part}"
        return f"{self.year}/{self.day}"

    @classmethod
    def from_token(cls, token: str) -> ResourceKey | None:
        """Parse a canonical store token, returning `None` for foreign tokens."""

        match = _INPUT_TOKEN_PATTERN.match(token)
        if match is not None:
            return cls._from_match(match, part=0)
        match = _EXAMPLE_TOKEN_PATTERN.match(token)
        if match is not None:
            return cls._from_match(match, part=int(match.group("part")))
        prefix = f"{_NAMED_PREFIX}/"
        if token.startswith(prefix):
            encoded = token[len(prefix):]
            if not encoded or "/" in encoded:
                return None
            name = unquote(encoded)
            if not name.strip() or _encode_name(name) != encoded:
                return None
            return cls.named(name)
        return None

    @classmethod
    def parse(cls, value: object) -> ResourceKey:
        """Coerce a key, `(year, day[, part])` tuple, or string into a key.

        Strings that spell a puzzle day must be in range; any other non-blank
        string becomes an opaque named key.

        Raises:
            ValueError: If the value does not identify a valid resource.
        """

        if isinstance(value, ResourceKey):
            return value
        if isinstance(value, tuple) and len(value) in (2, 3):
            return cls(*value)
        if isinstance(value, str):
            text = value.strip()
            from_token = cls.from_token(text)
            if from_token is not None:
                return from_token
            match = _LOOSE_KEY_PATTERN.match(text)
            if match is not None:
                part = match.group("part")
                return cls(
                    int(match.group("year")),
                    int(match.group("day")),
                    int(part) if part is not None else 0,
                )
            if text:
                return cls.named(text)
        raise ValueError(f"Cannot interpret {value!r} as a puzzle resource key.")

    @classmethod
    def _from_match(cls, match: re.Match[str], *, part: int) -> ResourceKey | None:
        """Build a key from a regex match, returning `None` when out of range."""

        try:
            return cls(int(match.group("year")), int(match.group("day")), part)
        except ValueError:
            return None

    def __str__(self) -> str:
        if self.is_named:
            return self.name
        if self.is_example:
            return f"{self.year}-day{self.day}-part{self.part}"
        return f"{self.year}-day{self.day}"
