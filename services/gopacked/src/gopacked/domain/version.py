from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from itertools import zip_longest


class VersionParseError(ValueError):
    pass


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """Dot-separated integer version, most significant component first.

    Missing trailing components compare as zero, so ``1.2`` equals ``1.2.0``.
    """

    parts: tuple[int, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Version:
        raw = text.strip()
        if not raw:
            raise VersionParseError("empty version string")
        parts: list[int] = []
        for piece in raw.split("."):
            if not (piece.isascii() and piece.isdigit()):
                raise VersionParseError(f"invalid version component {piece!r} in {text!r}")
            parts.append(int(piece))
        return cls(tuple(parts))

    @classmethod
    def of(cls, *parts: int) -> Version:
        return cls(tuple(parts))

    def compare(self, other: Version) -> int:
        for mine, theirs in zip_longest(self.parts, other.parts, fillvalue=0):
            if mine < theirs:
                return -1
            if mine > theirs:
                return 1
        return 0

    def is_empty(self) -> bool:
        return not self.parts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: Version) -> bool:
        return self.compare(other) < 0

    def __hash__(self) -> int:
        trimmed = list(self.parts)
        while trimmed and trimmed[-1] == 0:
            trimmed.pop()
        return hash(tuple(trimmed))

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.parts)


def parse_optional(text: str) -> Version:
    if not text.strip():
        return Version()
    return Version.parse(text)


def parse_and_compare(new: str, old: str) -> int:
    """Compare two raw version strings, raising VersionParseError on bad input.

    A blank string is the empty version, which equals 0.
    """
    return parse_optional(new).compare(parse_optional(old))


TOOL_VERSION = Version.of(0, 4, 0)
