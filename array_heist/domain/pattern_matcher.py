"""Sliding-window search of a digit pattern over a slot buffer snapshot.

The search is exposed as a `ScanSequence`: iterating it yields one `ScanStep`
per window position, in increasing order, followed by exactly one `MatchResult`.
Iterating again replays the same sequence, so a client can pace or redraw the
scan without touching the engine.
"""
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple, Union

from array_heist.domain.errors import InvalidPattern
from array_heist.domain.slot_buffer import is_integer

PATTERN_HINT = "Enter a valid pattern (e.g., 1,2,3)."

_DELIMITERS = re.compile(r"\s*[,;]\s*|\s+")
_DIGIT = re.compile(r"[0-9]")


@dataclass(frozen=True)
class ScanStep:
    position: int
    indices: Tuple[int, ...]
    window: Tuple[Optional[int], ...]
    matched: bool
    kind: str = field(default="window", init=False)

    @property
    def category(self) -> str:
        return "match" if self.matched else "mismatch"


@dataclass(frozen=True)
class MatchResult:
    start: Optional[int] = None
    kind: str = field(default="verdict", init=False)

    @property
    def found(self) -> bool:
        return self.start is not None


NOT_FOUND = MatchResult()


def parse_pattern(raw: Union[str, Sequence[int]], slot_count: int) -> Tuple[int, ...]:
    """Parse player input into a tuple of digits.

    Accepts "1,7,3", "1 7 3", "1;7;3" or "[1, 7, 3]", or a list of ints.

    Raises:
        InvalidPattern: empty input, a token that is not a single digit, or a
            pattern longer than the buffer
    """
    if isinstance(raw, str):
        body = raw.strip()
        if body.startswith("[") and body.endswith("]"):
            body = body[1:-1].strip()
        if not body:
            raise InvalidPattern(PATTERN_HINT)
        tokens = _DELIMITERS.split(body)
        if not all(_DIGIT.fullmatch(token) for token in tokens):
            raise InvalidPattern(PATTERN_HINT)
        pattern = tuple(int(token) for token in tokens)
    else:
        try:
            pattern = tuple(raw)
        except TypeError:
            raise InvalidPattern(PATTERN_HINT) from None
        if not pattern or not all(is_integer(d) and 0 <= d <= 9 for d in pattern):
            raise InvalidPattern(PATTERN_HINT)

    if len(pattern) > slot_count:
        raise InvalidPattern(f"Pattern is longer than the board ({slot_count} slots).")
    return pattern


class ScanSequence:
    """Restartable, finite scan over a frozen snapshot."""

    def __init__(self, snapshot: Sequence[Optional[int]], pattern: Sequence[int]):
        self.snapshot: Tuple[Optional[int], ...] = tuple(snapshot)
        self.pattern: Tuple[int, ...] = tuple(pattern)
        if not self.pattern or len(self.pattern) > len(self.snapshot):
            raise InvalidPattern(f"Pattern is longer than the board ({len(self.snapshot)} slots).")

    def __iter__(self) -> Iterator[Union[ScanStep, MatchResult]]:
        k = len(self.pattern)
        for start in range(len(self.snapshot) - k + 1):
            window = self.snapshot[start:start + k]
            # Empty slots are None and never compare equal to a digit.
            matched = window == self.pattern
            yield ScanStep(
                position=start,
                indices=tuple(range(start, start + k)),
                window=window,
                matched=matched,
            )
            if matched:
                yield MatchResult(start)
                return
        yield NOT_FOUND

    def steps(self) -> Iterator[ScanStep]:
        for event in self:
            if isinstance(event, ScanStep):
                yield event

    def verdict(self) -> MatchResult:
        result = NOT_FOUND
        for event in self:
            if isinstance(event, MatchResult):
                result = event
        return result


def search(snapshot: Sequence[Optional[int]], pattern: Sequence[int]) -> MatchResult:
    """Return the lowest window start where pattern occurs in snapshot."""
    return ScanSequence(snapshot, pattern).verdict()
