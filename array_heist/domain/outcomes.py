"""Value types the session hands back to the presentation layer."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from array_heist.domain.layout import LayoutDiff
from array_heist.domain.pattern_matcher import MatchResult, ScanSequence


class FeedbackCategory(str, Enum):
    info = "info"
    success = "success"
    warning = "warning"
    win = "win"
    timeout = "timeout"


class HighlightCategory(str, Enum):
    scanning = "scanning"
    mismatch = "mismatch"
    match = "match"


class Cue(str, Enum):
    beep = "beep"
    buzz = "buzz"
    fanfare = "fanfare"


class ResultStatus(str, Enum):
    applied = "applied"  # state changed as requested
    invalid = "invalid"  # user error, state unchanged
    rejected = "rejected"  # gate closed (idle, scanning, game over), state unchanged


@dataclass(frozen=True)
class Feedback:
    category: FeedbackCategory
    message: str
    cue: Optional[Cue] = None


@dataclass(frozen=True)
class Highlight:
    indices: Tuple[int, ...]
    category: HighlightCategory
    duration_ms: int


@dataclass
class OperationResult:
    status: ResultStatus
    feedback: Feedback
    error: Optional[str] = None
    item_id: Optional[int] = None
    highlight: Optional[Highlight] = None
    layout_diff: Optional[LayoutDiff] = None
    scan: Optional[ScanSequence] = field(default=None, repr=False)
    verdict: Optional[MatchResult] = None

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.applied
