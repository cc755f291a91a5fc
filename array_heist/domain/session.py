"""Session controller.

States: idle -> playing <-> scanning, playing|scanning -> won | timed_out.
won and timed_out are terminal until reset().

One operation is in flight at a time: while a scan is running, or once the
game is over, every mutating call comes back `rejected` and leaves the board
as it was. The countdown is derived from a captured start instant, never
accumulated per tick, and each call re-evaluates it before doing anything else.
"""
import logging
import random
import time
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

from array_heist.domain.errors import HeistError, TimeModeOff
from array_heist.domain.item_registry import ItemRegistry
from array_heist.domain.layout import diff_layouts
from array_heist.domain.outcomes import (
    Cue,
    Feedback,
    FeedbackCategory,
    Highlight,
    HighlightCategory,
    OperationResult,
    ResultStatus,
)
from array_heist.domain.pattern_matcher import ScanSequence, parse_pattern, search
from array_heist.domain.secret_pattern import SecretPattern, regenerate, validate_level
from array_heist.domain.slot_buffer import DEFAULT_SLOT_COUNT, SlotBuffer

DEFAULT_LEVEL = 2
DEFAULT_TIME_LIMIT = 60
DEFAULT_HIGHLIGHT_MS = 350


class GameState(str, Enum):
    idle = "idle"
    playing = "playing"
    scanning = "scanning"
    won = "won"
    timed_out = "timed_out"


TERMINAL_STATES = (GameState.won, GameState.timed_out)


class GameSession:
    def __init__(
        self,
        slot_count: int = DEFAULT_SLOT_COUNT,
        time_limit: int = DEFAULT_TIME_LIMIT,
        level: int = DEFAULT_LEVEL,
        time_mode: bool = False,
        *,
        auto_check_win: bool = False,
        highlight_ms: int = DEFAULT_HIGHLIGHT_MS,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ):
        self.registry = ItemRegistry()
        self.buffer = SlotBuffer(self.registry, slot_count)
        self.level = validate_level(level)
        self.time_limit = time_limit
        self.time_mode = time_mode
        self.auto_check_win = auto_check_win
        self.highlight_ms = highlight_ms
        self.clock = clock
        self.rng = rng or random.Random()

        self.state = GameState.idle
        self.secret: Optional[SecretPattern] = None
        self.time_left = time_limit
        self.clock_started = False
        self._started_at: Optional[float] = None
        self._active_scan: Optional[ScanSequence] = None
        self._scan_touched_at: Optional[float] = None
        self._timeout_unreported = False
        self.last_feedback = Feedback(FeedbackCategory.info, "Start a new game to load a mission.")

    @property
    def scanning(self) -> bool:
        return self.state == GameState.scanning

    @property
    def won(self) -> bool:
        return self.state == GameState.won

    @property
    def terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def clock_running(self) -> bool:
        return self._started_at is not None

    def values(self) -> Tuple[Optional[int], ...]:
        return self.buffer.values_snapshot()

    def layout(self) -> Dict[int, int]:
        return self.buffer.layout()

    def is_active_scan(self, scan: ScanSequence) -> bool:
        return scan is not None and scan is self._active_scan

    # ---- timer ---------------------------------------------------------------

    def tick(self) -> bool:
        """Re-evaluate the countdown.

        Returns:
            bool: True when this call is the one that ran the clock out
        """
        if self._started_at is None or self.state not in (GameState.playing, GameState.scanning):
            return False

        elapsed = max(0.0, self.clock() - self._started_at)
        self.time_left = max(0, self.time_limit - int(elapsed))
        if self.time_left > 0:
            return False

        if self._active_scan is not None:
            logging.info("Scan abandoned: clock ran out mid-scan")
        self._active_scan = None
        self._started_at = None
        self.state = GameState.timed_out
        self._timeout_unreported = True
        self.last_feedback = Feedback(
            FeedbackCategory.timeout,
            "Time's up! The vault remains sealed... Try again.",
            Cue.buzz,
        )
        logging.info(f"Game timed out at level {self.level}")
        return True

    def take_timeout_notice(self) -> bool:
        """True once per timeout, for whichever caller reports it to watchers."""
        unreported = self._timeout_unreported
        self._timeout_unreported = False
        return unreported

    def _start_clock_on_first_move(self) -> None:
        if self.time_mode and not self.clock_started:
            self.clock_started = True
            self._started_at = self.clock()
            self.time_left = self.time_limit
            logging.debug("Clock started by first move")

    # ---- result helpers ------------------------------------------------------

    def _gate(self) -> Optional[OperationResult]:
        """Return a rejection when the current state does not accept input."""
        if self.state == GameState.idle:
            reason, message = "idle", "Start a new game first."
        elif self.state == GameState.scanning:
            reason, message = "scanning", "Hold on, a scan is in progress."
        elif self.state == GameState.won:
            reason, message = "won", "The vault is already open. Reset to play again."
        elif self.state == GameState.timed_out:
            reason, message = "timed_out", "Time's up. Reset to play again."
        else:
            return None
        return OperationResult(
            status=ResultStatus.rejected,
            feedback=Feedback(FeedbackCategory.warning, message),
            error=reason,
        )

    def _invalid(self, error: HeistError) -> OperationResult:
        highlight = None
        if error.index is not None:
            highlight = Highlight(
                (self.buffer.clamp_index(error.index),),
                HighlightCategory.mismatch,
                self.highlight_ms,
            )
        logging.info(f"Invalid input ({type(error).__name__}): {error.message}")
        return OperationResult(
            status=ResultStatus.invalid,
            feedback=Feedback(FeedbackCategory.warning, error.message, Cue.buzz),
            error=type(error).__name__,
            highlight=highlight,
        )

    def _applied(self, feedback: Feedback, **kwargs) -> OperationResult:
        self.last_feedback = feedback
        return OperationResult(status=ResultStatus.applied, feedback=feedback, **kwargs)

    def _win(self, result: OperationResult) -> OperationResult:
        self.state = GameState.won
        self._started_at = None
        result.feedback = Feedback(
            FeedbackCategory.win,
            f"ACCESS GRANTED! You cracked the vault with {self.secret.display_text()}.",
            Cue.fanfare,
        )
        self.last_feedback = result.feedback
        logging.info(f"Vault cracked at level {self.level} with {self.time_left}s left")
        return result

    def _secret_on_board(self) -> bool:
        return search(self.values(), self.secret.digits).found

    # ---- operations ----------------------------------------------------------

    def reset(self, level: int | None = None) -> OperationResult:
        """Wipe the board, draw a new secret and enter playing.

        Args:
            level (int | None): New level, or None to keep the current one
        """
        if level is not None:
            try:
                level = validate_level(level)
            except HeistError as e:
                return self._invalid(e)
            self.level = level

        before = self.layout()
        if self._active_scan is not None:
            logging.info("Scan abandoned: game reset mid-scan")
        self._active_scan = None
        self.buffer.clear()
        self._timeout_unreported = False
        self.registry.reset()
        self.secret = regenerate(self.level, self.rng)
        self.time_left = self.time_limit
        self.clock_started = False
        self._started_at = None
        self.state = GameState.playing
        logging.info(f"New mission at level {self.level}, time_mode={self.time_mode}")
        return self._applied(
            Feedback(
                FeedbackCategory.info,
                "Board reset. New mission loaded. Insert digits and find the secret pattern!",
            ),
            layout_diff=diff_layouts(before, self.layout()),
        )

    def set_time_mode(self, enabled: bool) -> OperationResult:
        if self.state != GameState.idle:
            self.tick()
            rejection = self._gate()
            if rejection is not None:
                return rejection

        self.time_mode = bool(enabled)
        self.time_left = self.time_limit
        self.clock_started = False
        self._started_at = None
        message = (
            "Time mode on: the clock starts with your first move."
            if self.time_mode
            else "Time mode off."
        )
        return self._applied(Feedback(FeedbackCategory.info, message))

    def start_clock(self) -> OperationResult:
        """Start (or restart) the countdown from the full allotment."""
        self.tick()
        rejection = self._gate()
        if rejection is not None:
            return rejection
        if not self.time_mode:
            return self._invalid(TimeModeOff("Turn on time mode to use the clock."))

        self.clock_started = True
        self._started_at = self.clock()
        self.time_left = self.time_limit
        return self._applied(
            Feedback(FeedbackCategory.info, f"Clock started: {self.time_limit}s on the timer.")
        )

    def insert(self, index: int, value: int) -> OperationResult:
        self.tick()
        rejection = self._gate()
        if rejection is not None:
            return rejection

        before = self.layout()
        try:
            item_id = self.buffer.insert(index, value)
        except HeistError as e:
            return self._invalid(e)

        self._start_clock_on_first_move()
        logging.info(f"Inserted {value} at index {index} (item {item_id})")
        result = self._applied(
            Feedback(FeedbackCategory.success, f"Inserted {value} at index {index}!", Cue.beep),
            item_id=item_id,
            highlight=Highlight((index,), HighlightCategory.scanning, self.highlight_ms),
            layout_diff=diff_layouts(before, self.layout()),
        )
        if self.auto_check_win and self._secret_on_board():
            return self._win(result)
        return result

    def delete(self, index: int) -> OperationResult:
        self.tick()
        rejection = self._gate()
        if rejection is not None:
            return rejection

        before = self.layout()
        try:
            item_id = self.buffer.delete(index)
        except HeistError as e:
            return self._invalid(e)

        self._start_clock_on_first_move()
        logging.info(f"Deleted index {index} (item {item_id})")
        result = self._applied(
            Feedback(FeedbackCategory.success, f"Deleted element at index {index}.", Cue.beep),
            item_id=item_id,
            highlight=Highlight((index,), HighlightCategory.scanning, self.highlight_ms),
            layout_diff=diff_layouts(before, self.layout()),
        )
        if self.auto_check_win and self._secret_on_board():
            return self._win(result)
        return result

    def begin_search(self, pattern: Union[str, Sequence[int]]) -> OperationResult:
        """Freeze the board into a scan sequence and enter scanning.

        The returned result carries the sequence in `scan`. Hand it back to
        complete_search() once the client has played it through.
        """
        self.tick()
        rejection = self._gate()
        if rejection is not None:
            return rejection

        try:
            digits = parse_pattern(pattern, self.buffer.size)
            scan = ScanSequence(self.values(), digits)
        except HeistError as e:
            return self._invalid(e)

        self._active_scan = scan
        self.state = GameState.scanning
        self._scan_touched_at = self.clock()
        logging.info(f"Scanning for pattern {list(digits)}")
        return self._applied(
            Feedback(
                FeedbackCategory.info,
                f"Searching for pattern [ {', '.join(str(d) for d in digits)} ]...",
            ),
            scan=scan,
        )

    def complete_search(self, scan: ScanSequence) -> OperationResult:
        """Apply the verdict of a scan started by begin_search().

        A scan abandoned by reset() or a timeout produces no verdict.
        """
        self.tick()
        if not self.is_active_scan(scan):
            return OperationResult(
                status=ResultStatus.rejected,
                feedback=Feedback(FeedbackCategory.warning, "Search abandoned."),
                error="abandoned",
            )

        verdict = scan.verdict()
        self._active_scan = None
        self.state = GameState.playing

        if not verdict.found:
            logging.info("Pattern not found")
            return self._applied(
                Feedback(FeedbackCategory.warning, "Pattern not found.", Cue.buzz),
                verdict=verdict,
            )

        window = tuple(range(verdict.start, verdict.start + len(scan.pattern)))
        result = self._applied(
            Feedback(
                FeedbackCategory.info,
                f"Pattern found at index {verdict.start}, but the vault stays shut.",
                Cue.beep,
            ),
            highlight=Highlight(window, HighlightCategory.match, self.highlight_ms),
            verdict=verdict,
        )
        logging.info(f"Pattern found at index {verdict.start}")
        if scan.pattern == self.secret.digits:
            return self._win(result)
        return result

    def cancel_search(self, scan: ScanSequence) -> bool:
        """Drop an in-flight scan without a verdict and go back to playing.

        Returns:
            bool: False if scan was not the active one
        """
        if not self.is_active_scan(scan):
            return False
        self._active_scan = None
        self.state = GameState.playing
        logging.info("Scan cancelled before its verdict")
        return True

    def touch_scan(self, scan: ScanSequence) -> None:
        """Mark the active scan as still being consumed."""
        if self.is_active_scan(scan):
            self._scan_touched_at = self.clock()

    def release_stale_scan(self, max_idle_seconds: float) -> bool:
        """Cancel a scan nobody has advanced for max_idle_seconds.

        A stream whose client vanished before the first step never runs its
        cleanup, so the scan has to be dropped from outside.

        Returns:
            bool: True if a scan was released
        """
        if self._active_scan is None or self._scan_touched_at is None:
            return False
        if self.clock() - self._scan_touched_at <= max_idle_seconds:
            return False
        logging.info(f"Releasing scan idle for more than {max_idle_seconds}s")
        return self.cancel_search(self._active_scan)

    def search(self, pattern: Union[str, Sequence[int]]) -> OperationResult:
        """begin_search() and complete_search() back to back."""
        started = self.begin_search(pattern)
        if not started.ok:
            return started
        return self.complete_search(started.scan)
