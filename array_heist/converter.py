from uuid import UUID

from array_heist.domain.layout import LayoutDiff
from array_heist.domain.outcomes import Feedback, Highlight, OperationResult
from array_heist.domain.pattern_matcher import MatchResult, ScanStep
from array_heist.domain.session import GameSession
from array_heist.models.heist_models import (
    FeedbackModel,
    GameStateModel,
    HighlightModel,
    LayoutDiffModel,
    MoveModel,
    OperationResultModel,
    ScanStepModel,
    SecretModel,
    SlotModel,
    StateModel,
    VerdictModel,
)


class DataConverter:
    """This class is used to convert engine objects into the models sent to the client."""

    def convert_session_to_statemodel(self, game_id: UUID, session: GameSession) -> StateModel:
        """Convert the GameSession to the StateModel to send client

        Args:
            game_id (UUID): ID to identify the game
            session (GameSession): The live session of the game

        Returns:
            StateModel: The state of the game and is a type for transmission to the client
        """
        ids = session.buffer.ids_snapshot()
        values = session.values()
        secret = None
        if session.secret is not None:
            secret = SecretModel(
                display_digits=list(session.secret.display_digits),
                label=session.secret.label,
                reversed_for_display=session.secret.reversed_for_display,
                length=len(session.secret.digits),
            )
        return StateModel(
            game_id=game_id,
            state=GameStateModel(session.state.value),
            level=session.level,
            time_mode=session.time_mode,
            time_left=session.time_left,
            time_limit=session.time_limit,
            clock_started=session.clock_started,
            scanning=session.scanning,
            won=session.won,
            slots=[
                SlotModel(index=index, item_id=ids[index], value=values[index])
                for index in range(len(ids))
            ],
            secret=secret,
            message=self.convert_feedback(session.last_feedback),
        )

    def convert_feedback(self, feedback: Feedback) -> FeedbackModel:
        return FeedbackModel(
            category=feedback.category.value,
            message=feedback.message,
            cue=feedback.cue.value if feedback.cue is not None else None,
        )

    def convert_highlight(self, highlight: Highlight | None) -> HighlightModel | None:
        if highlight is None:
            return None
        return HighlightModel(
            indices=list(highlight.indices),
            category=highlight.category.value,
            duration_ms=highlight.duration_ms,
        )

    def convert_layout_diff(self, diff: LayoutDiff | None) -> LayoutDiffModel | None:
        if diff is None:
            return None
        return LayoutDiffModel(
            unchanged=list(diff.unchanged),
            moved=[
                MoveModel(item_id=move.item_id, from_index=move.from_index, to_index=move.to_index)
                for move in diff.moved
            ],
            created=list(diff.created),
            removed=list(diff.removed),
        )

    def convert_verdict(self, verdict: MatchResult | None) -> VerdictModel | None:
        if verdict is None:
            return None
        return VerdictModel(found=verdict.found, start=verdict.start)

    def convert_scan_step(self, step: ScanStep) -> ScanStepModel:
        return ScanStepModel(
            position=step.position,
            indices=list(step.indices),
            window=list(step.window),
            matched=step.matched,
            category=step.category,
        )

    def convert_result(
        self, game_id: UUID, session: GameSession, result: OperationResult
    ) -> OperationResultModel:
        """Convert an OperationResult plus the state it left behind

        Args:
            game_id (UUID): ID to identify the game
            session (GameSession): The session the operation ran on
            result (OperationResult): What the session returned

        Returns:
            OperationResultModel: Result and post-operation state for the client
        """
        return OperationResultModel(
            status=result.status.value,
            ok=result.ok,
            error=result.error,
            item_id=result.item_id,
            feedback=self.convert_feedback(result.feedback),
            highlight=self.convert_highlight(result.highlight),
            layout_diff=self.convert_layout_diff(result.layout_diff),
            verdict=self.convert_verdict(result.verdict),
            state=self.convert_session_to_statemodel(game_id, session),
        )
