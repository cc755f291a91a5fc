import asyncio
import logging
from typing import AsyncGenerator, Awaitable, Callable, Optional
from uuid import UUID

from array_heist.converter import DataConverter
from array_heist.domain.outcomes import ResultStatus
from array_heist.domain.pattern_matcher import ScanSequence
from array_heist.domain.session import GameSession
from array_heist.models.heist_models import OperationResultModel

data_converter = DataConverter()


class ScanStreamer:
    """Paces a scan sequence out to the client as server-sent events."""

    def __init__(
        self,
        game_id: UUID,
        session: GameSession,
        scan: ScanSequence,
        scan_delay_ms: int,
        notify: Optional[Callable[[OperationResultModel], Awaitable[None]]] = None,
    ):
        """Initialize ScanStreamer with the session, the scan it started and the pacing delay."""
        self.game_id = game_id
        self.session = session
        self.scan = scan
        self.scan_delay: float = max(0, scan_delay_ms) / 1000
        self.notify = notify

    async def event_generator(self) -> AsyncGenerator[str, None]:
        """Event generator to handle SSE events.

        Yields one `scan_step` event per window, then a single `verdict` event
        carrying the result and the state it left behind. If the scan is
        abandoned (reset or timeout) the stream ends without a verdict.
        """
        try:
            for step in self.scan.steps():
                if not self.session.is_active_scan(self.scan):
                    logging.info(f"Scan for game {self.game_id} abandoned before window {step.position}")
                    return
                self.session.touch_scan(self.scan)
                payload = data_converter.convert_scan_step(step).model_dump_json()
                logging.debug(f"Payload: {payload}")
                yield f"event: scan_step\ndata: {payload}\n\n"
                await asyncio.sleep(self.scan_delay)

            result = self.session.complete_search(self.scan)
            if result.status == ResultStatus.rejected:
                logging.info(f"Scan for game {self.game_id} abandoned before its verdict")
                if self.notify is not None and self.session.take_timeout_notice():
                    await self.notify(
                        data_converter.convert_result(self.game_id, self.session, result)
                    )
                return

            result_model = data_converter.convert_result(self.game_id, self.session, result)
            yield f"event: verdict\ndata: {result_model.model_dump_json()}\n\n"
            if self.notify is not None:
                await self.notify(result_model)
        finally:
            # Client went away mid-stream: release the scanning gate.
            self.session.cancel_search(self.scan)
