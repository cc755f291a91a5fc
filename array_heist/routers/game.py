import logging
from typing import Callable
from uuid import UUID

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect, status
from fastapi.responses import StreamingResponse

from array_heist.converter import DataConverter
from array_heist.domain.errors import InvalidLevel, UnknownId
from array_heist.domain.outcomes import OperationResult, ResultStatus
from array_heist.domain.secret_pattern import validate_level
from array_heist.domain.session import GameSession
from array_heist.load_settings import settings
from array_heist.manager import ConnectionManager
from array_heist.models.heist_models import (
    DeleteModel,
    GameCreatedModel,
    InsertModel,
    NewGameModel,
    OperationResultModel,
    ResetModel,
    SearchModel,
    StateModel,
    TimeModeModel,
)
from array_heist.scan_streamer import ScanStreamer
from array_heist.session_registry import SessionRegistry

game_router = APIRouter()
session_registry = SessionRegistry()
connection_manager = ConnectionManager()
data_converter = DataConverter()


async def read_session(game_id: UUID) -> GameSession:
    """Get the live session or answer 404

    Args:
        game_id (UUID): ID to identify the game

    Returns:
        GameSession: The session of the game
    """
    session = await session_registry.get(game_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Game not found.",
        )
    return session


async def run_operation(
    game_id: UUID, session: GameSession, operation: Callable[[], OperationResult]
) -> OperationResult:
    """Run one session operation and translate gate rejections into 409

    A broken registry invariant is a server error, not something the player can fix.
    If the operation is what noticed the clock running out, watchers hear about it here.
    """
    try:
        result = operation()
    except UnknownId as e:
        logging.error(f"Game {game_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Game state is corrupted. Start a new game.",
        )
    await report_timeout(game_id, session)
    if result.status == ResultStatus.rejected:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": result.error, "message": result.feedback.message},
        )
    return result


async def broadcast_state(result_model: OperationResultModel) -> None:
    state = result_model.state
    await connection_manager.broadcast(
        {"event": "state_update", "data": state.model_dump(mode="json")}, state.game_id
    )


async def broadcast_session(game_id: UUID, session: GameSession) -> None:
    state = data_converter.convert_session_to_statemodel(game_id, session)
    await connection_manager.broadcast(
        {"event": "state_update", "data": state.model_dump(mode="json")}, game_id
    )


async def report_timeout(game_id: UUID, session: GameSession) -> None:
    if session.take_timeout_notice():
        logging.info(f"Game {game_id} timed out during a request")
        await broadcast_session(game_id, session)


async def respond(game_id: UUID, session: GameSession, result: OperationResult) -> OperationResultModel:
    result_model = data_converter.convert_result(game_id, session, result)
    if result.ok:
        await broadcast_state(result_model)
    return result_model


class GameServer:
    @staticmethod
    @game_router.post("/start-game", response_model=GameCreatedModel)
    async def start_game(new_game: NewGameModel) -> GameCreatedModel:
        """Create a game session and load the first mission

        Args:
            new_game (NewGameModel):
                    level: int | None
                    time_mode: bool

        Returns:
            GameCreatedModel: game_id and the freshly reset state
        """
        level = new_game.level if new_game.level is not None else settings.default_level
        try:
            validate_level(level)
        except InvalidLevel as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=e.message,
            )

        session = GameSession(
            slot_count=settings.slot_count,
            time_limit=settings.time_limit,
            level=level,
            time_mode=new_game.time_mode,
            auto_check_win=settings.auto_check_win,
            highlight_ms=settings.highlight_ms,
        )
        session.reset()
        game_id = await session_registry.create(session)
        return GameCreatedModel(
            game_id=game_id,
            state=data_converter.convert_session_to_statemodel(game_id, session),
        )

    @staticmethod
    @game_router.get("/games/{game_id}", response_model=StateModel)
    async def read_state(game_id: UUID) -> StateModel:
        session = await read_session(game_id)
        session.tick()
        await report_timeout(game_id, session)
        return data_converter.convert_session_to_statemodel(game_id, session)

    @staticmethod
    @game_router.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_game(game_id: UUID) -> None:
        if not await session_registry.remove(game_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Game not found.",
            )
        connection_manager.close_game(game_id)


class MoveServer:
    @staticmethod
    @game_router.post("/games/{game_id}/insert", response_model=OperationResultModel)
    async def insert(game_id: UUID, insert_data: InsertModel) -> OperationResultModel:
        """Insert a digit, shifting later slots right

        Args:
            game_id (UUID): ID to identify the game
            insert_data (InsertModel): index and value to insert

        Returns:
            OperationResultModel: applied or invalid result with the new state
        """
        session = await read_session(game_id)
        result = await run_operation(
            game_id, session, lambda: session.insert(insert_data.index, insert_data.value)
        )
        return await respond(game_id, session, result)

    @staticmethod
    @game_router.post("/games/{game_id}/delete", response_model=OperationResultModel)
    async def delete(game_id: UUID, delete_data: DeleteModel) -> OperationResultModel:
        session = await read_session(game_id)
        result = await run_operation(
            game_id, session, lambda: session.delete(delete_data.index)
        )
        return await respond(game_id, session, result)

    @staticmethod
    @game_router.post("/games/{game_id}/search")
    async def search(game_id: UUID, search_data: SearchModel):
        """Start a scan and stream it window by window

        An invalid pattern answers with a plain OperationResultModel. Otherwise the
        response is an event stream of scan_step events followed by one verdict.
        """
        session = await read_session(game_id)
        result = await run_operation(
            game_id, session, lambda: session.begin_search(search_data.pattern)
        )
        if not result.ok:
            return await respond(game_id, session, result)

        logging.info(f"Streaming scan for game {game_id}")
        streamer = ScanStreamer(
            game_id,
            session,
            result.scan,
            settings.scan_delay_ms,
            notify=broadcast_state,
        )
        return StreamingResponse(
            streamer.event_generator(),
            media_type="text/event-stream; charset=utf-8",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )


class SettingsServer:
    @staticmethod
    @game_router.post("/games/{game_id}/reset", response_model=OperationResultModel)
    async def reset(game_id: UUID, reset_data: ResetModel | None = None) -> OperationResultModel:
        session = await read_session(game_id)
        level = reset_data.level if reset_data is not None else None
        result = await run_operation(game_id, session, lambda: session.reset(level))
        return await respond(game_id, session, result)

    @staticmethod
    @game_router.post("/games/{game_id}/start-clock", response_model=OperationResultModel)
    async def start_clock(game_id: UUID) -> OperationResultModel:
        session = await read_session(game_id)
        result = await run_operation(game_id, session, session.start_clock)
        return await respond(game_id, session, result)

    @staticmethod
    @game_router.post("/games/{game_id}/time-mode", response_model=OperationResultModel)
    async def time_mode(game_id: UUID, time_mode_data: TimeModeModel) -> OperationResultModel:
        session = await read_session(game_id)
        result = await run_operation(
            game_id, session, lambda: session.set_time_mode(time_mode_data.enabled)
        )
        return await respond(game_id, session, result)


@game_router.websocket("/ws/{game_id}")
async def watch_game(websocket: WebSocket, game_id: UUID):
    """Push state_update messages for one game until the client goes away."""
    session = await session_registry.get(game_id)
    if session is None:
        await websocket.close(code=1008)
        return

    await connection_manager.connect(websocket, game_id)
    try:
        state = data_converter.convert_session_to_statemodel(game_id, session)
        await connection_manager.send_personal_message(
            {"event": "state_update", "data": state.model_dump(mode="json")}, websocket
        )
        while True:
            # Client messages carry nothing; reading keeps the disconnect visible.
            await websocket.receive_text()
    except WebSocketDisconnect:
        connection_manager.disconnect(websocket, game_id)
