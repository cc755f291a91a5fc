from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from array_heist.load_settings import settings
from array_heist.routers import game
from array_heist.routers.game import broadcast_session, connection_manager, session_registry

scheduler = AsyncIOScheduler()
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))


async def tick_sessions() -> None:
    """Run every live countdown and tell watchers about games that timed out or lost their scan."""
    changed = await session_registry.tick_all()
    changed += await session_registry.release_stale_scans(settings.scan_stale_ms / 1000)
    for game_id in changed:
        # Read without get(): the tick must not count as player activity.
        session = session_registry.sessions.get(game_id)
        if session is None:
            continue
        await broadcast_session(game_id, session)


async def purge_idle_sessions() -> None:
    for game_id in await session_registry.purge_expired(settings.session_ttl_minutes * 60):
        connection_manager.close_game(game_id)


@asynccontextmanager
async def lifespan(app):
    """Start the timer tick and the idle-session purge.
    This function is called to start the server.
    """
    scheduler.add_job(
        tick_sessions,
        "interval",
        seconds=settings.tick_interval_ms / 1000,
        max_instances=1,
        coalesce=True,
    )
    # If a game has been idle too long, drop it
    scheduler.add_job(
        purge_idle_sessions,
        "interval",
        hours=1,
    )
    scheduler.start()
    logging.info(f"Array Heist ready: {settings.slot_count} slots, {settings.time_limit}s timer")
    try:
        yield
    finally:
        scheduler.shutdown()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(game.game_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
