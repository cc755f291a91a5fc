import asyncio

from array_heist.domain.session import GameState
from array_heist.session_registry import SessionRegistry


def test_create_get_remove(make_session, clock):
    registry = SessionRegistry(clock=clock)
    session = make_session()

    async def scenario():
        game_id = await registry.create(session)
        assert await registry.get(game_id) is session
        assert len(registry) == 1
        assert await registry.remove(game_id) is True
        assert await registry.remove(game_id) is False
        assert await registry.get(game_id) is None

    asyncio.run(scenario())


def test_game_ids_are_unique(make_session, clock):
    registry = SessionRegistry(clock=clock)

    async def scenario():
        return {await registry.create(make_session()) for _ in range(5)}

    assert len(asyncio.run(scenario())) == 5


def test_tick_all_reports_only_fresh_timeouts(make_session, clock):
    registry = SessionRegistry(clock=clock)
    timed = make_session(time_mode=True)
    untimed = make_session()
    timed.insert(0, 1)
    untimed.insert(0, 1)

    async def scenario():
        timed_id = await registry.create(timed)
        await registry.create(untimed)
        assert await registry.tick_all() == []
        clock.advance(60)
        assert await registry.tick_all() == [timed_id]
        # Already terminal: not reported twice.
        assert await registry.tick_all() == []

    asyncio.run(scenario())
    assert timed.state == GameState.timed_out
    assert untimed.state == GameState.playing


def test_purge_expired_keeps_recently_used(make_session, clock):
    registry = SessionRegistry(clock=clock)

    async def scenario():
        stale = await registry.create(make_session())
        fresh = await registry.create(make_session())
        clock.advance(90)
        await registry.get(fresh)
        clock.advance(20)
        assert await registry.purge_expired(100) == [stale]
        assert await registry.get(stale) is None
        assert await registry.get(fresh) is not None

    asyncio.run(scenario())


def test_tick_all_reports_timeout_noticed_by_a_move(make_session, clock):
    registry = SessionRegistry(clock=clock)
    session = make_session(time_mode=True)
    session.insert(0, 1)

    async def scenario():
        game_id = await registry.create(session)
        clock.advance(61)
        session.insert(0, 2)
        assert session.state == GameState.timed_out
        assert await registry.tick_all() == [game_id]
        assert await registry.tick_all() == []

    asyncio.run(scenario())


def test_release_stale_scans(make_session, clock):
    registry = SessionRegistry(clock=clock)
    stuck = make_session()
    stuck.begin_search("1")
    idle = make_session()

    async def scenario():
        stuck_id = await registry.create(stuck)
        await registry.create(idle)
        assert await registry.release_stale_scans(5) == []
        clock.advance(6)
        assert await registry.release_stale_scans(5) == [stuck_id]

    asyncio.run(scenario())
    assert stuck.state == GameState.playing
