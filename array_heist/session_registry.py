import logging
import time
from asyncio import Lock
from typing import Callable, Dict, List
from uuid import UUID

from uuid6 import uuid7

from array_heist.domain.session import GameSession


class SessionRegistry:
    """Live game sessions keyed by game_id. Everything stays in memory."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.sessions: Dict[UUID, GameSession] = {}  # game_idごとのGameSession
        self.last_access: Dict[UUID, float] = {}
        self.clock = clock
        self.lock = Lock()  # sessions/last_accessへのアクセスを保護

    async def create(self, session: GameSession) -> UUID:
        """Register a session under a fresh game_id

        Args:
            session (GameSession): Session to keep alive

        Returns:
            UUID: ID to identify this game
        """
        game_id = uuid7()
        async with self.lock:
            self.sessions[game_id] = session
            self.last_access[game_id] = self.clock()
        logging.info(f"Created game {game_id}")
        return game_id

    async def get(self, game_id: UUID) -> GameSession | None:
        """Get the session of the specified game_id and mark it as used

        Args:
            game_id (UUID): ID to identify this game

        Returns:
            GameSession | None: None if the game is unknown or was purged
        """
        async with self.lock:
            session = self.sessions.get(game_id)
            if session is not None:
                self.last_access[game_id] = self.clock()
            return session

    async def remove(self, game_id: UUID) -> bool:
        async with self.lock:
            if game_id not in self.sessions:
                return False
            del self.sessions[game_id]
            del self.last_access[game_id]
        logging.info(f"Removed game {game_id}")
        return True

    async def tick_all(self) -> List[UUID]:
        """Tick every session's countdown

        A timeout first noticed by a player request is reported here too,
        unless the request already reported it.

        Returns:
            List[UUID]: game_ids with a timeout nobody has reported yet
        """
        timed_out = []
        async with self.lock:
            for game_id, session in self.sessions.items():
                session.tick()
                if session.take_timeout_notice():
                    timed_out.append(game_id)
        return timed_out

    async def release_stale_scans(self, max_idle_seconds: float) -> List[UUID]:
        """Drop scans whose event stream stopped being consumed

        Args:
            max_idle_seconds (float): Time without a scan step after which the scan is dropped

        Returns:
            List[UUID]: game_ids that went back to playing
        """
        async with self.lock:
            return [
                game_id
                for game_id, session in self.sessions.items()
                if session.release_stale_scan(max_idle_seconds)
            ]

    async def purge_expired(self, ttl_seconds: float) -> List[UUID]:
        """Delete sessions nobody has touched for ttl_seconds

        Args:
            ttl_seconds (float): Idle time after which a session is dropped

        Returns:
            List[UUID]: game_ids that were purged
        """
        now = self.clock()
        async with self.lock:
            expired = [
                game_id
                for game_id, last in self.last_access.items()
                if now - last > ttl_seconds
            ]
            for game_id in expired:
                del self.sessions[game_id]
                del self.last_access[game_id]
        if expired:
            logging.info(f"Purged {len(expired)} idle game(s)")
        return expired

    def __len__(self) -> int:
        return len(self.sessions)
