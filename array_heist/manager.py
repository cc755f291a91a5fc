from fastapi import WebSocket, WebSocketDisconnect
from typing import List, Dict
from uuid import UUID
import logging


class ConnectionManager:
    def __init__(self):
        self.active_connections: Dict[UUID, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, game_id: UUID):
        """Connects a websocket to a game_id

        Args:
            websocket (WebSocket): Client connection watching the game
            game_id (UUID): ID to identify the game
        """
        await websocket.accept()
        if game_id not in self.active_connections:
            self.active_connections[game_id] = []
        self.active_connections[game_id].append(websocket)
        logging.info(f"Websocket connected to game_id: {game_id}")

    def disconnect(self, websocket: WebSocket, game_id: UUID):
        """Disconnects a websocket from a game_id

        Args:
            websocket (WebSocket): Client connection watching the game
            game_id (UUID): ID to identify the game
        """
        if game_id in self.active_connections:
            if websocket in self.active_connections[game_id]:
                self.active_connections[game_id].remove(websocket)
            # Clean up if there are no more connections for this game_id
            if not self.active_connections[game_id]:
                del self.active_connections[game_id]
        logging.info(f"Websocket disconnected from game_id: {game_id}")

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        await websocket.send_json(message)

    async def broadcast(self, message: dict, game_id: UUID):
        if game_id not in self.active_connections:
            return
        logging.debug(f"Broadcasting message to game_id: {game_id}")
        for connection in list(self.active_connections[game_id]):
            try:
                await connection.send_json(message)
            except (RuntimeError, WebSocketDisconnect) as e:
                logging.warning(f"Dropping dead websocket for game_id {game_id}: {e}")
                self.disconnect(connection, game_id)

    def close_game(self, game_id: UUID):
        self.active_connections.pop(game_id, None)
