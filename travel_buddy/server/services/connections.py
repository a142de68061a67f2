"""
Real-time connection registry.

Keeps one WebSocket per connected user and pushes JSON frames of the form
``{"event": ..., "data": {...}}`` to them. Services that need to reach users
(new matches, chat messages, typing, presence) go through the manager
instead of holding sockets themselves.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from travel_buddy.core.database.entities.matches import Match

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Registry of connected users.

    A user has at most one socket; connecting again replaces the old one.
    """

    def __init__(self) -> None:
        self._connections: Dict[int, WebSocket] = {}
        self._lock = asyncio.Lock()

    async def connect(self, user_id: int, websocket: WebSocket) -> None:
        """Register an accepted socket and announce the user as online."""
        async with self._lock:
            previous = self._connections.get(user_id)
            self._connections[user_id] = websocket
        if previous is not None and previous is not websocket:
            logger.info(f"Replacing existing connection of user {user_id}")
            await self._close_quietly(previous)
        logger.info(f"User {user_id} connected ({len(self._connections)} online)")
        await self.broadcast_presence(user_id, True)

    async def disconnect(self, user_id: int, websocket: Optional[WebSocket] = None) -> None:
        """Forget a user's socket.

        When ``websocket`` is given the entry is only removed if it is still
        the registered one, so a replaced connection cannot unregister its
        successor.
        """
        async with self._lock:
            current = self._connections.get(user_id)
            if current is None or (websocket is not None and current is not websocket):
                return
            del self._connections[user_id]
        logger.info(f"User {user_id} disconnected")
        await self.broadcast_presence(user_id, False)

    def is_online(self, user_id: int) -> bool:
        return user_id in self._connections

    def online_user_ids(self) -> List[int]:
        return list(self._connections)

    async def send_to_user(self, user_id: int, event: str, payload: Dict[str, Any]) -> bool:
        """Send one event to a user.

        Returns:
            True when the frame was handed to the socket, False when the user
            is offline or the socket turned out to be dead
        """
        websocket = self._connections.get(user_id)
        if websocket is None:
            return False
        try:
            await websocket.send_json({"event": event, "data": jsonable_encoder(payload)})
        except Exception as e:
            logger.warning(f"Dropping connection of user {user_id} after failed send: {e}")
            async with self._lock:
                if self._connections.get(user_id) is websocket:
                    del self._connections[user_id]
            return False
        return True

    async def send_to_users(self, user_ids: Iterable[int], event: str, payload: Dict[str, Any]) -> int:
        """Send one event to several users, returning how many were reached."""
        delivered = 0
        for user_id in user_ids:
            if await self.send_to_user(user_id, event, payload):
                delivered += 1
        return delivered

    async def notify_match(self, match: Match) -> None:
        """Tell both members of a match about it."""
        users = list(match.user_ids)
        for user_id in users:
            await self.send_to_user(
                user_id,
                "match",
                {
                    "match_id": match.id,
                    "match_score": match.match_score,
                    "users": users,
                    "other_user_id": match.other_user_id(user_id),
                },
            )

    async def broadcast_presence(self, user_id: int, online: bool) -> None:
        others = [uid for uid in self.online_user_ids() if uid != user_id]
        await self.send_to_users(others, "presence", {"user_id": user_id, "online": online})

    async def close_all(self) -> None:
        async with self._lock:
            sockets = list(self._connections.values())
            self._connections.clear()
        for websocket in sockets:
            await self._close_quietly(websocket)

    @staticmethod
    async def _close_quietly(websocket: WebSocket) -> None:
        try:
            await websocket.close()
        except RuntimeError as e:
            # Already closed by the peer
            logger.debug(f"Socket already closed: {e}")


_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """
    Get the process-wide connection manager.
    """
    global _manager
    if _manager is None:
        _manager = ConnectionManager()
    return _manager
