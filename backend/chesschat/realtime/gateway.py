import logging
from typing import Any, Optional

from chesschat.realtime.events import OutboundEvent, game_room


class RealtimeGateway:
    """Routes outbound events to user channels, game rooms, or everyone.

    Delivery is best-effort and at-most-once: an offline target or a
    transport failure is logged and dropped, never raised to the caller.
    """

    def __init__(self, socketio, presence, namespace: str = '/ws', logger: Optional[logging.Logger] = None) -> None:
        self.socketio = socketio
        self.presence = presence
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)

    def broadcast_online_users(self) -> None:
        self._emit(OutboundEvent.ONLINE_USERS, self.presence.online_users(), to=None)

    def to_user(self, user_id, event: OutboundEvent, payload: Any) -> bool:
        sid = self.presence.channel_for(user_id)
        if sid is None:
            self.logger.debug(f"[drop] event={event.value} user={user_id} offline")
            return False
        return self._emit(event, payload, to=sid)

    def to_game(self, game_id, event: OutboundEvent, payload: Any) -> bool:
        return self._emit(event, payload, to=game_room(game_id))

    def relay(self, sender_id, receiver_id, event: OutboundEvent) -> bool:
        """Point-to-point ephemeral signal such as typing indicators."""
        if sender_id is None or receiver_id is None:
            return False
        return self.to_user(receiver_id, event, {'senderId': sender_id})

    def _emit(self, event: OutboundEvent, payload: Any, to: Optional[str]) -> bool:
        try:
            self.socketio.emit(event.value, payload, to=to, namespace=self.namespace)
        except Exception as exc:
            self.logger.warning(f"[emit-failed] event={event.value} to={to} error={exc!r}")
            return False
        return True
