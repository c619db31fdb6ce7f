from typing import Any, Callable, Dict, Optional

from flask import current_app, request
from flask_login import current_user
from flask_socketio import emit, join_room, leave_room

from chesschat import socketio
from chesschat.realtime.events import InboundEvent, OutboundEvent, game_room


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _presence():
    return current_app.extensions['presence']


def _gateway():
    return current_app.extensions['realtime_gateway']


def _resolve_user_id() -> Optional[int]:
    """Only the Flask-Login session identifies a socket; handshake values are never trusted."""
    if current_user.is_authenticated:
        return current_user.id
    return None


def _int_or_none(raw) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _game_id_from(data) -> Optional[int]:
    return _int_or_none(data.get('gameId') if isinstance(data, dict) else data)


def handle_connect(auth=None):
    user_id = _resolve_user_id()
    if user_id is not None:
        _presence().connect(user_id, _get_sid())
    current_app.logger.info(f"[connect] sid={_get_sid()} user={user_id}")
    _gateway().broadcast_online_users()


def handle_disconnect(reason=None):
    user_id = _presence().disconnect(_get_sid())
    current_app.logger.info(f"[disconnect] sid={_get_sid()} user={user_id} reason={reason}")
    _gateway().broadcast_online_users()


def _relay(data, event: OutboundEvent) -> None:
    receiver_id = _int_or_none(data.get('receiverId')) if isinstance(data, dict) else None
    sender_id = _presence().user_for(_get_sid())
    _gateway().relay(sender_id, receiver_id, event)


def handle_typing(data):
    _relay(data, OutboundEvent.TYPING)


def handle_stop_typing(data):
    _relay(data, OutboundEvent.STOP_TYPING)


def handle_join_game(data):
    game_id = _game_id_from(data)
    if game_id is None:
        emit(OutboundEvent.ERROR.value, {'message': 'gameId is required'})
        return
    join_room(game_room(game_id))


def handle_leave_game(data):
    game_id = _game_id_from(data)
    if game_id is None:
        emit(OutboundEvent.ERROR.value, {'message': 'gameId is required'})
        return
    leave_room(game_room(game_id))


INBOUND_HANDLERS: Dict[InboundEvent, Callable[[Any], None]] = {
    InboundEvent.TYPING: handle_typing,
    InboundEvent.STOP_TYPING: handle_stop_typing,
    InboundEvent.JOIN_GAME: handle_join_game,
    InboundEvent.LEAVE_GAME: handle_leave_game,
}


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register connection lifecycle handlers and the inbound event table on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    for event, handler in INBOUND_HANDLERS.items():
        socketio.on_event(event.value, handler, namespace=namespace)
