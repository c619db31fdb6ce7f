"""Socket.IO event names exchanged with clients."""
from enum import Enum


class InboundEvent(str, Enum):
    TYPING = 'typing'
    STOP_TYPING = 'stopTyping'
    JOIN_GAME = 'joinGame'
    LEAVE_GAME = 'leaveGame'


class OutboundEvent(str, Enum):
    ONLINE_USERS = 'getOnlineUsers'
    TYPING = 'typing'
    STOP_TYPING = 'stopTyping'
    GAME_INVITE = 'gameInvite'
    GAME_INVITE_ACCEPTED = 'gameInviteAccepted'
    GAME_INVITE_DECLINED = 'gameInviteDeclined'
    MOVE_MADE = 'moveMade'
    DRAW_OFFERED = 'drawOffered'
    DRAW_OFFER_RESPONSE = 'drawOfferResponse'
    GAME_RESIGNED = 'gameResigned'
    ERROR = 'error'


def game_room(game_id) -> str:
    return f"game:{game_id}"
