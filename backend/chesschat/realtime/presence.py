import threading
from typing import Dict, List, Optional

from chesschat.services.locking import KeyedLocks


class PresenceRegistry:
    """Process-wide map of connected users to their Socket.IO session ids.

    A user may hold several sessions (tabs); the most recent live one is the
    delivery channel, and the user stays online until the last one closes.
    Updates for one user are serialized so a fast disconnect/reconnect can't
    leave a stale channel behind.
    """

    def __init__(self) -> None:
        self._user_locks = KeyedLocks()
        self._guard = threading.Lock()
        self._channels: Dict[int, List[str]] = {}  # user id -> sids, oldest first
        self._sid_to_user: Dict[str, int] = {}

    def connect(self, user_id: int, sid: str) -> None:
        with self._user_locks.hold(user_id):
            with self._guard:
                sids = [s for s in self._channels.get(user_id, []) if s != sid]
                sids.append(sid)
                self._channels[user_id] = sids
                self._sid_to_user[sid] = user_id

    def disconnect(self, sid: str) -> Optional[int]:
        """Drop the session; returns the user it belonged to, if any."""
        with self._guard:
            user_id = self._sid_to_user.get(sid)
        if user_id is None:
            return None
        with self._user_locks.hold(user_id):
            with self._guard:
                self._sid_to_user.pop(sid, None)
                sids = [s for s in self._channels.get(user_id, []) if s != sid]
                if sids:
                    self._channels[user_id] = sids
                else:
                    self._channels.pop(user_id, None)
        return user_id

    def user_for(self, sid: str) -> Optional[int]:
        with self._guard:
            return self._sid_to_user.get(sid)

    def channel_for(self, user_id) -> Optional[str]:
        with self._guard:
            sids = self._channels.get(user_id)
            return sids[-1] if sids else None

    def is_online(self, user_id) -> bool:
        return self.channel_for(user_id) is not None

    def online_users(self) -> List[int]:
        with self._guard:
            return sorted(self._channels)
