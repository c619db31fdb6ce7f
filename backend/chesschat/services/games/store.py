"""Persistence for games, on top of the Flask-SQLAlchemy session."""
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from chesschat.models import Game, GameStatus, User, utc_now


def _as_id(raw) -> Optional[int]:
    # JSON true/false would otherwise pass as 1/0
    if isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


class GameStore:
    """Durable record of games and the user lookups the session service needs."""

    def __init__(self, session) -> None:
        self.session = session

    def get_game(self, game_id, refresh: bool = False) -> Optional[Game]:
        """Get game by ID. ``refresh`` bypasses the identity map so a caller
        holding the game lock sees the last committed state."""
        game_id = _as_id(game_id)
        if game_id is None:
            return None
        return self.session.get(Game, game_id, populate_existing=refresh)

    def get_user(self, user_id) -> Optional[User]:
        user_id = _as_id(user_id)
        if user_id is None:
            return None
        return self.session.get(User, user_id)

    def add(self, game: Game) -> Game:
        self.session.add(game)
        self._commit()
        return game

    def save(self, game: Game) -> Game:
        game.updated_at = utc_now()
        self.session.add(game)
        self._commit()
        return game

    def delete(self, game: Game) -> None:
        self.session.delete(game)
        self._commit()

    def list_open_games(self, user_id) -> List[Game]:
        """Invited and active games of the user, most recently updated first."""
        return (
            Game.query.filter(
                (Game.player_one_id == user_id) | (Game.player_two_id == user_id),
                Game.status.in_(GameStatus.OPEN),
            )
            .order_by(Game.updated_at.desc(), Game.id.desc())
            .all()
        )

    def list_invites(self, user_id) -> List[Game]:
        """Pending invites addressed to the user (not the ones they sent)."""
        return (
            Game.query.filter(
                (Game.player_one_id == user_id) | (Game.player_two_id == user_id),
                Game.status == GameStatus.INVITED,
                Game.invited_by_id != user_id,
            )
            .order_by(Game.created_at.desc(), Game.id.desc())
            .all()
        )

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
