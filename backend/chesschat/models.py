from datetime import datetime, timezone
import json

from flask_login import UserMixin

from chesschat import db, bcrypt
from chesschat.services.games.rules import STARTING_POSITION


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class GameStatus:
    INVITED = 'invited'
    ACTIVE = 'active'
    COMPLETED = 'completed'
    DRAWN = 'drawn'
    RESIGNED = 'resigned'

    OPEN = (INVITED, ACTIVE)
    TERMINAL = (COMPLETED, DRAWN, RESIGNED)


class GameResult:
    CHECKMATE = 'checkmate'
    DRAW = 'draw'
    RESIGNATION = 'resignation'


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    # Player one is always the inviter
    player_one_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    player_two_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    invited_by_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=GameStatus.INVITED)  # invited, active, completed, drawn, resigned
    turn_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    current_position = db.Column(db.String(128), nullable=False, default=STARTING_POSITION)
    moves = db.Column(db.Text, nullable=True)  # JSON-encoded list of UCI moves
    winner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    result = db.Column(db.String(16), nullable=True)  # checkmate, draw, resignation
    draw_offer_by_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    draw_offered_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now, index=True)

    player_one = db.relationship('User', foreign_keys=[player_one_id])
    player_two = db.relationship('User', foreign_keys=[player_two_id])
    invited_by = db.relationship('User', foreign_keys=[invited_by_id])
    turn = db.relationship('User', foreign_keys=[turn_id])
    winner = db.relationship('User', foreign_keys=[winner_id])
    draw_offer_by = db.relationship('User', foreign_keys=[draw_offer_by_id])

    @property
    def player_ids(self):
        return (self.player_one_id, self.player_two_id)

    @property
    def move_list(self):
        try:
            return json.loads(self.moves) if self.moves else []
        except ValueError:
            return []

    def append_move(self, uci: str) -> None:
        history = self.move_list
        history.append(uci)
        self.moves = json.dumps(history)

    def clear_draw_offer(self) -> None:
        self.draw_offer_by_id = None
        self.draw_offered_at = None

    @property
    def is_terminal(self) -> bool:
        return self.status in GameStatus.TERMINAL

    def to_dict(self):
        players = [p.to_dict() for p in (self.player_one, self.player_two) if p is not None]
        draw_offer = None
        if self.draw_offer_by_id is not None:
            draw_offer = {
                'by': self.draw_offer_by_id,
                'offered_at': self.draw_offered_at.isoformat() if self.draw_offered_at else None,
            }
        return {
            'id': self.id,
            'players': players,
            'status': self.status,
            'invited_by': self.invited_by.to_dict() if self.invited_by else None,
            'turn': self.turn.to_dict() if self.turn else None,
            'current_position': self.current_position,
            'moves': self.move_list,
            'winner': self.winner.to_dict() if self.winner else None,
            'result': self.result,
            'draw_offer': draw_offer,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
