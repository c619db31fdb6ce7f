"""Server-authoritative game session state machine.

invited -> active -> completed | drawn | resigned, or invited -> (deleted)
on decline. Every mutation of one game runs under that game's lock, reads
the last committed state, commits, and only then notifies clients, so a
failed commit never produces a notification.
"""
import logging
from typing import Callable, List, Optional

from chesschat.errors import (
    ForbiddenError,
    InvalidRequestError,
    InvalidStateError,
    NotFoundError,
)
from chesschat.models import Game, GameResult, GameStatus, utc_now
from chesschat.realtime.events import OutboundEvent
from chesschat.services.games import access
from chesschat.services.games.rules import STARTING_POSITION, apply_move


class GameSessionService:
    def __init__(self, store, gateway, locks, logger: Optional[logging.Logger] = None,
                 clock: Optional[Callable] = None) -> None:
        self.store = store
        self.gateway = gateway
        self.locks = locks
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or utc_now

    # -- invites --
    def invite(self, inviter_id: int, invitee_id) -> Game:
        if invitee_id is None:
            raise InvalidRequestError('opponentId is required')
        invitee = self.store.get_user(invitee_id)
        if invitee is None:
            raise NotFoundError('User not found')
        if invitee.id == inviter_id:
            raise InvalidRequestError('Cannot invite yourself')

        game = Game(
            player_one_id=inviter_id,
            player_two_id=invitee.id,
            invited_by_id=inviter_id,
            status=GameStatus.INVITED,
            current_position=STARTING_POSITION,
        )
        self.store.add(game)
        self.logger.info(f"[invite] game={game.id} inviter={inviter_id} invitee={invitee.id}")

        self.gateway.to_user(invitee.id, OutboundEvent.GAME_INVITE, {
            'gameId': game.id,
            'invitedBy': inviter_id,
        })
        return game

    def accept_invite(self, game_id, user_id: int) -> Game:
        with self.locks.hold(self._key(game_id)):
            game = self._fetch_invite_for(game_id, user_id)
            game.status = GameStatus.ACTIVE
            # Inviter moves first
            game.turn_id = game.invited_by_id
            self.store.save(game)
            self.logger.info(f"[accept] game={game.id} user={user_id}")

        self.gateway.to_user(game.invited_by_id, OutboundEvent.GAME_INVITE_ACCEPTED, {
            'gameId': game.id,
            'acceptedBy': user_id,
        })
        return game

    def decline_invite(self, game_id, user_id: int) -> None:
        with self.locks.hold(self._key(game_id)):
            game = self._fetch_invite_for(game_id, user_id)
            declined_id, inviter_id = game.id, game.invited_by_id
            self.store.delete(game)
            self.logger.info(f"[decline] game={declined_id} user={user_id}")

        self.gateway.to_user(inviter_id, OutboundEvent.GAME_INVITE_DECLINED, {
            'gameId': declined_id,
            'declinedBy': user_id,
        })

    # -- play --
    def make_move(self, game_id, user_id: int, from_square, to_square, promotion=None) -> Game:
        with self.locks.hold(self._key(game_id)):
            game = self._fetch_active_for(game_id, user_id)
            if not access.is_turn_owner(game, user_id):
                raise ForbiddenError('Not your turn')
            if not from_square or not to_square:
                raise InvalidRequestError('from and to squares are required')

            # Raises InvalidMoveError before anything is mutated
            outcome = apply_move(game.current_position, from_square, to_square, promotion)

            game.current_position = outcome.fen
            game.append_move(outcome.uci)
            game.turn_id = access.other_participant(game, user_id)
            if outcome.is_game_over:
                game.status = GameStatus.COMPLETED
                game.turn_id = None
                game.clear_draw_offer()
                if outcome.is_checkmate:
                    game.winner_id = user_id
                    game.result = GameResult.CHECKMATE
                else:
                    game.result = GameResult.DRAW
            self.store.save(game)
            self.logger.info(
                f"[move] game={game.id} user={user_id} uci={outcome.uci} "
                f"game_over={outcome.is_game_over} checkmate={outcome.is_checkmate}"
            )

        self.gateway.to_game(game.id, OutboundEvent.MOVE_MADE, {
            'gameId': game.id,
            'from': from_square,
            'to': to_square,
            'fen': outcome.fen,
            'isGameOver': outcome.is_game_over,
            'isCheckmate': outcome.is_checkmate,
        })
        return game

    def offer_draw(self, game_id, user_id: int) -> Game:
        with self.locks.hold(self._key(game_id)):
            game = self._fetch_active_for(game_id, user_id)
            game.draw_offer_by_id = user_id
            game.draw_offered_at = self.clock()
            self.store.save(game)
            self.logger.info(f"[draw-offer] game={game.id} user={user_id}")

        self.gateway.to_game(game.id, OutboundEvent.DRAW_OFFERED, {
            'gameId': game.id,
            'offeredBy': user_id,
        })
        return game

    def respond_to_draw(self, game_id, user_id: int, accept) -> Game:
        accepted = bool(accept)
        with self.locks.hold(self._key(game_id)):
            game = self._fetch_for(game_id, user_id)
            if game.draw_offer_by_id is None or game.status != GameStatus.ACTIVE:
                raise InvalidStateError('No active draw offer')
            if game.draw_offer_by_id == user_id:
                raise ForbiddenError('Cannot respond to your own draw offer')

            if accepted:
                game.status = GameStatus.DRAWN
                game.result = GameResult.DRAW
                game.turn_id = None
            game.clear_draw_offer()
            self.store.save(game)
            self.logger.info(f"[draw-response] game={game.id} user={user_id} accepted={accepted}")

        self.gateway.to_game(game.id, OutboundEvent.DRAW_OFFER_RESPONSE, {
            'gameId': game.id,
            'accepted': accepted,
            'respondedBy': user_id,
        })
        return game

    def resign(self, game_id, user_id: int) -> Game:
        with self.locks.hold(self._key(game_id)):
            game = self._fetch_active_for(game_id, user_id)
            game.status = GameStatus.RESIGNED
            game.result = GameResult.RESIGNATION
            game.winner_id = access.other_participant(game, user_id)
            game.turn_id = None
            game.clear_draw_offer()
            self.store.save(game)
            self.logger.info(f"[resign] game={game.id} user={user_id} winner={game.winner_id}")

        self.gateway.to_game(game.id, OutboundEvent.GAME_RESIGNED, {
            'gameId': game.id,
            'resignedBy': user_id,
            'winner': game.winner_id,
        })
        return game

    # -- reads --
    def get_game(self, game_id, user_id: int) -> Game:
        return self._fetch_for(game_id, user_id, refresh=False)

    def list_games(self, user_id: int) -> List[Game]:
        return self.store.list_open_games(user_id)

    def list_invites(self, user_id: int) -> List[Game]:
        return self.store.list_invites(user_id)

    # -- internal helpers --
    @staticmethod
    def _key(game_id):
        try:
            return int(game_id)
        except (TypeError, ValueError):
            return game_id

    def _fetch_for(self, game_id, user_id: int, refresh: bool = True) -> Game:
        game = self.store.get_game(game_id, refresh=refresh)
        if game is None:
            raise NotFoundError()
        if not access.is_participant(game, user_id):
            raise ForbiddenError()
        return game

    def _fetch_active_for(self, game_id, user_id: int) -> Game:
        game = self._fetch_for(game_id, user_id)
        if game.status != GameStatus.ACTIVE:
            raise InvalidStateError()
        return game

    def _fetch_invite_for(self, game_id, user_id: int) -> Game:
        game = self._fetch_for(game_id, user_id)
        if access.is_inviter(game, user_id):
            raise ForbiddenError()
        if game.status != GameStatus.INVITED:
            raise InvalidStateError('Game is not awaiting a response')
        return game
