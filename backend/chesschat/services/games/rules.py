"""Rules engine adapter.

Chess legality is delegated to python-chess; this module only translates a
FEN plus a from/to square pair into a new FEN and game-over flags, or rejects
the move with ``InvalidMoveError``.
"""
from dataclasses import dataclass
from typing import Optional

import chess

from chesschat.errors import InvalidMoveError


STARTING_POSITION = chess.STARTING_FEN

_PROMOTION_PIECES = {
    'q': chess.QUEEN,
    'r': chess.ROOK,
    'b': chess.BISHOP,
    'n': chess.KNIGHT,
}


@dataclass(frozen=True)
class MoveOutcome:
    fen: str
    uci: str
    san: str
    is_game_over: bool
    is_checkmate: bool


def _parse_square(name) -> int:
    try:
        return chess.parse_square(str(name).strip().lower())
    except ValueError:
        raise InvalidMoveError(f"Invalid square: {name!r}")


def _is_promotion_rank(board: chess.Board, origin: int, target: int) -> bool:
    piece = board.piece_at(origin)
    if piece is None or piece.piece_type != chess.PAWN:
        return False
    last_rank = 7 if piece.color == chess.WHITE else 0
    return chess.square_rank(target) == last_rank


def apply_move(fen: str, from_square, to_square, promotion: Optional[str] = None) -> MoveOutcome:
    """Play ``from_square`` -> ``to_square`` on ``fen``.

    A pawn reaching the last rank without an explicit promotion piece becomes
    a queen; ``promotion`` is ignored on every other move.
    """
    try:
        board = chess.Board(fen)
    except ValueError:
        raise InvalidMoveError('Invalid position')

    origin = _parse_square(from_square)
    target = _parse_square(to_square)

    # Clients may send a promotion piece with every move; it only counts
    # when a pawn actually reaches the last rank.
    promotion_piece = None
    if _is_promotion_rank(board, origin, target):
        promotion_piece = chess.QUEEN
        if promotion:
            promotion_piece = _PROMOTION_PIECES.get(str(promotion).strip().lower()[:1])
            if promotion_piece is None:
                raise InvalidMoveError(f"Invalid promotion piece: {promotion!r}")

    move = chess.Move(origin, target, promotion=promotion_piece)
    if not board.is_legal(move):
        raise InvalidMoveError()

    san = board.san(move)
    board.push(move)
    # The halfmove clock check covers the 50-move rule, which python-chess
    # only treats as claimable.
    is_game_over = board.is_game_over() or board.halfmove_clock >= 100
    return MoveOutcome(
        fen=board.fen(),
        uci=move.uci(),
        san=san,
        is_game_over=is_game_over,
        is_checkmate=board.is_checkmate(),
    )
