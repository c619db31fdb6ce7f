from flask import Blueprint, jsonify, request, current_app
from flask_login import current_user, login_required

from chesschat import db
from chesschat.errors import InvalidRequestError
from chesschat.services.games.session import GameSessionService
from chesschat.services.games.store import GameStore


games = Blueprint('games', __name__)


def _service() -> GameSessionService:
    return GameSessionService(
        GameStore(db.session),
        current_app.extensions['realtime_gateway'],
        current_app.extensions['game_locks'],
        logger=current_app.logger,
    )


def _body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidRequestError('JSON object body expected')
    return data


@games.route('/invite', methods=['POST'])
@login_required
def send_invite():
    data = _body()
    game = _service().invite(current_user.id, data.get('opponentId'))
    return jsonify(game.to_dict()), 201


@games.route('/invites', methods=['GET'])
@login_required
def list_invites():
    return jsonify([g.to_dict() for g in _service().list_invites(current_user.id)])


@games.route('', methods=['GET'])
@login_required
def list_games():
    return jsonify([g.to_dict() for g in _service().list_games(current_user.id)])


@games.route('/<int:game_id>', methods=['GET'])
@login_required
def get_game(game_id):
    return jsonify(_service().get_game(game_id, current_user.id).to_dict())


@games.route('/<int:game_id>/accept', methods=['POST'])
@login_required
def accept_invite(game_id):
    return jsonify(_service().accept_invite(game_id, current_user.id).to_dict())


@games.route('/<int:game_id>/decline', methods=['POST'])
@login_required
def decline_invite(game_id):
    _service().decline_invite(game_id, current_user.id)
    return jsonify({'message': 'Game invite declined'})


@games.route('/<int:game_id>/move', methods=['POST'])
@login_required
def make_move(game_id):
    data = _body()
    game = _service().make_move(
        game_id,
        current_user.id,
        data.get('from'),
        data.get('to'),
        promotion=data.get('promotion'),
    )
    return jsonify(game.to_dict())


@games.route('/<int:game_id>/draw-offer', methods=['POST'])
@login_required
def offer_draw(game_id):
    return jsonify(_service().offer_draw(game_id, current_user.id).to_dict())


@games.route('/<int:game_id>/draw-response', methods=['POST'])
@login_required
def respond_to_draw(game_id):
    data = _body()
    if not isinstance(data.get('accept'), bool):
        raise InvalidRequestError('accept must be true or false')
    return jsonify(_service().respond_to_draw(game_id, current_user.id, data.get('accept')).to_dict())


@games.route('/<int:game_id>/resign', methods=['POST'])
@login_required
def resign(game_id):
    return jsonify(_service().resign(game_id, current_user.id).to_dict())
