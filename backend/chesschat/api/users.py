from flask import Blueprint, jsonify, current_app
from flask_login import current_user, login_required

from chesschat.models import User


users = Blueprint('users', __name__)


@users.route('', methods=['GET'])
@login_required
def list_users():
    """Everyone except the caller, with live presence for the sidebar."""
    presence = current_app.extensions['presence']
    others = User.query.filter(User.id != current_user.id).order_by(User.username).all()
    return jsonify([dict(u.to_dict(), online=presence.is_online(u.id)) for u in others])
