"""Authorization predicates for game actions. Stateless and side-effect free."""


def is_participant(game, user_id) -> bool:
    return user_id is not None and user_id in (game.player_one_id, game.player_two_id)


def is_turn_owner(game, user_id) -> bool:
    return user_id is not None and game.turn_id == user_id


def is_inviter(game, user_id) -> bool:
    return user_id is not None and game.invited_by_id == user_id


def other_participant(game, user_id):
    if user_id == game.player_one_id:
        return game.player_two_id
    if user_id == game.player_two_id:
        return game.player_one_id
    return None
