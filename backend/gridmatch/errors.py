"""Rejection taxonomy for join and move requests.

Every rejection is reported to the requesting connection only and never
changes room state.
"""


class RejectedRequest(Exception):
    code = 'rejected'
    default_message = 'Request rejected.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'message': self.message, 'code': self.code}


class InvalidRequest(RejectedRequest):
    code = 'invalid_request'
    default_message = 'Invalid join request. Please check room ID and symbol.'


class RoomFull(RejectedRequest):
    code = 'room_full'
    default_message = 'Room is already full.'


class SymbolTaken(RejectedRequest):
    code = 'symbol_taken'
    default_message = 'That player slot is already taken.'


class RoomNotFound(RejectedRequest):
    code = 'room_not_found'
    default_message = 'Game not found or already ended.'


class GameAlreadyOver(RejectedRequest):
    code = 'game_over'
    default_message = 'Game is already over.'


class GameNotStarted(RejectedRequest):
    code = 'game_not_started'
    default_message = 'Waiting for opponent.'


class NotAPlayer(RejectedRequest):
    code = 'not_a_player'
    default_message = 'You are not a player in this game.'


class NotYourTurn(RejectedRequest):
    code = 'not_your_turn'
    default_message = 'It is not your turn.'


class InvalidCellIndex(RejectedRequest):
    code = 'invalid_cell'
    default_message = 'Invalid move index.'


class CellOccupied(RejectedRequest):
    code = 'cell_occupied'
    default_message = 'Cell is already taken.'
