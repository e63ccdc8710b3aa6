"""Domain errors raised by the game engine.

Every error here is a rejection of a single command: it is reported to the
sender only and the authoritative state is left exactly as it was.
"""


class GameError(Exception):
    """Base class for every rejected command."""
    code = 'GAME_ERROR'
    event = 'move-error'
    default_message = 'Invalid command'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'code': self.code, 'message': self.message}


# ============ Room errors ============

class RoomError(GameError):
    event = 'room-error'


class RoomNotFound(RoomError):
    code = 'ROOM_NOT_FOUND'

    def __init__(self, room_code, available=None):
        self.room_code = room_code
        message = f'Room "{room_code}" does not exist'
        if available is not None:
            message += f". Available rooms: {', '.join(available) or 'none'}"
        super().__init__(message)


class RoomExists(RoomError):
    code = 'ROOM_EXISTS'
    default_message = 'Room already exists'


class RoomFull(RoomError):
    code = 'ROOM_FULL'
    default_message = 'Room is full'


class RoomCodeRequired(RoomError):
    code = 'ROOM_CODE_REQUIRED'
    default_message = 'A room code is required'


# ============ Turn errors ============

class NotInRoom(GameError):
    code = 'NOT_IN_ROOM'
    default_message = 'You are not in this room'


class WrongPhase(GameError):
    code = 'WRONG_PHASE'

    def __init__(self, phase):
        self.phase = phase
        super().__init__(f'Not allowed in the current phase: {phase}')


class NotYourTurn(GameError):
    code = 'NOT_YOUR_TURN'
    default_message = 'It is not your turn'


# ============ Piece errors ============

class NoPiece(GameError):
    code = 'NO_PIECE'

    def __init__(self, x, y):
        super().__init__(f'No piece at ({x}, {y})')


class NotYourPiece(GameError):
    code = 'NOT_YOUR_PIECE'

    def __init__(self, x, y):
        super().__init__(f'The piece at ({x}, {y}) is not yours')


class AlreadyMoved(GameError):
    code = 'ALREADY_MOVED'

    def __init__(self, piece_name):
        super().__init__(f'{piece_name} already moved this turn')


# ============ Movement errors ============

class OutOfBounds(GameError):
    code = 'OUT_OF_BOUNDS'
    default_message = 'Move is out of bounds'


class InvalidDestination(GameError):
    code = 'INVALID_DEST'
    default_message = 'Destination is not empty'


class Immobile(GameError):
    code = 'IMMOBILE'
    default_message = 'Mines cannot move'


class NonCardinal(GameError):
    code = 'NON_CARDINAL'
    default_message = 'Can only move in cardinal directions (up, down, left, right)'


class WrongDistance(GameError):
    code = 'WRONG_DISTANCE'


class WallBlocked(GameError):
    code = 'WALL_BLOCKED'
    default_message = 'Cannot move through the harbor wall'


class PathBlocked(GameError):
    code = 'PATH_BLOCKED'
    default_message = 'Another piece is in the way'


# ============ Attack errors ============

class InvalidTarget(GameError):
    code = 'INVALID_TARGET'
    default_message = 'You cannot attack your own piece'


class NotAdjacent(GameError):
    code = 'NOT_ADJACENT'
    default_message = 'Attack must be adjacent'


class WrongDirection(GameError):
    code = 'WRONG_DIRECTION'
    default_message = 'Can only attack forward'


class CannotAttack(GameError):
    code = 'CANNOT_ATTACK'

    def __init__(self, piece_name):
        super().__init__(f'{piece_name} cannot attack')


class AlreadyAttacked(GameError):
    code = 'ALREADY_ATTACKED'

    def __init__(self, x, y):
        super().__init__(f'This piece at ({x}, {y}) has already attacked this turn')


# ============ Placement errors ============

class InvalidPiece(GameError):
    code = 'INVALID_PIECE'
    default_message = 'Unknown or malformed piece'


class InvalidRow(GameError):
    code = 'INVALID_ROW'

    def __init__(self, y):
        super().__init__(f'Row {y} is outside your home rows')


class OnBase(GameError):
    code = 'ON_BASE'
    default_message = 'Invalid placement location - cannot place on base'


class CellTaken(GameError):
    code = 'CELL_TAKEN'

    def __init__(self, x, y):
        super().__init__(f'More than one piece placed at ({x}, {y})')


class PieceLimitExceeded(GameError):
    code = 'PIECE_LIMIT_EXCEEDED'

    def __init__(self, piece_name, limit):
        super().__init__(f'At most {limit} x {piece_name} may be placed')


class PlacementAlreadySubmitted(GameError):
    code = 'PLACEMENT_ALREADY_SUBMITTED'
    default_message = 'You have already submitted your placement'
