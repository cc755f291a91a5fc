"""Errors raised by the slot buffer, pattern matcher and session rules."""


class HeistError(Exception):
    """Base class for errors the player can recover from.

    The session catches these at its boundary and turns them into a warning
    result; game state is left untouched.
    """

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.message = message
        self.index = index


class OutOfBounds(HeistError):
    pass


class InvalidDigit(HeistError):
    pass


class EmptySlot(HeistError):
    pass


class InvalidPattern(HeistError):
    pass


class InvalidLevel(HeistError):
    pass


class TimeModeOff(HeistError):
    pass


class UnknownId(LookupError):
    """Registry lookup miss. Means the buffer references an item that no longer exists."""

    def __init__(self, item_id: int):
        super().__init__(f"Unknown item id: {item_id}")
        self.item_id = item_id
