"""Exception types raised by the learning core."""


class NederlearnError(Exception):
    """Base class for all errors raised by nederlearn."""


class CatalogLoadError(NederlearnError):
    """The vocabulary whitelist is missing or malformed. Fatal at startup."""


class NotFoundError(NederlearnError):
    """An unknown section or item id was requested."""


class InsufficientDataError(NederlearnError):
    """A section has too few items to build a quiz."""


class InsufficientFundsError(NederlearnError):
    """The profile does not hold enough XP for a purchase."""

    def __init__(self, balance: int, cost: int):
        super().__init__(f"Need {cost} XP, have {balance}")
        self.balance = balance
        self.cost = cost


class PersistenceError(NederlearnError):
    """Reading or writing the key-value store failed."""


class StateMismatchError(NederlearnError):
    """A saved quiz session does not fit the current question set."""


class SessionStateError(NederlearnError):
    """A session operation was called in the wrong state."""
