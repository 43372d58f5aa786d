class ArenaError(Exception):
    """Base class for errors raised by the duel engine and its store."""


class NotFound(ArenaError):
    """Unknown user or match id."""


class InvalidState(ArenaError):
    """Operation conflicts with the current lifecycle of a match."""


class PersistenceError(ArenaError):
    """A call to the persistent store failed.

    The in-memory change that preceded the call is not rolled back.
    """
