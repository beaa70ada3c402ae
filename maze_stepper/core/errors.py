class MazeInvariantError(RuntimeError):
    """
    Raised when a step detects a maze that is not a spanning tree
    (emptied fringe, broken back-pointer chain, walled-in walker).
    A maze in this state must be regenerated, not repaired.
    """


class MazeConfigError(ValueError):
    """Raised for unknown algorithm names, bad endpoints or out-of-order calls."""
