"""In-memory holder for the one table this process serves."""

from coup.state import GameSession

_session = GameSession()


def get() -> GameSession:
    return _session


def reset() -> GameSession:
    """Clear the table back to an empty, not-started session."""
    _session.reset()
    return _session
