"""Explicit result type for callers that prefer values over exceptions."""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from coup.errors import ErrorKind, GameError


@dataclass(frozen=True)
class Outcome:
    """Either the value an engine call returned, or the rule violation it raised."""

    value: Any = None
    error: Optional[GameError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        """Error kind, or None on success."""
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None

    def unwrap(self) -> Any:
        """Return the value, re-raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value


def attempt(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Outcome:
    """Call an engine function and capture a rule violation as an Outcome.

    Only ``GameError`` is captured; anything else is a bug and propagates.
    """
    try:
        return Outcome(value=fn(*args, **kwargs))
    except GameError as exc:
        return Outcome(error=exc)
