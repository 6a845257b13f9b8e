from __future__ import annotations

import enum
import logging
from types import TracebackType
from typing import Self

from .errors import AlreadyReleased

logger = logging.getLogger(__name__)


class Lifecycle(enum.Enum):
    """Lifecycle state of an object holding key-derived material."""

    ACTIVE = "active"
    RELEASED = "released"


class Releasable:
    """Base class for objects whose sensitive state must be erased.

    Subclasses implement :meth:`_erase` and call :meth:`_ensure_active` at the
    start of every public operation. :meth:`release` is the deterministic
    disposal path; using the object as a context manager calls it on scope
    exit. The finalizer only acts as a backstop for objects that were never
    released explicitly.
    """

    _lifecycle: Lifecycle = Lifecycle.RELEASED

    def _activate(self) -> None:
        self._lifecycle = Lifecycle.ACTIVE

    @property
    def released(self) -> bool:
        """Whether :meth:`release` has already run."""
        return self._lifecycle is Lifecycle.RELEASED

    def _ensure_active(self) -> None:
        if self._lifecycle is not Lifecycle.ACTIVE:
            raise AlreadyReleased(f"{type(self).__name__} has already been released")

    def _erase(self) -> None:
        raise NotImplementedError

    def release(self) -> None:
        """Erase all key-derived state. Safe to call any number of times."""
        if self._lifecycle is Lifecycle.RELEASED:
            return
        try:
            self._erase()
        finally:
            self._lifecycle = Lifecycle.RELEASED
        logger.debug("%s released", type(self).__name__)

    def __enter__(self) -> Self:
        self._ensure_active()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    def __del__(self) -> None:
        if self._lifecycle is Lifecycle.ACTIVE:
            self._lifecycle = Lifecycle.RELEASED
            self._erase()
