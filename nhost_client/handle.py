"""
Lazily-populated, memoized service slots.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from shared.errors import ClientClosedError, ServiceConstructionError
from shared.logging import get_logger

T = TypeVar("T")


class HandleState(Enum):
    """Lifecycle states of a service handle."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"


class ServiceHandle(Generic[T]):
    """Holds one service client, created on first access and then reused.

    Each handle owns its own lock so that first access to one service never
    waits on construction of another. A failed construction leaves the handle
    uninitialized and the next ``get`` tries again. Once sealed, the handle
    never constructs anything again.
    """

    def __init__(self, name: str, factory: Callable[[], T], logger: Optional[Any] = None):
        self.name = name
        self._factory = factory
        self._lock = threading.Lock()
        self._state = HandleState.UNINITIALIZED
        self._instance: Optional[T] = None
        self._sealed = False
        self.logger = logger or get_logger("nhost.handle")

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is HandleState.INITIALIZED

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def peek(self) -> Optional[T]:
        """Return the instance if one exists, without creating it."""
        if self._state is HandleState.INITIALIZED:
            return self._instance
        return None

    def seal(self) -> Optional[T]:
        """Stop further construction and return the instance, if any.

        Waits for a construction running on another thread to finish, so
        the returned instance is the only one this handle will ever hold.
        """
        with self._lock:
            self._sealed = True
            return self._instance if self._state is HandleState.INITIALIZED else None

    def get(self) -> T:
        """Return the service instance, constructing it on first call."""
        if self._state is HandleState.INITIALIZED and not self._sealed:
            return self._instance  # type: ignore[return-value]

        with self._lock:
            if self._sealed:
                raise ClientClosedError(
                    f"Cannot access {self.name}: client is closed",
                    details={"service": self.name}
                )
            if self._state is HandleState.INITIALIZED:
                return self._instance  # type: ignore[return-value]

            self._state = HandleState.INITIALIZING
            try:
                instance = self._factory()
            except ServiceConstructionError:
                self._state = HandleState.UNINITIALIZED
                raise
            except Exception as exc:
                self._state = HandleState.UNINITIALIZED
                self.logger.error("Service construction failed", service=self.name, error=str(exc))
                raise ServiceConstructionError(
                    self.name,
                    str(exc),
                    details={"error_type": type(exc).__name__}
                ) from exc

            self._instance = instance
            self._state = HandleState.INITIALIZED
            self.logger.debug("Service initialized", service=self.name)
            return instance
