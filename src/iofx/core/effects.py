"""
iofx Effects Module

Lazy, equatable descriptions of side effects. An effect is built eagerly but
does nothing until it is triggered; two effects with the same description
compare equal whether or not either one is bound to a real resource.
"""

import asyncio
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Protocol, runtime_checkable

import httpx

from ..utils.errors import MissingResourceError
from ..utils.logging import get_logger, log_effect_outcome

logger = get_logger(__name__)


@runtime_checkable
class LogSink(Protocol):
    """Anything with ``write(message)``; an append-mode file handle qualifies."""

    def write(self, message: str) -> Any: ...


class EffectKind(str, Enum):
    """Tag identifying an effect variant."""

    WRITE = "write"
    REQUEST = "request"


@dataclass(frozen=True)
class Outcome:
    """Settled result of a triggered effect."""

    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value


class Effect(ABC):
    """
    A deferred unit of work.

    Subclasses set ``kind``, expose a ``description`` and implement
    ``_perform`` against their bound resource. Equality never triggers the
    effect and never looks at the resource.
    """

    kind: EffectKind

    def __init__(self, resource: Any = None):
        self._resource = resource
        self._task: Optional["asyncio.Future[Outcome]"] = None
        self._outcome: Optional[Outcome] = None
        self._callbacks: List[Callable[[Outcome], None]] = []

    @property
    @abstractmethod
    def description(self) -> Any:
        """Payload identifying what the effect would do."""

    @abstractmethod
    async def _perform(self, resource: Any) -> Any:
        """Carry out the side effect against a bound resource."""

    @property
    def resource(self) -> Any:
        return self._resource

    @property
    def bound(self) -> bool:
        return self._resource is not None

    @property
    def triggered(self) -> bool:
        return self._task is not None

    @property
    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    def describe(self) -> str:
        """Printable form of the description, used in logs and diagnostics."""
        return str(self.description)

    def _same_description(self, other: "Effect") -> bool:
        return self.description == other.description

    def equals(self, other: Optional["Effect"]) -> bool:
        """Compare descriptions of two effects of the same kind."""
        if other is None or getattr(other, "kind", None) is not self.kind:
            return False
        return self._same_description(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Effect):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def on_complete(self, callback: Callable[[Outcome], None]) -> None:
        """Register a callback invoked once with the settled outcome."""
        if self._outcome is not None:
            callback(self._outcome)
        else:
            self._callbacks.append(callback)

    async def trigger(self) -> Outcome:
        """
        Perform the effect, at most once.

        Later or concurrent calls await the same settlement. Errors, including
        a missing resource, are delivered inside the returned Outcome.
        """
        if self._task is None:
            self._task = asyncio.ensure_future(self._settle())
        return await asyncio.shield(self._task)

    async def _settle(self) -> Outcome:
        if not self.bound:
            outcome = Outcome(
                error=MissingResourceError(
                    message=f"Cannot trigger {self.kind.value} effect without a resource",
                    effect_kind=self.kind.value,
                    details={"description": self.describe()},
                )
            )
        else:
            try:
                outcome = Outcome(value=await self._perform(self._resource))
            except Exception as e:
                outcome = Outcome(error=e)

        self._outcome = outcome

        log_effect_outcome(
            logger=logger,
            effect_kind=self.kind.value,
            description=self.describe(),
            success=outcome.ok,
            additional_data=None if outcome.ok else {"error": str(outcome.error)},
        )

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback(outcome)
            except Exception as e:
                logger.exception(
                    f"Completion callback failed for {self.kind.value} effect: {e}"
                )

        return outcome

    def __repr__(self) -> str:
        state = "bound" if self.bound else "unbound"
        return f"{type(self).__name__}({self.describe()!r}, {state})"


class WriteEffect(Effect):
    """Write a message to a log sink."""

    kind = EffectKind.WRITE

    def __init__(self, sink: Optional[LogSink], message: str):
        super().__init__(sink)
        self.message = message

    @property
    def sink(self) -> Optional[LogSink]:
        return self._resource

    @property
    def description(self) -> str:
        return self.message

    async def _perform(self, resource: LogSink) -> Any:
        result = resource.write(self.message)
        if inspect.isawaitable(result):
            result = await result
        return result


class RequestEffect(Effect):
    """Send an HTTP request through a client."""

    kind = EffectKind.REQUEST

    def __init__(self, client: Optional[httpx.AsyncClient], request: httpx.Request):
        super().__init__(client)
        self.request = request

    @property
    def client(self) -> Optional[httpx.AsyncClient]:
        return self._resource

    @property
    def description(self) -> httpx.Request:
        return self.request

    def describe(self) -> str:
        return f"{self.request.method} {self.request.url}"

    def _same_description(self, other: Effect) -> bool:
        # Requests compare by identity, never by response or content.
        return self.request is other.description

    async def _perform(self, resource: Any) -> httpx.Response:
        return await resource.send(self.request)
