"""
iofx Workflow Protocol

A workflow is an explicit suspend/resume state machine. ``start`` emits the
first step; each ``resume`` receives the result of the previous effect and
emits the next one. A workflow terminates with ``Done`` or by raising.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generator, Optional, Union

from ..utils.errors import WorkflowStateError
from .effects import Effect


@dataclass(frozen=True)
class Emit:
    """The workflow is suspended on an effect."""

    effect: Effect


@dataclass(frozen=True)
class Done:
    """The workflow finished successfully."""

    value: Any = None


Step = Union[Emit, Done]


class Workflow(ABC):
    """Base class enforcing start/resume ordering around ``_begin``/``_advance``."""

    name: str = "workflow"

    def __init__(self) -> None:
        self._started = False
        self._finished = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def finished(self) -> bool:
        return self._finished

    @abstractmethod
    def _begin(self) -> Step:
        """Emit the first step."""

    @abstractmethod
    def _advance(self, value: Any) -> Step:
        """Consume the previous effect's result and emit the next step."""

    def start(self) -> Step:
        if self._started:
            raise WorkflowStateError(
                f"Workflow {self.name} already started", workflow=self.name
            )
        self._started = True
        return self._guard(self._begin)

    def resume(self, value: Any = None) -> Step:
        if not self._started:
            raise WorkflowStateError(
                f"Workflow {self.name} resumed before start", workflow=self.name
            )
        if self._finished:
            raise WorkflowStateError(
                f"Workflow {self.name} resumed after it finished", workflow=self.name
            )
        return self._guard(self._advance, value)

    def _guard(self, func, *args) -> Step:
        try:
            step = func(*args)
        except BaseException:
            self._finished = True
            raise
        if isinstance(step, Done):
            self._finished = True
        return step


class GeneratorWorkflow(Workflow):
    """Drive a plain generator that yields effects through the workflow protocol."""

    def __init__(self, generator: Generator[Effect, Any, Any], name: Optional[str] = None):
        super().__init__()
        self._generator = generator
        self.name = name or getattr(generator, "__name__", "generator")

    def _begin(self) -> Step:
        return self._step(self._generator.send, None)

    def _advance(self, value: Any) -> Step:
        return self._step(self._generator.send, value)

    def _step(self, send, value: Any) -> Step:
        try:
            effect = send(value)
        except StopIteration as stop:
            return Done(stop.value)
        if not isinstance(effect, Effect):
            self._generator.close()
            raise TypeError(
                f"Workflow {self.name} yielded {type(effect).__name__}, expected an Effect"
            )
        return Emit(effect)
