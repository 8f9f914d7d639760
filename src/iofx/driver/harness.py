"""
Test harness: drive a workflow from a fixture instead of real resources.

Each fixture entry covers one emitted effect. The harness compares the
emitted effect with ``expect`` (when given) and resumes the workflow with
``send``; the real effect is never triggered.

Example:
    result = run_fixture(
        saver.save_file("moo", b"data"),
        [
            FixtureEntry(WriteEffect(None, "Saving file moo")),
            FixtureEntry(send=httpx.Response(200)),
            FixtureEntry(WriteEffect(None, "Successfully saved file moo")),
        ],
    )
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, Type, Union

from ..core.effects import Effect
from ..core.workflow import Emit, Workflow
from ..utils.errors import FixtureMismatchError


@dataclass
class FixtureEntry:
    """Expected effect (None matches anything) and the value to resume with."""

    expect: Optional[Effect] = None
    send: Any = None


@dataclass
class FixtureResult:
    """What a fixture run observed."""

    value: Any = None
    error: Optional[BaseException] = None
    effects: List[Effect] = field(default_factory=list)


FixtureLike = Union[FixtureEntry, Tuple[Optional[Effect], Any]]


def _entry(item: FixtureLike) -> FixtureEntry:
    if isinstance(item, FixtureEntry):
        return item
    expect, send = item
    return FixtureEntry(expect, send)


def _describe(effect: Optional[Effect]) -> Optional[str]:
    return None if effect is None else effect.describe()


def run_fixture(
    workflow: Workflow,
    fixture: Sequence[FixtureLike],
    raises: Optional[Type[BaseException]] = None,
) -> FixtureResult:
    """
    Drive ``workflow`` through ``fixture``.

    Args:
        workflow: A workflow that has not been started
        fixture: One entry per expected effect, in order
        raises: Exception type the workflow is expected to end with

    Returns:
        FixtureResult with the final value (or expected error) and every
        effect the workflow emitted

    Raises:
        FixtureMismatchError: When the workflow diverges from the fixture
    """
    entries = [_entry(item) for item in fixture]
    result = FixtureResult()
    index = 0

    try:
        step = workflow.start()
        while isinstance(step, Emit):
            effect = step.effect
            result.effects.append(effect)

            if index >= len(entries):
                raise FixtureMismatchError(
                    f"Effect {index} was not expected: fixture has {len(entries)} "
                    f"entries, workflow emitted {effect.describe()!r}",
                    index=index,
                    actual=effect.describe(),
                )

            entry = entries[index]
            if entry.expect is not None and not effect.equals(entry.expect):
                raise FixtureMismatchError(
                    f"Effect {index} mismatch: got {effect.describe()!r}, "
                    f"expected {entry.expect.describe()!r}",
                    index=index,
                    actual=effect.describe(),
                    expected=entry.expect.describe(),
                )

            index += 1
            step = workflow.resume(entry.send)

    except FixtureMismatchError:
        raise
    except Exception as e:
        if raises is None or not isinstance(e, raises):
            expected_name = raises.__name__ if raises else "no error"
            raise FixtureMismatchError(
                f"Workflow raised {type(e).__name__} at effect {index} "
                f"(expected {expected_name}): {e}",
                index=index,
                actual=type(e).__name__,
                expected=raises.__name__ if raises else None,
            ) from e
        if index < len(entries):
            raise FixtureMismatchError(
                f"Workflow raised {type(e).__name__} after {index} effects, "
                f"fixture expects {len(entries)}",
                index=index,
                actual=type(e).__name__,
                expected=_describe(entries[index].expect),
            ) from e
        result.error = e
        return result

    if index < len(entries):
        raise FixtureMismatchError(
            f"Workflow finished after {index} effects, fixture expects {len(entries)}",
            index=index,
            expected=_describe(entries[index].expect),
        )

    if raises is not None:
        raise FixtureMismatchError(
            f"Workflow finished after {index} effects without raising {raises.__name__}",
            index=index,
            expected=raises.__name__,
        )

    result.value = step.value
    return result
