"""
iofx Drivers

The production driver triggers effects for real; the fixture harness
substitutes synthetic results and asserts on what would have happened.
"""

from .harness import FixtureEntry, FixtureResult, run_fixture
from .reports import RunReport, StepReport, save_json_report
from .runner import EffectDriver, run_workflow

__all__ = [
    "EffectDriver",
    "run_workflow",
    "FixtureEntry",
    "FixtureResult",
    "run_fixture",
    "RunReport",
    "StepReport",
    "save_json_report",
]
