"""
iofx: Effect Descriptions for Testable Async Workflows

Workflows emit lazy descriptions of their side effects (log writes, HTTP
requests) instead of performing them. A driver either triggers each effect
for real, or, in tests, compares it with an expected description and feeds
back a synthetic result without touching the filesystem or network.

Key Features:
- Lazy, equatable effects that compare equal regardless of bound resources
- Explicit start/resume workflow protocol
- Production driver with structured logging and run reports
- Fixture harness with index-level mismatch diagnostics

Example:
    from iofx import FileSaver, FixtureEntry, WriteEffect, run_fixture

    saver = FileSaver(sink=None, client=None)
    run_fixture(
        saver.save_file("moo", b"data"),
        [
            FixtureEntry(WriteEffect(None, "Saving file moo")),
            FixtureEntry(send=httpx.Response(200)),
            FixtureEntry(WriteEffect(None, "Successfully saved file moo")),
        ],
    )
"""

__version__ = "0.1.0"

from .core.effects import Effect, EffectKind, Outcome, RequestEffect, WriteEffect
from .core.workflow import Done, Emit, GeneratorWorkflow, Workflow
from .driver.harness import FixtureEntry, FixtureResult, run_fixture
from .driver.reports import RunReport, StepReport
from .driver.runner import EffectDriver, run_workflow
from .utils.config import IofxConfig
from .utils.errors import (
    FixtureMismatchError,
    IofxError,
    MissingResourceError,
    SaveError,
    WorkflowStateError,
)
from .workflows.save_file import FileSaver, SaveFileWorkflow, save_file
from .workflows.sinks import LogFileSink

__all__ = [
    # Effects
    "Effect",
    "EffectKind",
    "Outcome",
    "WriteEffect",
    "RequestEffect",
    # Workflow protocol
    "Workflow",
    "GeneratorWorkflow",
    "Emit",
    "Done",
    # Drivers
    "EffectDriver",
    "run_workflow",
    "FixtureEntry",
    "FixtureResult",
    "run_fixture",
    "RunReport",
    "StepReport",
    # Bundled workflow
    "FileSaver",
    "SaveFileWorkflow",
    "save_file",
    "LogFileSink",
    # Configuration
    "IofxConfig",
    # Error types
    "IofxError",
    "MissingResourceError",
    "SaveError",
    "WorkflowStateError",
    "FixtureMismatchError",
    # Version
    "__version__",
]
