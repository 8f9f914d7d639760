"""
iofx Core Package

Effect descriptions and the workflow suspend/resume protocol.
"""

from .effects import Effect, EffectKind, LogSink, Outcome, RequestEffect, WriteEffect
from .workflow import Done, Emit, GeneratorWorkflow, Step, Workflow

__all__ = [
    "Effect",
    "EffectKind",
    "Outcome",
    "LogSink",
    "WriteEffect",
    "RequestEffect",
    "Workflow",
    "GeneratorWorkflow",
    "Emit",
    "Done",
    "Step",
]
