"""
iofx Workflows Package

Bundled workflows and the collaborators they depend on.
"""

from .save_file import FileSaver, SaveFileState, SaveFileWorkflow, save_file
from .sinks import LogFileSink, LogSink

__all__ = [
    "FileSaver",
    "SaveFileState",
    "SaveFileWorkflow",
    "save_file",
    "LogFileSink",
    "LogSink",
]
