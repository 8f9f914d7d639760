"""
Save-file workflow: log, upload, log the result.

Every observable action, including the failure log line, is emitted as an
effect so a fixture can assert the whole sequence without performing it.
"""

from enum import Enum
from typing import Any, Optional

import httpx

from ..core.effects import LogSink, RequestEffect, WriteEffect
from ..core.workflow import Done, Emit, Step, Workflow
from ..driver.reports import RunReport
from ..driver.runner import EffectDriver
from ..utils.config import DEFAULT_UPLOAD_URL, IofxConfig
from ..utils.errors import SaveError, WorkflowStateError
from ..utils.logging import get_logger, setup_logging
from .sinks import LogFileSink

logger = get_logger(__name__)


class SaveFileState(str, Enum):
    ANNOUNCING = "announcing"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    DONE = "done"


class SaveFileWorkflow(Workflow):
    """
    Upload ``payload`` and log progress for ``path``.

    Emits, in order: the "Saving file" write, the POST request, then either
    the "Successfully saved file" write (status 200) or the "Failed to save
    file" write followed by ``SaveError``.
    """

    name = "save_file"

    def __init__(
        self,
        sink: Optional[LogSink],
        client: Optional[httpx.AsyncClient],
        path: str,
        payload: bytes,
        upload_url: str = DEFAULT_UPLOAD_URL,
    ):
        super().__init__()
        self.sink = sink
        self.client = client
        self.path = path
        self.payload = payload
        self.upload_url = upload_url
        self.state = SaveFileState.ANNOUNCING
        self.status_code: Optional[int] = None

    def build_request(self) -> httpx.Request:
        return httpx.Request("POST", self.upload_url, content=self.payload)

    def _begin(self) -> Step:
        return Emit(WriteEffect(self.sink, f"Saving file {self.path}"))

    def _advance(self, value: Any) -> Step:
        if self.state is SaveFileState.ANNOUNCING:
            self.state = SaveFileState.UPLOADING
            return Emit(RequestEffect(self.client, self.build_request()))

        if self.state is SaveFileState.UPLOADING:
            status_code = getattr(value, "status_code", None)
            if not isinstance(status_code, int):
                raise WorkflowStateError(
                    f"Workflow {self.name} expected an HTTP response for {self.path}, "
                    f"got {type(value).__name__}",
                    workflow=self.name,
                    details={"path": self.path},
                )
            self.status_code = status_code
            if self.status_code == 200:
                self.state = SaveFileState.SUCCEEDED
                return Emit(WriteEffect(self.sink, f"Successfully saved file {self.path}"))
            self.state = SaveFileState.FAILED
            return Emit(WriteEffect(self.sink, f"Failed to save file {self.path}"))

        if self.state is SaveFileState.SUCCEEDED:
            self.state = SaveFileState.DONE
            return Done()

        # FAILED: the failure log line has been emitted, now surface the error
        self.state = SaveFileState.DONE
        raise SaveError(
            self.path,
            status_code=self.status_code,
            details={"upload_url": self.upload_url},
        )


class FileSaver:
    """Binds a log sink and an HTTP client once and builds save workflows."""

    def __init__(
        self,
        sink: Optional[LogSink],
        client: Optional[httpx.AsyncClient],
        upload_url: str = DEFAULT_UPLOAD_URL,
    ):
        self.sink = sink
        self.client = client
        self.upload_url = upload_url

    def save_file(self, path: str, payload: bytes) -> SaveFileWorkflow:
        return SaveFileWorkflow(
            self.sink, self.client, path, payload, upload_url=self.upload_url
        )


async def save_file(
    path: str,
    payload: bytes,
    config: Optional[IofxConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RunReport:
    """
    Convenience function to save a file for real.

    Opens the configured log file, builds an HTTP client, drives the
    workflow and closes both collaborators.

    Args:
        path: Name of the file being saved
        payload: File contents sent as the request body
        config: Optional configuration, defaults to environment-based config
        transport: Optional httpx transport for the client

    Returns:
        RunReport for the completed run

    Raises:
        SaveError: When the upload is not accepted
    """
    config = config or IofxConfig.from_env()
    setup_logging(config.log_level, config.enable_structured_logging)
    driver = EffectDriver(config)

    with LogFileSink(config.log_path) as sink:
        async with httpx.AsyncClient(
            timeout=config.timeout, transport=transport
        ) as client:
            saver = FileSaver(sink, client, upload_url=config.upload_url)
            await driver.run(saver.save_file(path, payload))

    logger.info(f"Saved file {path} in {driver.report.total_steps} steps")
    return driver.report
