"""
Tests for the production driver, run reports and the save_file entry point.
"""

import json
import logging
import os
import tempfile
from unittest.mock import Mock

import httpx
import pytest

from iofx.core.effects import WriteEffect
from iofx.core.workflow import GeneratorWorkflow
from iofx.driver.reports import save_json_report
from iofx.driver.runner import EffectDriver, run_workflow
from iofx.utils.config import IofxConfig
from iofx.utils.errors import MissingResourceError, SaveError, WorkflowStateError
from iofx.utils.logging import StructuredFormatter
from iofx.workflows.save_file import FileSaver, save_file
from iofx.workflows.sinks import LogFileSink


def upload_transport(status_code: int, received: list) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        received.append(request)
        return httpx.Response(status_code)

    return httpx.MockTransport(handler)


def read_lines(path: str) -> list:
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


def _noop():
    return
    yield


class TestEffectDriver:
    """Drive workflows against real and mocked collaborators."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_successful_save(self):
        """Test a successful upload writes both log lines and reports three steps."""
        received = []
        with tempfile.TemporaryDirectory() as tmp:
            log_path = os.path.join(tmp, "log.txt")
            with LogFileSink(log_path) as sink:
                async with httpx.AsyncClient(transport=upload_transport(200, received)) as client:
                    driver = EffectDriver()
                    result = await driver.run(
                        FileSaver(sink, client).save_file("moo", b"payload")
                    )

            assert result is None
            assert read_lines(log_path) == ["Saving file moo", "Successfully saved file moo"]

        assert len(received) == 1
        assert received[0].method == "POST"
        assert received[0].content == b"payload"

        report = driver.report
        assert report.success
        assert report.total_steps == 3
        assert [step.effect_kind for step in report.steps] == ["write", "request", "write"]
        assert report.steps[1].description.startswith("POST https://google.com")

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_failed_save_logs_then_raises(self):
        """Test a rejected upload logs the failure and then raises SaveError."""
        received = []
        with tempfile.TemporaryDirectory() as tmp:
            log_path = os.path.join(tmp, "log.txt")
            driver = EffectDriver()
            with LogFileSink(log_path) as sink:
                async with httpx.AsyncClient(transport=upload_transport(500, received)) as client:
                    with pytest.raises(SaveError) as exc_info:
                        await driver.run(FileSaver(sink, client).save_file("moo", b"x"))

            assert read_lines(log_path) == ["Saving file moo", "Failed to save file moo"]

        assert exc_info.value.status_code == 500
        assert driver.report.completed is False
        assert driver.report.error == "[SAVE_FAILED] Failed to save file moo"
        assert driver.report.total_steps == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unbound_effect_raises_missing_resource(self):
        """Test the driver raises MissingResourceError for unbound effects."""
        driver = EffectDriver()

        with pytest.raises(MissingResourceError):
            await driver.run(FileSaver(None, None).save_file("moo", b""))

        assert driver.report.total_steps == 1
        assert driver.report.steps[0].success is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generator_workflow_receives_results(self):
        """Test effect results are sent back into the workflow."""
        sink = Mock()
        sink.write.return_value = 11

        def workflow():
            written = yield WriteEffect(sink, "hello world")
            return written * 2

        assert await run_workflow(GeneratorWorkflow(workflow())) == 22

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_max_steps_guard(self):
        """Test an endless workflow stops at max_steps."""
        sink = Mock()

        def endless():
            while True:
                yield WriteEffect(sink, "again")

        driver = EffectDriver(IofxConfig(max_steps=5))

        with pytest.raises(WorkflowStateError, match="exceeded 5 steps"):
            await driver.run(GeneratorWorkflow(endless(), name="endless"))

        assert sink.write.call_count == 5

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failing_callback_still_records_step(self):
        """Test a raising completion callback does not stop the run."""
        sink = Mock()
        effect = WriteEffect(sink, "observed")
        effect.on_complete(Mock(side_effect=RuntimeError("observer broke")))

        def workflow():
            yield effect

        driver = EffectDriver()
        await driver.run(GeneratorWorkflow(workflow(), name="observed"))

        assert driver.report.success
        assert driver.report.total_steps == 1
        assert driver.report.steps[0].success is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_driver_logs_workflow_events(self, caplog):
        """Test start and finish events are logged with config tags."""
        caplog.set_level(logging.INFO, logger="iofx")

        await run_workflow(
            GeneratorWorkflow(_noop(), name="noop"), IofxConfig(tags={"env": "test"})
        )

        data = [getattr(record, "structured_data", {}) for record in caplog.records]
        operations = [entry.get("operation") for entry in data]
        assert "workflow_started" in operations
        assert "workflow_finished" in operations
        started = data[operations.index("workflow_started")]
        assert started["tags"] == {"env": "test"}


class TestRunReport:
    """Run reports serialize to JSON."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_save_json_report(self):
        """Test a run report is written as JSON."""
        driver = EffectDriver()
        await driver.run(GeneratorWorkflow(_noop(), name="noop"))

        with tempfile.TemporaryDirectory() as tmp:
            output = os.path.join(tmp, "reports", "run.json")
            save_json_report(driver.report, output)

            with open(output, "r", encoding="utf-8") as f:
                data = json.load(f)

        assert data["workflow"] == "noop"
        assert data["completed"] is True
        assert data["steps"] == []
        assert driver.report.get_summary()["success"] is True


class TestSaveFileEntryPoint:
    """The convenience entry point owns its collaborators."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_save_file_with_transport(self):
        """Test save_file writes the log file and uploads to the configured URL."""
        received = []
        try:
            with tempfile.TemporaryDirectory() as tmp:
                config = IofxConfig(
                    upload_url="https://example.test/upload",
                    log_path=os.path.join(tmp, "log.txt"),
                )

                report = await save_file(
                    "moo", b"data", config=config, transport=upload_transport(200, received)
                )

                assert read_lines(config.log_path) == [
                    "Saving file moo",
                    "Successfully saved file moo",
                ]
        finally:
            iofx_logger = logging.getLogger("iofx")
            iofx_logger.handlers.clear()
            iofx_logger.setLevel(logging.NOTSET)

        assert report.success
        assert str(received[0].url) == "https://example.test/upload"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_save_file_applies_logging_config(self):
        """Test save_file configures the iofx logger from the config."""
        iofx_logger = logging.getLogger("iofx")
        try:
            with tempfile.TemporaryDirectory() as tmp:
                config = IofxConfig(
                    log_path=os.path.join(tmp, "log.txt"),
                    log_level="DEBUG",
                    enable_structured_logging=False,
                )

                await save_file("moo", b"", config=config, transport=upload_transport(200, []))

            assert iofx_logger.level == logging.DEBUG
            assert len(iofx_logger.handlers) == 1
            assert not isinstance(iofx_logger.handlers[0].formatter, StructuredFormatter)
        finally:
            iofx_logger.handlers.clear()
            iofx_logger.setLevel(logging.NOTSET)


class TestLogFileSink:
    """File sink behavior."""

    @pytest.mark.integration
    def test_appends_lines(self):
        """Test each write appends one line across reopenings."""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "log.txt")
            with LogFileSink(path) as sink:
                sink.write("one")
            with LogFileSink(path) as sink:
                sink.write("two")
                assert not sink.closed

            assert read_lines(path) == ["one", "two"]
            assert sink.closed

    @pytest.mark.unit
    def test_write_when_closed(self):
        """Test writing to a closed sink fails."""
        with pytest.raises(ValueError, match="not open"):
            LogFileSink("unused.txt").write("x")
