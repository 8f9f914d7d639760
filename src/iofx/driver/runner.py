"""
Production driver: trigger each emitted effect for real and resume the
workflow with its result.
"""

import time
from typing import Any, Optional

from ..core.workflow import Emit, Workflow
from ..utils.config import IofxConfig
from ..utils.errors import WorkflowStateError
from ..utils.logging import get_logger, log_workflow_event
from .reports import RunReport, StepReport

logger = get_logger(__name__)


class EffectDriver:
    """
    Drives workflows against real resources.

    Effects are triggered one at a time; the workflow only advances after
    the current effect settles. Failures raised by the workflow, and errors
    carried by a failed effect's outcome, propagate to the caller.
    """

    def __init__(self, config: Optional[IofxConfig] = None):
        """Initialize the driver."""
        self.config = config or IofxConfig()
        self.report: Optional[RunReport] = None

    async def run(self, workflow: Workflow) -> Any:
        """
        Run ``workflow`` to completion.

        Args:
            workflow: A workflow that has not been started

        Returns:
            The value the workflow finished with

        Raises:
            WorkflowStateError: When the workflow exceeds ``max_steps``
        """
        report = RunReport(workflow=workflow.name)
        self.report = report
        start_time = time.time()

        log_workflow_event(
            logger,
            workflow.name,
            "started",
            {"run_id": report.run_id, "tags": self.config.tags},
        )

        try:
            step = workflow.start()
            while isinstance(step, Emit):
                if report.total_steps >= self.config.max_steps:
                    raise WorkflowStateError(
                        f"Workflow {workflow.name} exceeded {self.config.max_steps} steps",
                        workflow=workflow.name,
                        details={"max_steps": self.config.max_steps},
                    )

                effect = step.effect
                step_start = time.time()
                outcome = await effect.trigger()

                report.steps.append(
                    StepReport(
                        step_number=report.total_steps,
                        effect_kind=effect.kind.value,
                        description=effect.describe(),
                        duration_ms=(time.time() - step_start) * 1000,
                        success=outcome.ok,
                        error=None if outcome.ok else str(outcome.error),
                    )
                )

                step = workflow.resume(outcome.unwrap())

        except Exception as e:
            report.error = str(e)
            log_workflow_event(
                logger,
                workflow.name,
                "failed",
                {"run_id": report.run_id, "error": str(e), "steps": report.total_steps},
            )
            raise
        finally:
            report.execution_time_ms = (time.time() - start_time) * 1000

        report.completed = True
        log_workflow_event(
            logger,
            workflow.name,
            "finished",
            {"run_id": report.run_id, "steps": report.total_steps},
        )
        return step.value


async def run_workflow(workflow: Workflow, config: Optional[IofxConfig] = None) -> Any:
    """Convenience function to drive a workflow with a fresh EffectDriver."""
    return await EffectDriver(config).run(workflow)
