"""Plan executor - executes a prepared tag plan."""

import logging

from .exceptions import GitOperationError
from .io_layer import IOLayer
from .models import ExecutionResult, TagPlan

logger = logging.getLogger(__name__)


def execute_plan(plan: TagPlan, io_layer: IOLayer) -> ExecutionResult:
    """
    Execute a prepared plan.

    Creates the annotated tag on the planned commit and pushes it.
    In dry run mode the I/O layer only reports what it would do.
    """
    result = ExecutionResult(success=True, tag=plan.new_tag, dry_run=plan.dry_run)
    comment = plan.comment or plan.new_tag

    try:
        logger.info(f"Creating tag {plan.new_tag} on commit {plan.target_commit[:8]}")
        if io_layer.create_tag(plan.new_tag, comment, plan.target_commit):
            result.changes_made.append(f"Created tag {plan.new_tag}")

        if io_layer.push_tag(plan.new_tag):
            result.changes_made.append(f"Pushed tag {plan.new_tag} to {io_layer.remote}")

    except GitOperationError as e:
        result.success = False
        result.errors.append(f"Execution failed: {e}")

    return result
