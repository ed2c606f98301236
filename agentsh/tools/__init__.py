"""agentsh Tools Package - the Action Executor.

This package runs one approved action and returns its outcome:
- constants: Limits and timeouts
- validation: Path resolution and argument checks
- shell: run_shell_command
- file_ops: read_file / write_file
- definitions: Action declarations for the API
"""

import logging

from ..actions import ActionName, ActionRequest, ActionResult, coerce_arguments
from .constants import DEFAULT_SHELL_TIMEOUT, MAX_OUTPUT_SIZE
from .definitions import TOOL_DEFINITIONS as TOOL_DEFINITIONS
from .file_ops import read_file, write_file
from .shell import run_shell_command, truncate_output
from .validation import missing_arguments

logger = logging.getLogger(__name__)


def _run_shell(arguments, working_dir, shell_timeout, output_limit):
    result = run_shell_command(
        arguments["command"],
        timeout=shell_timeout,
        working_dir=working_dir,
        output_limit=output_limit,
    )
    if result["success"]:
        return result["output"], None
    return None, result["error"]


def _write_file(arguments, working_dir, shell_timeout, output_limit):
    result = write_file(arguments["path"], arguments["content"], working_dir=working_dir)
    if result["success"]:
        return f"Successfully wrote file: {arguments['path']}", None
    return None, result["error"]


def _read_file(arguments, working_dir, shell_timeout, output_limit):
    result = read_file(arguments["path"], working_dir=working_dir)
    if result["success"]:
        return result["content"], None
    return None, result["error"]


# One handler per ActionName; the set is closed.
ACTION_HANDLERS = {
    ActionName.RUN_SHELL_COMMAND: _run_shell,
    ActionName.WRITE_FILE: _write_file,
    ActionName.READ_FILE: _read_file,
}


def execute_action(
    request: ActionRequest,
    *,
    working_dir=None,
    shell_timeout=DEFAULT_SHELL_TIMEOUT,
    output_limit=MAX_OUTPUT_SIZE,
) -> ActionResult:
    """Run one approved action and return its outcome.

    Failures inside the action come back as ``ActionResult.fail``.

    Raises:
        UnknownActionError: if ``request.name`` is outside the fixed set.
    """
    kind = request.kind
    handler = ACTION_HANDLERS[kind]

    arguments = coerce_arguments(request.arguments)
    if arguments is None:
        return ActionResult.fail(request, "Arguments must be a JSON object")

    missing = missing_arguments(kind.value, arguments)
    if missing:
        return ActionResult.fail(request, f"Missing required argument: {', '.join(missing)}")

    output, error = handler(arguments, working_dir, shell_timeout, output_limit)
    if error is not None:
        logger.info(f"{kind.value} failed: {error.splitlines()[0] if error else ''}")
        return ActionResult.fail(request, error)

    logger.info(f"{kind.value} succeeded ({len(output)} chars)")
    return ActionResult.ok(request, output)


__all__ = [
    "ACTION_HANDLERS",
    "TOOL_DEFINITIONS",
    "execute_action",
    "read_file",
    "run_shell_command",
    "truncate_output",
    "write_file",
]
