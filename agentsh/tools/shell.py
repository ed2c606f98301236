"""Shell execution for agentsh actions.

agentsh Principle: Explicit Over Implicit
"""

import logging
import os
import shutil
import subprocess

from .constants import DEFAULT_SHELL_TIMEOUT, MAX_OUTPUT_SIZE, TRUNCATION_MARKER

logger = logging.getLogger(__name__)


def truncate_output(text, limit=MAX_OUTPUT_SIZE):
    """Cut ``text`` to ``limit`` characters and flag the cut.

    The marker is appended once, so a truncated result is always exactly
    ``limit + len(TRUNCATION_MARKER)`` characters long.
    """
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def _shell_argv(command):
    if os.name == "nt":  # Windows
        return ["powershell", "-NoProfile", "-Command", command]
    shell = "bash" if shutil.which("bash") else "sh"
    return [shell, "-c", command]


def _combine(stdout, stderr):
    stdout = stdout or ""
    stderr = stderr or ""
    if not stderr:
        return stdout
    if not stdout:
        return f"[stderr]\n{stderr}"
    return f"{stdout}\n[stderr]\n{stderr}"


def run_shell_command(
    command, timeout=DEFAULT_SHELL_TIMEOUT, working_dir=None, output_limit=MAX_OUTPUT_SIZE
):
    """Execute a shell command.

    Args:
        command: Command to execute
        timeout: Timeout in seconds (default: 120)
        working_dir: Working directory (default: current)
        output_limit: Maximum characters of output to keep

    Returns:
        dict with success, output or error, returncode
    """
    if not isinstance(command, str) or not command.strip():
        return {"success": False, "error": "Command cannot be empty"}

    cwd = working_dir or os.getcwd()
    logger.info(f"Running shell command in {cwd}: {command}")

    try:
        result = subprocess.run(
            _shell_argv(command),
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"Shell command timed out after {timeout}s: {command}")
        return {"success": False, "error": f"Command timed out after {timeout} seconds"}
    except OSError as error:
        logger.warning(f"Shell command could not start: {error}")
        return {"success": False, "error": f"Failed to start command: {error}"}

    output = truncate_output(_combine(result.stdout, result.stderr), output_limit)

    if result.returncode != 0:
        message = f"Command failed with exit code {result.returncode}"
        if output:
            message = f"{message}\n{output}"
        return {"success": False, "error": message, "returncode": result.returncode}

    return {"success": True, "output": output, "returncode": 0}
