"""Path and argument checks for agentsh actions.

agentsh Principle: Explicit Safety Checks
"""

from pathlib import Path

from .constants import REQUIRED_ARGUMENTS


def resolve_path(file_path, working_dir=None):
    """Resolve ``file_path`` against the working directory.

    Absolute paths are returned unchanged (normalized). Unlike a sandbox,
    paths outside the working directory are allowed: the operator approves
    every action before it runs.

    Returns:
        Tuple of (ok, resolved_path, error_message)
    """
    if not file_path:
        return False, None, "Path cannot be empty"

    try:
        base = Path(working_dir) if working_dir else Path.cwd()
        path = Path(file_path).expanduser()
        if not path.is_absolute():
            path = base / path
        return True, path.resolve(), None
    except (OSError, RuntimeError, TypeError) as error:
        return False, None, str(error)


def missing_arguments(action_name, arguments):
    """Return the required argument names absent from ``arguments``."""
    required = REQUIRED_ARGUMENTS.get(action_name, ())
    return [name for name in required if arguments.get(name) is None]
