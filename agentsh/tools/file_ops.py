"""File operations for agentsh actions.

agentsh Principle: One Function, One Purpose
"""

import logging

from .validation import resolve_path

logger = logging.getLogger(__name__)


def read_file(file_path, working_dir=None):
    """Read the full text of a file.

    Args:
        file_path: Path to the file, relative to the working directory or absolute
        working_dir: Base for relative paths (default: current)

    Returns:
        dict with success, content, path
    """
    ok, path, error = resolve_path(file_path, working_dir)
    if not ok:
        return {"success": False, "error": error}

    try:
        if not path.exists():
            return {"success": False, "error": f"File not found: {file_path}"}

        if not path.is_file():
            return {"success": False, "error": f"Not a file: {file_path}"}

        content = path.read_text(encoding="utf-8")
        logger.debug(f"Read {len(content)} chars from {path}")
        return {"success": True, "content": content, "path": str(path)}

    except PermissionError:
        return {"success": False, "error": f"Permission denied: {file_path}"}
    except UnicodeDecodeError:
        return {"success": False, "error": f"Cannot read binary file: {file_path}"}
    except OSError as error:
        return {"success": False, "error": str(error)}


def write_file(file_path, content, working_dir=None):
    """Write content to a file. Creates parent directories if needed.

    Existing files are overwritten, never appended to.

    Args:
        file_path: Path to the file, relative to the working directory or absolute
        content: Content to write
        working_dir: Base for relative paths (default: current)

    Returns:
        dict with success, path, bytes_written, is_new_file
    """
    ok, path, error = resolve_path(file_path, working_dir)
    if not ok:
        return {"success": False, "error": error}

    if not isinstance(content, str):
        content = str(content)

    try:
        if path.is_dir():
            return {"success": False, "error": f"Path is a directory: {file_path}"}

        is_new_file = not path.exists()

        # Create parent directories
        path.parent.mkdir(parents=True, exist_ok=True)

        path.write_text(content, encoding="utf-8")
        logger.info(f"Wrote {len(content)} chars to {path}")

        return {
            "success": True,
            "path": str(path),
            "bytes_written": len(content.encode("utf-8")),
            "is_new_file": is_new_file,
        }
    except PermissionError:
        return {"success": False, "error": f"Permission denied: {file_path}"}
    except OSError as error:
        return {"success": False, "error": str(error)}
