"""System instructions for agentsh: persona documents and the environment block."""

import logging
import os
import platform
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from .output import print_warning

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_NAME = "default"
MAX_LISTED_FILES = 200
LISTING_UNAVAILABLE = "Could not retrieve file list."

DEFAULT_PERSONA = """You are a careful command-line assistant working on the operator's machine.

You can call three tools: run_shell_command, write_file and read_file.
Every call is shown to the operator, who can allow it, deny it or skip it.

- Prefer reading before writing. Check what is there before you change it.
- Keep shell commands small and explain what each one is for.
- If a call is denied or skipped, do not retry it unchanged. Ask or adapt.
- When the task is done, answer in plain text without calling any tool."""


def load_persona(name=None, contexts_dir=None):
    """Load the persona document for ``name``.

    Looks for ``<contexts_dir>/<name>.md``, then ``default.md``, then the
    built-in persona. Each fallback prints a warning.
    """
    name = name or DEFAULT_CONTEXT_NAME
    contexts_dir = Path(contexts_dir) if contexts_dir is not None else None

    candidates = [name]
    if name != DEFAULT_CONTEXT_NAME:
        candidates.append(DEFAULT_CONTEXT_NAME)

    for candidate in candidates:
        if contexts_dir is None:
            break
        persona = _read_context_file(contexts_dir / f"{candidate}.md")
        if persona is not None:
            if candidate != name:
                print_warning(f"Context '{name}' not found, using '{candidate}'")
                logger.warning(f"Context '{name}' not found in {contexts_dir}, using '{candidate}'")
            return persona

    print_warning(f"Context '{name}' not found, using the built-in persona")
    logger.warning(f"No context documents for '{name}' in {contexts_dir}, using built-in persona")
    return DEFAULT_PERSONA


def _read_context_file(path):
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read context file {path}: {e}")
        return None


def list_directory(directory, limit=MAX_LISTED_FILES):
    """One-level listing of ``directory``, directories suffixed with ``/``.

    Hidden entries are skipped. Returns LISTING_UNAVAILABLE on failure.
    """
    try:
        entries = sorted(
            (entry for entry in os.scandir(directory) if not entry.name.startswith(".")),
            key=lambda entry: entry.name,
        )
        names = [entry.name + "/" if entry.is_dir() else entry.name for entry in entries]
    except OSError as e:
        logger.warning(f"Could not list {directory}: {e}")
        return LISTING_UNAVAILABLE

    if len(names) > limit:
        hidden = len(names) - limit
        names = names[:limit] + [f"... ({hidden} more)"]
    return "\n".join(names)


def describe_platform():
    return f"{platform.system()} {platform.release()} ({platform.machine()})"


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Working directory, file listing, platform and date, taken once per run."""

    cwd: str
    files: str
    platform: str
    date: str

    @classmethod
    def capture(cls, cwd=None):
        cwd = str(Path(cwd) if cwd is not None else Path.cwd())
        return cls(
            cwd=cwd,
            files=list_directory(cwd),
            platform=describe_platform(),
            date=date.today().isoformat(),
        )

    def render(self):
        return (
            "[ENVIRONMENT_CONTEXT]\n"
            f"CURRENT_WORKING_DIRECTORY: {self.cwd}\n"
            "FILES_IN_CURRENT_DIRECTORY:\n"
            f"{self.files}\n"
            f"PLATFORM: {self.platform}\n"
            f"DATE: {self.date}\n"
        )


def build_system_instructions(persona, snapshot):
    """Persona text followed by the environment block."""
    return f"{persona.rstrip()}\n\n{snapshot.render()}"
