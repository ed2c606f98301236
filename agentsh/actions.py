"""Action request/result types shared by the loop, gate and executor.

agentsh Principle: Standardized Interfaces Over Custom Protocols
Every action comes back as the same ActionResult shape, whether it ran,
failed, or was never allowed to run.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from .errors import UnknownActionError


class ActionName(str, Enum):
    """The closed set of actions a model may request."""

    RUN_SHELL_COMMAND = "run_shell_command"
    WRITE_FILE = "write_file"
    READ_FILE = "read_file"

    @classmethod
    def parse(cls, name):
        """Map a raw action name onto the enum, or raise UnknownActionError."""
        try:
            return cls(name)
        except ValueError:
            raise UnknownActionError(name) from None


def coerce_arguments(value):
    """Return ``value`` as a plain dict, or None if it is not a JSON object."""
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    return None


@dataclass(frozen=True)
class ActionRequest:
    """A single action proposed by the model.

    ``name`` is kept as the raw string the model sent; use ``kind`` to get the
    validated ActionName. ``call_id`` is only set by providers that correlate
    results by id (Claude, OpenAI).
    """

    name: str
    arguments: dict = field(default_factory=dict)
    call_id: str | None = None

    @property
    def kind(self) -> ActionName:
        return ActionName.parse(self.name)


@dataclass
class ActionResult:
    """Outcome of one ActionRequest: Success(output) or Error(error)."""

    name: str
    success: bool
    output: str = ""
    error: str | None = None
    call_id: str | None = None

    @classmethod
    def ok(cls, request: ActionRequest, output: str) -> "ActionResult":
        """Create a successful result for ``request``."""
        return cls(name=request.name, success=True, output=output, call_id=request.call_id)

    @classmethod
    def fail(cls, request: ActionRequest, error: str) -> "ActionResult":
        """Create a failed result for ``request``."""
        return cls(name=request.name, success=False, error=error, call_id=request.call_id)

    @property
    def text(self) -> str:
        """The text the model will see for this result."""
        return self.output if self.success else (self.error or "")

    def to_response(self) -> dict:
        """Provider-neutral response payload."""
        if self.success:
            return {"content": self.output}
        return {"error": self.error}
