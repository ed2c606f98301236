"""Human approval gate for agentsh actions.

Every action the model requests passes through here before anything runs.
The gate fails closed: only an exact "y" approves and only an exact "skip"
skips. Everything else, including empty input, EOF and Ctrl+C, denies.
"""

import json
import logging
import sys
from enum import Enum

from .actions import ActionRequest, ActionResult, coerce_arguments
from .output import print_action_request, print_warning
from .tools.constants import MAX_DISPLAY_ARG_SIZE

logger = logging.getLogger(__name__)

APPROVAL_PROMPT = "Allow this action? (y/n/skip): "
DENIED_MESSAGE = "User denied permission."
SKIPPED_MESSAGE = "User explicitly skipped this action."


class ApprovalDecision(Enum):
    """What the operator decided for one pending action."""

    APPROVE = "approve"
    DENY = "deny"
    SKIP = "skip"


def parse_decision(answer):
    """Turn one line of operator input into a decision.

    Matching is case-insensitive but otherwise exact: surrounding whitespace
    is not stripped, so "Y " denies.
    """
    if answer is None:
        return ApprovalDecision.DENY

    normalized = answer.lower()
    if normalized == "y":
        return ApprovalDecision.APPROVE
    if normalized == "skip":
        return ApprovalDecision.SKIP
    return ApprovalDecision.DENY


def _preview_value(value, max_length):
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def describe_action(request: ActionRequest, max_value_length=MAX_DISPLAY_ARG_SIZE):
    """Render a request for review, shortening long argument values.

    Only the displayed copy is shortened; ``request.arguments`` is untouched.
    """
    arguments = coerce_arguments(request.arguments)
    if arguments is None:
        preview = _preview_value(request.arguments, max_value_length)
    else:
        preview = {
            key: _preview_value(value, max_value_length) for key, value in arguments.items()
        }
    return f"{request.name} -> {json.dumps(preview, ensure_ascii=False)}"


def refusal_result(request: ActionRequest, decision: ApprovalDecision) -> ActionResult:
    """Build the Error outcome for an action that was not approved."""
    if decision is ApprovalDecision.SKIP:
        return ActionResult.fail(request, SKIPPED_MESSAGE)
    return ActionResult.fail(request, DENIED_MESSAGE)


class ApprovalGate:
    """Asks the operator to approve, deny or skip each pending action.

    Blocks until a line of input arrives. Use as a context manager so an
    input stream opened by the gate is always released.
    """

    def __init__(self, stream=None, owns_stream=False):
        self._stream = stream
        self._owns_stream = owns_stream
        self._closed = False

    @classmethod
    def from_terminal(cls):
        """Read from the controlling terminal, even when stdin is piped."""
        if sys.stdin is not None and sys.stdin.isatty():
            return cls()
        try:
            tty = open("/dev/tty", encoding="utf-8")  # noqa: SIM115 - closed in close()
        except OSError:
            logger.debug("No controlling terminal, reading approvals from stdin")
            return cls()
        return cls(stream=tty, owns_stream=True)

    def _read_line(self, prompt):
        if self._stream is None:
            return input(prompt)

        print(prompt, end="", flush=True)
        line = self._stream.readline()
        if line == "":
            raise EOFError
        return line.rstrip("\r\n")

    def ask(self, request: ActionRequest) -> ApprovalDecision:
        """Show ``request`` and wait for the operator's decision."""
        if self._closed:
            raise RuntimeError("Approval gate is closed")

        print_action_request(describe_action(request))

        try:
            answer = self._read_line(APPROVAL_PROMPT)
        except (KeyboardInterrupt, EOFError):
            print()
            print_warning("No answer received, denying action.")
            answer = None

        decision = parse_decision(answer)
        logger.info(f"Approval for {request.name}: {decision.value}")
        return decision

    def close(self):
        if self._closed:
            return
        self._closed = True
        if self._owns_stream and self._stream is not None:
            self._stream.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
