"""Append-only conversation transcript for one agentsh run."""

from dataclasses import dataclass, field

from .actions import ActionRequest, ActionResult


@dataclass(frozen=True)
class UserMessage:
    """Plain text written by the operator."""

    text: str


@dataclass(frozen=True)
class ResultBatch:
    """All results for one pending model turn, in request order."""

    results: tuple[ActionResult, ...]

    def __len__(self):
        return len(self.results)


@dataclass(frozen=True)
class ModelTurn:
    """One reply from the model.

    ``raw`` holds the provider's own message object so it can be replayed
    verbatim on the next call (Gemini needs this to keep thought signatures).
    It is ignored for equality.
    """

    text: str = ""
    actions: tuple[ActionRequest, ...] = ()
    raw: object = field(default=None, compare=False, repr=False)

    @property
    def is_pending(self) -> bool:
        """True when the model asked for at least one action."""
        return len(self.actions) > 0


class Conversation:
    """Ordered record of everything sent to and received from the model.

    Only the loop controller appends to it. Entries are never edited or
    removed.
    """

    def __init__(self):
        self._entries = []

    def append(self, entry):
        if not isinstance(entry, (UserMessage, ResultBatch, ModelTurn)):
            raise TypeError(f"Not a conversation entry: {type(entry).__name__}")
        self._entries.append(entry)

    @property
    def entries(self) -> tuple:
        return tuple(self._entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
