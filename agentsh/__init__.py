# agentsh - Approval-Gated LLM Shell Agent
# Copyright (c) 2024-2026 Matthew Bright
# Licensed under the MIT License. See LICENSE file for details.

"""agentsh - let a model drive your shell, one approved action at a time."""

__version__ = "1.0.0"
__author__ = "Emera Digital Tools"

# Core exports
from .actions import ActionName, ActionRequest, ActionResult
from .agent import AgentLoop
from .conversation import Conversation, ModelTurn, ResultBatch, UserMessage
from .errors import (
    AgentError,
    ConfigError,
    LoopExhausted,
    TransportError,
    UnknownActionError,
)
from .safety import ApprovalDecision, ApprovalGate

__all__ = [
    # Version
    "__version__",
    "__author__",
    # Actions
    "ActionName",
    "ActionRequest",
    "ActionResult",
    # Conversation
    "Conversation",
    "ModelTurn",
    "ResultBatch",
    "UserMessage",
    # Loop
    "AgentLoop",
    # Approval
    "ApprovalDecision",
    "ApprovalGate",
    # Errors
    "AgentError",
    "ConfigError",
    "LoopExhausted",
    "TransportError",
    "UnknownActionError",
]
