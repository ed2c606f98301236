"""Exception types for agentsh.

Only transport failures and the iteration guard end a run. Everything that
goes wrong while running an action is turned into an ActionResult instead.
"""


class AgentError(Exception):
    """Base class for agentsh errors."""

    pass


class TransportError(AgentError):
    """Raised when the remote model call cannot complete (network, auth, malformed reply)."""

    pass


class LoopExhausted(AgentError):
    """Raised when the model keeps requesting actions past the iteration limit."""

    def __init__(self, iterations, last_text=""):
        self.iterations = iterations
        self.last_text = last_text
        super().__init__(
            f"Stopped after {iterations} action rounds without a final answer. "
            "Raise max_iterations in settings.json if this task needs more."
        )


class UnknownActionError(AgentError):
    """Raised when the model asks for an action outside the fixed set."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown action: {name}")


class ConfigError(AgentError):
    """Raised when the configuration cannot be used (missing key, bad provider)."""

    pass
