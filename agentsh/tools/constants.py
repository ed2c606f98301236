"""Constants for agentsh actions.

agentsh Principle: Single Source of Truth for Configuration
"""

# =============================================================================
# SIZE LIMITS (named constants to avoid magic numbers)
# =============================================================================

MAX_OUTPUT_SIZE = 2_000  # Shell output sent back to the model
TRUNCATION_MARKER = "\n... [Output truncated]"
MAX_DISPLAY_ARG_SIZE = 150  # Per-argument preview in the approval prompt

# =============================================================================
# TIMEOUTS
# =============================================================================

DEFAULT_SHELL_TIMEOUT = 120  # seconds

# =============================================================================
# REQUIRED ARGUMENTS PER ACTION
# =============================================================================

REQUIRED_ARGUMENTS = {
    "run_shell_command": ("command",),
    "write_file": ("path", "content"),
    "read_file": ("path",),
}
