"""Terminal output formatting for agentsh."""

import sys

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_cyan": "\033[96m",
    "gray": "\033[90m",
}


def supports_color():
    """Check if terminal supports colors."""
    if not hasattr(sys.stdout, "isatty"):
        return False
    if not sys.stdout.isatty():
        return False
    return True


def colorize(text, color):
    """Apply color to text if supported."""
    if not supports_color():
        return text
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def print_error(message):
    """Print an error message."""
    print(colorize(f"Error: {message}", "red"))


def print_fatal(message):
    """Print a run-ending error once, with a distinct marker."""
    print(colorize(f"\n[Fatal Error]: {message}", "red"), file=sys.stderr)


def print_warning(message):
    """Print a warning message."""
    print(colorize(f"⚠ {message}", "yellow"))


def print_action_request(description):
    """Show a pending action before the approval prompt."""
    print()
    print(colorize("[AI Action Request]: ", "bright_cyan") + description)


def print_action_outcome(result):
    """Print a one-line summary of an action result."""
    if result.success:
        lines = result.output.count("\n") + 1 if result.output else 0
        print(colorize(f"  ✓ {result.name} ({lines} lines)", "green"))
        return

    first_line = (result.error or "failed").splitlines()[0]
    if len(first_line) > 80:
        first_line = first_line[:77] + "..."
    print(colorize(f"  ✗ {result.name}: {first_line}", "red"))


def print_model_note(text):
    """Print narrative text the model sent alongside action requests."""
    if text.strip():
        print()
        print(colorize(text.strip(), "gray"))


def print_agent_response(text):
    """Print the model's final answer."""
    print()
    print(colorize("[Bot]:", "bold"))
    print(text)
