"""Action declarations sent to the model.

agentsh Principle: Single Source of Truth
Providers convert these into their own tool formats.
"""

TOOL_DEFINITIONS = [
    {
        "name": "run_shell_command",
        "description": (
            "Execute a shell command on this machine. Use for navigation, "
            "package management, or system checks."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "command": {"type": "string", "description": "The full shell command"},
            },
            "required": ["command"],
        },
    },
    {
        "name": "write_file",
        "description": "Create or overwrite a file at a specific path with content.",
        "input_schema": {
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Relative or absolute path"},
                "content": {"type": "string", "description": "Full content of the file"},
            },
            "required": ["path", "content"],
        },
    },
    {
        "name": "read_file",
        "description": "Read the contents of a file to understand code or configuration.",
        "input_schema": {
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Path to the file"},
            },
            "required": ["path"],
        },
    },
]
