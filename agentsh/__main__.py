"""Allow running agentsh as ``python -m agentsh``."""

from .cli import main

if __name__ == "__main__":
    main()
