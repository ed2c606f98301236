# agentsh - Approval-Gated LLM Shell Agent
# Copyright (c) 2024-2026 Matthew Bright
# Licensed under the MIT License. See LICENSE file for details.

"""CLI entry point for agentsh."""

import argparse
import logging
import sys

from . import __version__
from .agent import AgentLoop
from .api_client import create_client
from .config import CONFIG_DIR, LOGS_DIRNAME, load_config
from .context import EnvironmentSnapshot, build_system_instructions, load_persona
from .errors import ConfigError, LoopExhausted, TransportError
from .log_config import configure_logging
from .output import print_agent_response, print_error, print_fatal
from .safety import ApprovalGate

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="agentsh",
        description="agentsh - let a model drive your shell, one approved action at a time",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  agentsh list the python files here and count their lines
  agentsh -m pro write a README for this project
  agentsh -c network check which ports are listening

Every action the model requests is shown first. Answer y to allow,
skip to skip it, anything else to deny.

Environment variables:
  GEMINI_API_KEY        Gemini key (GOOGLE_API_KEY also works)
  ANTHROPIC_API_KEY     Claude key
  OPENAI_API_KEY        OpenAI key
  AGENTSH_CONTEXTS_DIR  Where context documents live
        """,
    )

    parser.add_argument(
        "--model",
        "-m",
        dest="model_alias",
        help="Model alias from settings.json (default: flash)",
    )

    parser.add_argument(
        "--context",
        "-c",
        dest="context_name",
        help="Context document to load from the contexts directory (default: default)",
    )

    parser.add_argument(
        "--verbose",
        "-V",
        action="store_true",
        help="Show debug logging on the console",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"agentsh {__version__}",
    )

    parser.add_argument(
        "prompt",
        nargs=argparse.REMAINDER,
        help="The task for the model",
    )

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        log_dir=CONFIG_DIR / LOGS_DIRNAME,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    prompt = " ".join(args.prompt).strip()
    if not prompt:
        parser.print_usage()
        sys.exit(0)

    try:
        config = load_config(
            model_alias=args.model_alias,
            context_name=args.context_name,
            verbose=args.verbose,
        )
    except ConfigError as error:
        print_error(str(error))
        sys.exit(1)

    persona = load_persona(config.context_name, config.contexts_dir)
    snapshot = EnvironmentSnapshot.capture()
    system_instructions = build_system_instructions(persona, snapshot)

    try:
        client = create_client(
            config.provider,
            config.api_key,
            config.model,
            system_prompt=system_instructions,
        )
    except ImportError as error:
        print_error(str(error))
        sys.exit(1)

    logger.info(f"Using {config.provider}:{config.model} with context '{config.context_name}'")

    with ApprovalGate.from_terminal() as gate:
        loop = AgentLoop(
            client,
            gate,
            max_iterations=config.max_iterations,
            shell_timeout=config.shell_timeout,
            output_limit=config.output_limit,
        )
        try:
            answer = loop.run_conversation(prompt)
        except (TransportError, LoopExhausted) as error:
            print_fatal(str(error))
            sys.exit(1)
        except KeyboardInterrupt:
            print("\nCancelled.")
            sys.exit(130)

    print_agent_response(answer)


if __name__ == "__main__":
    main()
