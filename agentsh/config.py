"""Configuration loader for agentsh."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from .agent import DEFAULT_MAX_ITERATIONS
from .errors import ConfigError
from .tools.constants import DEFAULT_SHELL_TIMEOUT, MAX_OUTPUT_SIZE

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".agentsh"
ENV_FILENAME = ".env"
SETTINGS_FILENAME = "settings.json"
CONTEXTS_DIRNAME = "contexts"
LOGS_DIRNAME = "logs"

CONTEXTS_DIR_ENV_VAR = "AGENTSH_CONTEXTS_DIR"

SUPPORTED_PROVIDERS = ("gemini", "claude", "openai")
DEFAULT_PROVIDER = "gemini"

# Used when settings.json is missing, unreadable or has no usable models
DEFAULT_MODEL_ALIAS = "flash"
DEFAULT_MODEL_ALIASES = {
    "flash": "gemini-3-flash-preview",
}

# Checked in order; the first non-placeholder value wins
PROVIDER_ENV_VARS = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "claude": ("ANTHROPIC_API_KEY",),
    "openai": ("OPENAI_API_KEY",),
}

PROVIDER_URLS = {
    "gemini": "https://aistudio.google.com/apikey",
    "claude": "https://console.anthropic.com/settings/keys",
    "openai": "https://platform.openai.com/api-keys",
}


@dataclass
class Config:
    """agentsh configuration for one run."""

    provider: str
    api_key: str
    model: str
    model_alias: str = DEFAULT_MODEL_ALIAS
    context_name: str = "default"
    contexts_dir: Path = CONFIG_DIR / CONTEXTS_DIRNAME
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    shell_timeout: int = DEFAULT_SHELL_TIMEOUT
    output_limit: int = MAX_OUTPUT_SIZE
    verbose: bool = False


def load_env_file(env_file):
    """Read KEY=VALUE pairs from ``env_file`` without touching os.environ."""
    env_file = Path(env_file)
    if not env_file.is_file():
        return {}

    try:
        values = dotenv_values(env_file)
    except (OSError, UnicodeDecodeError):
        logger.warning(f"Failed to read env file: {env_file}")
        return {}

    return {key: value for key, value in values.items() if value is not None}


def load_settings_file(settings_file):
    """Load settings.json. Anything unreadable counts as empty."""
    settings_file = Path(settings_file)
    if not settings_file.exists():
        return {}

    try:
        settings = json.loads(settings_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        logger.warning(f"Failed to parse settings file: {settings_file}")
        return {}

    if not isinstance(settings, dict):
        logger.warning(f"Ignoring settings file {settings_file}: top level is not an object")
        return {}
    return settings


def parse_model_spec(spec):
    """Split ``"provider:model-id"`` into its parts.

    A bare ``"model-id"`` belongs to the default provider (gemini).
    """
    if ":" in spec:
        provider, model = spec.split(":", 1)
        if provider not in SUPPORTED_PROVIDERS:
            raise ConfigError(
                f"Unknown provider: {provider}\nSupported: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        return provider, model
    return DEFAULT_PROVIDER, spec


def _model_aliases(settings):
    aliases = dict(DEFAULT_MODEL_ALIASES)
    models = settings.get("models")
    if models is None:
        return aliases
    if not isinstance(models, dict):
        logger.warning("Ignoring 'models' in settings.json: expected an object")
        return aliases

    for alias, spec in models.items():
        if isinstance(spec, str) and spec.strip():
            aliases[alias] = spec.strip()
        else:
            logger.warning(f"Ignoring model alias '{alias}': expected a model name")
    return aliases


def resolve_model(alias, settings):
    """Map a model alias onto ``(alias, model_spec)``.

    Unknown aliases fall back to the configured default, which in turn
    falls back to the built-in "flash" alias.
    """
    aliases = _model_aliases(settings)

    default_alias = settings.get("default_model")
    if default_alias not in aliases:
        if default_alias is not None:
            logger.warning(
                f"default_model '{default_alias}' is not a known alias, using '{DEFAULT_MODEL_ALIAS}'"
            )
        default_alias = DEFAULT_MODEL_ALIAS

    if alias is None:
        alias = default_alias
    elif alias not in aliases:
        logger.warning(f"Unknown model alias '{alias}', using '{default_alias}'")
        alias = default_alias

    return alias, aliases[alias]


def positive_int(value, default, name="value"):
    """Return ``value`` as a positive int, or ``default`` if it is not one."""
    if value is None:
        return default
    if isinstance(value, bool):
        logger.warning(f"Invalid {name}: {value!r}, using {default}")
        return default

    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {name}: {value!r}, using {default}")
        return default

    if number <= 0:
        logger.warning(f"Invalid {name}: {value!r}, using {default}")
        return default
    return number


def is_placeholder_key(key):
    """Check if key is a placeholder, not a real API key."""
    if not key:
        return True
    key_lower = key.lower().strip()
    return (
        key_lower.startswith("paste_your")
        or key_lower.startswith("your-")
        or key_lower == ""
        or "placeholder" in key_lower
    )


def find_api_key(provider, env_values):
    """Look up the provider's key in the process environment, then the .env file."""
    for source in (os.environ, env_values):
        for var in PROVIDER_ENV_VARS[provider]:
            candidate = source.get(var)
            if not is_placeholder_key(candidate):
                return candidate
    return None


def load_config(model_alias=None, context_name=None, verbose=False, config_dir=None):
    """Load configuration from CLI overrides, environment and ~/.agentsh.

    Raises:
        ConfigError: if the model spec names an unknown provider or no API
            key is available for the chosen provider.
    """
    config_dir = Path(config_dir) if config_dir is not None else CONFIG_DIR
    env_values = load_env_file(config_dir / ENV_FILENAME)
    settings = load_settings_file(config_dir / SETTINGS_FILENAME)

    alias, spec = resolve_model(model_alias, settings)
    provider, model = parse_model_spec(spec)

    api_key = find_api_key(provider, env_values)
    if not api_key:
        names = " or ".join(PROVIDER_ENV_VARS[provider])
        raise ConfigError(
            f"No API key for {provider}. Set {names} in your environment or in "
            f"{config_dir / ENV_FILENAME} (get one at {PROVIDER_URLS[provider]})"
        )

    contexts_dir = (
        os.getenv(CONTEXTS_DIR_ENV_VAR)
        or env_values.get(CONTEXTS_DIR_ENV_VAR)
        or settings.get("contexts_dir")
    )
    contexts_dir = (
        Path(contexts_dir).expanduser() if contexts_dir else config_dir / CONTEXTS_DIRNAME
    )

    config = Config(
        provider=provider,
        api_key=api_key,
        model=model,
        model_alias=alias,
        context_name=context_name or "default",
        contexts_dir=contexts_dir,
        max_iterations=positive_int(
            settings.get("max_iterations"), DEFAULT_MAX_ITERATIONS, "max_iterations"
        ),
        shell_timeout=positive_int(
            settings.get("shell_timeout"), DEFAULT_SHELL_TIMEOUT, "shell_timeout"
        ),
        output_limit=positive_int(settings.get("output_limit"), MAX_OUTPUT_SIZE, "output_limit"),
        verbose=verbose,
    )
    logger.debug(f"Loaded config: provider={provider} model={model} alias={alias}")
    return config
