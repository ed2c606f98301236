"""Multi-provider turn transport for agentsh.

Each client takes the conversation so far plus one delta (a user message or
a batch of action results), renders it into the provider's native format,
and returns the model's next turn as a ModelTurn. Any failure that survives
the retries is raised as TransportError.
"""

import json
import logging
import random
import time
from abc import ABC, abstractmethod
from functools import wraps

from .actions import ActionRequest, coerce_arguments
from .conversation import ModelTurn, ResultBatch, UserMessage
from .errors import TransportError
from .tools import TOOL_DEFINITIONS

# Production Readiness: Explicit timeouts prevent hung connections
DEFAULT_TIMEOUT_SECONDS = 120  # 2 minutes max for LLM responses
DEFAULT_CONNECT_TIMEOUT = 10  # 10 seconds to establish connection
DEFAULT_MAX_TOKENS = 8192

# Production Readiness: Exponential backoff configuration
DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 1.0  # seconds
DEFAULT_MAX_DELAY = 60.0  # seconds
DEFAULT_EXPONENTIAL_BASE = 2

logger = logging.getLogger(__name__)


class RetryableError(Exception):
    """Wrapper for errors that should trigger a retry."""

    def __init__(self, original_error, is_rate_limit=False):
        self.original_error = original_error
        self.is_rate_limit = is_rate_limit
        super().__init__(str(original_error))


def calculate_backoff_delay(
    attempt: int,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    exponential_base: int = DEFAULT_EXPONENTIAL_BASE,
    jitter: bool = True,
) -> float:
    """Calculate delay for exponential backoff with optional jitter.

    Args:
        attempt: Current attempt number (0-indexed)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay cap in seconds
        exponential_base: Base for exponential calculation
        jitter: Add random jitter to prevent thundering herd

    Returns:
        Delay in seconds before next retry
    """
    delay = min(base_delay * (exponential_base**attempt), max_delay)

    if jitter:
        # Add 0-50% random jitter
        delay = delay * (1 + random.random() * 0.5)

    return delay


def with_retry(
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    retryable_exceptions: tuple = None,
):
    """Decorator for exponential backoff retry logic.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay between retries
        max_delay: Maximum delay cap
        retryable_exceptions: Tuple of exception types to retry on
    """
    if retryable_exceptions is None:
        retryable_exceptions = (
            ConnectionError,
            TimeoutError,
            RetryableError,
        )

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)

                except retryable_exceptions as e:
                    if attempt >= max_retries:
                        logger.error(f"All {max_retries} retries exhausted: {e}")
                        raise

                    delay = calculate_backoff_delay(
                        attempt,
                        base_delay=base_delay,
                        max_delay=max_delay,
                    )

                    # Rate limits get longer delays
                    if isinstance(e, RetryableError) and e.is_rate_limit:
                        delay = delay * 2

                    logger.warning(f"Retry {attempt + 1}/{max_retries} after {delay:.1f}s: {e}")
                    time.sleep(delay)

        return wrapper

    return decorator


def is_retryable_error(error) -> tuple[bool, bool]:
    """Check if an error is retryable and if it's a rate limit.

    Returns:
        Tuple of (is_retryable, is_rate_limit)
    """
    error_str = str(error).lower()
    error_type = type(error).__name__.lower()

    rate_limit_indicators = [
        "rate_limit",
        "rate limit",
        "too many requests",
        "429",
        "resource_exhausted",
        "throttl",
    ]

    is_rate_limit = any(indicator in error_str for indicator in rate_limit_indicators)

    # Authentication problems never get better by retrying
    if _is_auth_error(error_str):
        return False, False

    retryable_indicators = [
        "timeout",
        "timed out",
        "connection",
        "temporary",
        "unavailable",
        "503",
        "502",
        "500",
        "overloaded",
    ]

    is_retryable = (
        is_rate_limit
        or any(indicator in error_str for indicator in retryable_indicators)
        or any(indicator in error_type for indicator in ["timeout", "connection"])
    )

    return is_retryable, is_rate_limit


def _is_auth_error(error_str):
    return any(
        marker in error_str
        for marker in ("401", "403", "api key not valid", "invalid api key", "permission_denied")
    )


def action_arguments(name, value):
    """Tool-call arguments as a dict. Anything but a JSON object becomes ``{}``."""
    arguments = coerce_arguments(value)
    if arguments is None:
        logger.error(f"Tool call arguments for {name} are not an object: {str(value)[:200]}")
        return {}
    return arguments


def describe_transport_error(error) -> str:
    """Human-readable summary of a provider failure."""
    original = error.original_error if isinstance(error, RetryableError) else error
    error_str = str(original)
    lowered = error_str.lower()

    if "401" in lowered or "api key not valid" in lowered or "invalid api key" in lowered:
        return f"API key is invalid or expired. Check ~/.agentsh/.env ({error_str})"
    if "403" in lowered or "permission_denied" in lowered:
        return f"Access denied. Your API key may not have access to this model ({error_str})"
    return f"{type(original).__name__}: {error_str}"


class BaseAPIClient(ABC):
    """Base class for turn transports."""

    provider = "base"

    def __init__(self, model, system_prompt="", tools=None):
        self.model = model
        self.system_prompt = system_prompt
        self.tools = TOOL_DEFINITIONS if tools is None else tools

    def send(self, conversation, delta) -> ModelTurn:
        """Send ``delta`` on top of ``conversation`` and return the model's reply.

        Raises:
            TransportError: if the call fails or the reply is unusable.
        """
        if not isinstance(delta, (UserMessage, ResultBatch)):
            raise TypeError(f"Cannot send {type(delta).__name__} to the model")

        entries = list(conversation) + [delta]
        request = self._build_request(entries)

        logger.debug(f"{self.provider}: sending {len(entries)} entries to {self.model}")
        try:
            response = self._call_with_retry(request)
        except Exception as error:
            message = describe_transport_error(error)
            logger.error(f"{self.provider} request failed: {message}")
            raise TransportError(message) from error

        turn = self._parse_response(response)
        logger.debug(
            f"{self.provider}: received {len(turn.actions)} action(s), {len(turn.text)} chars of text"
        )
        return turn

    @with_retry(max_retries=DEFAULT_MAX_RETRIES)
    def _call_with_retry(self, request):
        """Internal method with retry decorator."""
        try:
            return self._call(request)
        except Exception as e:
            is_retryable, is_rate_limit = is_retryable_error(e)
            if is_retryable:
                raise RetryableError(e, is_rate_limit=is_rate_limit) from e
            raise

    @abstractmethod
    def _build_request(self, entries):
        """Render conversation entries into provider request kwargs."""

    @abstractmethod
    def _call(self, request):
        """Make one provider call."""

    @abstractmethod
    def _parse_response(self, response) -> ModelTurn:
        """Convert a provider response into a ModelTurn."""


class GeminiClient(BaseAPIClient):
    """Google Gemini API client."""

    provider = "gemini"

    def __init__(
        self,
        api_key,
        model="gemini-3-flash-preview",
        system_prompt="",
        tools=None,
        timeout=DEFAULT_TIMEOUT_SECONDS,
    ):
        try:
            from google import genai
            from google.genai import types
        except ImportError:
            raise ImportError("Install google-genai: pip install google-genai") from None

        super().__init__(model, system_prompt, tools)
        # HttpOptions.timeout is in milliseconds
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )
        self._types = types

    def _convert_tools(self):
        declarations = [
            self._types.FunctionDeclaration(
                name=tool["name"],
                description=tool["description"],
                parameters_json_schema=tool["input_schema"],
            )
            for tool in self.tools
        ]
        return [self._types.Tool(function_declarations=declarations)]

    def _to_content(self, entry):
        types = self._types

        if isinstance(entry, UserMessage):
            return types.Content(role="user", parts=[types.Part(text=entry.text)])

        if isinstance(entry, ResultBatch):
            parts = [
                types.Part(
                    function_response=types.FunctionResponse(
                        id=result.call_id,
                        name=result.name,
                        response=result.to_response(),
                    )
                )
                for result in entry.results
            ]
            return types.Content(role="user", parts=parts)

        # ModelTurn: replay the original content so thought signatures survive
        if entry.raw is not None:
            return entry.raw

        parts = []
        if entry.text:
            parts.append(types.Part(text=entry.text))
        for action in entry.actions:
            parts.append(
                types.Part(
                    function_call=types.FunctionCall(
                        id=action.call_id,
                        name=action.name,
                        args=dict(action.arguments),
                    )
                )
            )
        return types.Content(role="model", parts=parts)

    def _build_request(self, entries):
        return {
            "model": self.model,
            "contents": [self._to_content(entry) for entry in entries],
            "config": self._types.GenerateContentConfig(
                system_instruction=self.system_prompt or None,
                tools=self._convert_tools(),
            ),
        }

    def _call(self, request):
        return self.client.models.generate_content(**request)

    def _parse_response(self, response):
        candidates = getattr(response, "candidates", None)
        if not candidates:
            feedback = getattr(response, "prompt_feedback", None)
            reason = getattr(feedback, "block_reason", None) if feedback else None
            detail = f" (blocked: {reason})" if reason else ""
            raise TransportError(f"Gemini returned no candidates{detail}")

        content = candidates[0].content
        if content is None or not content.parts:
            return ModelTurn(text="", raw=None)

        texts = []
        actions = []
        for part in content.parts:
            function_call = getattr(part, "function_call", None)
            if function_call:
                actions.append(
                    ActionRequest(
                        name=function_call.name,
                        arguments=action_arguments(function_call.name, function_call.args),
                        call_id=getattr(function_call, "id", None),
                    )
                )
            elif getattr(part, "text", None) and not getattr(part, "thought", False):
                texts.append(part.text)

        return ModelTurn(text="".join(texts), actions=tuple(actions), raw=content)


class ClaudeClient(BaseAPIClient):
    """Anthropic Claude API client."""

    provider = "claude"

    def __init__(
        self,
        api_key,
        model="claude-sonnet-4-5",
        system_prompt="",
        tools=None,
        timeout=DEFAULT_TIMEOUT_SECONDS,
    ):
        try:
            import anthropic
            from anthropic import Timeout
        except ImportError:
            raise ImportError("Install anthropic: pip install anthropic") from None

        super().__init__(model, system_prompt, tools)
        self.client = anthropic.Anthropic(
            api_key=api_key,
            timeout=Timeout(timeout, connect=DEFAULT_CONNECT_TIMEOUT),
        )

    def _format_entry(self, entry):
        if isinstance(entry, UserMessage):
            return {"role": "user", "content": entry.text}

        if isinstance(entry, ResultBatch):
            return {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": result.call_id,
                        "content": result.text,
                        "is_error": not result.success,
                    }
                    for result in entry.results
                ],
            }

        blocks = []
        if entry.text:
            blocks.append({"type": "text", "text": entry.text})
        for action in entry.actions:
            blocks.append(
                {
                    "type": "tool_use",
                    "id": action.call_id,
                    "name": action.name,
                    "input": dict(action.arguments),
                }
            )
        return {"role": "assistant", "content": blocks}

    def _build_request(self, entries):
        kwargs = {
            "model": self.model,
            "max_tokens": DEFAULT_MAX_TOKENS,
            "messages": [self._format_entry(entry) for entry in entries],
            "tools": self.tools,
        }
        if self.system_prompt:
            kwargs["system"] = self.system_prompt
        return kwargs

    def _call(self, request):
        return self.client.messages.create(**request)

    def _parse_response(self, response):
        blocks = getattr(response, "content", None)
        if blocks is None:
            raise TransportError("Claude response has no content")

        texts = []
        actions = []
        for block in blocks:
            if block.type == "text":
                texts.append(block.text)
            elif block.type == "tool_use":
                actions.append(
                    ActionRequest(
                        name=block.name,
                        arguments=action_arguments(block.name, block.input),
                        call_id=block.id,
                    )
                )

        return ModelTurn(text="\n".join(texts), actions=tuple(actions))


class OpenAIClient(BaseAPIClient):
    """OpenAI API client."""

    provider = "openai"

    def __init__(
        self,
        api_key,
        model="gpt-5.2",
        system_prompt="",
        tools=None,
        timeout=DEFAULT_TIMEOUT_SECONDS,
    ):
        try:
            import openai
        except ImportError:
            raise ImportError("Install openai: pip install openai") from None

        super().__init__(model, system_prompt, tools)
        self.client = openai.OpenAI(api_key=api_key, timeout=timeout)

    def _format_entry(self, entry):
        """Format an entry for OpenAI. Result batches become several messages."""
        if isinstance(entry, UserMessage):
            return [{"role": "user", "content": entry.text}]

        if isinstance(entry, ResultBatch):
            return [
                {
                    "role": "tool",
                    "tool_call_id": result.call_id,
                    "content": json.dumps(result.to_response()),
                }
                for result in entry.results
            ]

        message = {"role": "assistant", "content": entry.text or None}
        if entry.actions:
            message["tool_calls"] = [
                {
                    "id": action.call_id,
                    "type": "function",
                    "function": {
                        "name": action.name,
                        "arguments": json.dumps(action.arguments),
                    },
                }
                for action in entry.actions
            ]
        return [message]

    def _convert_tools(self):
        return [
            {
                "type": "function",
                "function": {
                    "name": tool["name"],
                    "description": tool["description"],
                    "parameters": tool["input_schema"],
                },
            }
            for tool in self.tools
        ]

    def _build_request(self, entries):
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        for entry in entries:
            messages.extend(self._format_entry(entry))

        return {
            "model": self.model,
            "messages": messages,
            "tools": self._convert_tools(),
        }

    def _call(self, request):
        return self.client.chat.completions.create(**request)

    def _parse_response(self, response):
        choices = getattr(response, "choices", None)
        if not choices:
            raise TransportError("OpenAI response has no choices")

        message = choices[0].message
        actions = []
        for tool_call in message.tool_calls or []:
            try:
                arguments = json.loads(tool_call.function.arguments or "{}")
            except json.JSONDecodeError as e:
                raw_preview = (tool_call.function.arguments or "")[:200]
                logger.error(
                    f"Tool call JSON parse failed for {tool_call.function.name}: {e}. Raw: {raw_preview}"
                )
                arguments = {}
            arguments = action_arguments(tool_call.function.name, arguments)
            actions.append(
                ActionRequest(name=tool_call.function.name, arguments=arguments, call_id=tool_call.id)
            )

        return ModelTurn(text=message.content or "", actions=tuple(actions))


CLIENTS = {
    "gemini": GeminiClient,
    "claude": ClaudeClient,
    "openai": OpenAIClient,
}


def create_client(provider, api_key, model=None, system_prompt="", timeout=DEFAULT_TIMEOUT_SECONDS):
    """Create a turn transport for the specified provider."""
    if provider not in CLIENTS:
        raise ValueError(f"Unknown provider: {provider}")

    client_class = CLIENTS[provider]

    if model:
        return client_class(api_key, model, system_prompt=system_prompt, timeout=timeout)
    return client_class(api_key, system_prompt=system_prompt, timeout=timeout)
