# agentsh - Approval-Gated LLM Shell Agent
# Copyright (c) 2024-2026 Matthew Bright
# Licensed under the MIT License. See LICENSE file for details.

"""Main agent loop for agentsh."""

import logging

from .actions import ActionResult
from .conversation import Conversation, ResultBatch, UserMessage
from .errors import LoopExhausted, UnknownActionError
from .output import print_action_outcome, print_model_note
from .safety import ApprovalDecision, refusal_result
from .tools import execute_action
from .tools.constants import DEFAULT_SHELL_TIMEOUT, MAX_OUTPUT_SIZE

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 50


class AgentLoop:
    """Drives one task from the first prompt to the model's final answer.

    Every action the model asks for goes through ``gate`` before it runs.
    All results for a turn go back to the model together, in the order the
    actions were requested.
    """

    def __init__(
        self,
        client,
        gate,
        *,
        working_dir=None,
        max_iterations=DEFAULT_MAX_ITERATIONS,
        shell_timeout=DEFAULT_SHELL_TIMEOUT,
        output_limit=MAX_OUTPUT_SIZE,
        executor=execute_action,
    ):
        self.client = client
        self.gate = gate
        self.working_dir = working_dir
        self.max_iterations = max_iterations
        self.shell_timeout = shell_timeout
        self.output_limit = output_limit
        self.executor = executor
        self.conversation = Conversation()

    def run_conversation(self, initial_user_message) -> str:
        """Run the loop until the model stops asking for actions.

        Returns:
            The text of the first model turn with no action requests.

        Raises:
            TransportError: if a model call fails.
            LoopExhausted: if the model is still asking for actions after
                ``max_iterations`` batches.
        """
        self.conversation = Conversation()
        logger.info(f"Starting run: {initial_user_message[:100]!r}")

        turn = self._send(UserMessage(initial_user_message))
        batches = 0

        while turn.is_pending:
            if batches >= self.max_iterations:
                logger.error(f"Iteration limit reached after {batches} batches")
                raise LoopExhausted(batches, turn.text)

            print_model_note(turn.text)
            batch = self._process_actions(turn.actions)
            batches += 1
            logger.debug(f"Batch {batches}: sending {len(batch)} result(s)")
            turn = self._send(batch)

        logger.info(f"Run finished after {batches} batch(es)")
        return turn.text

    def _send(self, delta):
        """Send one delta and record it with the reply.

        Nothing is recorded when the transport raises.
        """
        turn = self.client.send(self.conversation, delta)
        self.conversation.append(delta)
        self.conversation.append(turn)
        return turn

    def _process_actions(self, actions) -> ResultBatch:
        results = [self._resolve_action(request) for request in actions]
        return ResultBatch(tuple(results))

    def _resolve_action(self, request) -> ActionResult:
        """Gate and run a single request. Always returns exactly one result."""
        try:
            kind = request.kind
        except UnknownActionError as e:
            logger.warning(f"Model requested unknown action: {request.name}")
            result = ActionResult.fail(request, str(e))
            print_action_outcome(result)
            return result

        decision = self.gate.ask(request)
        if decision is not ApprovalDecision.APPROVE:
            logger.info(f"{kind.value} not run ({decision.value})")
            result = refusal_result(request, decision)
            print_action_outcome(result)
            return result

        logger.debug(f"Running approved {kind.value}")

        try:
            result = self.executor(
                request,
                working_dir=self.working_dir,
                shell_timeout=self.shell_timeout,
                output_limit=self.output_limit,
            )
        except UnknownActionError as e:
            result = ActionResult.fail(request, str(e))

        print_action_outcome(result)
        return result
