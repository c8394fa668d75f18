"""
Anthropic Messages API oracle.

Claude has no hosted file search over our knowledge stores, so this oracle
only serves the composition stage. Structured output is obtained by forcing
a single tool call whose input_schema is the output schema.
"""

from typing import Any

import httpx
from anthropic import Anthropic, APIError, APITimeoutError

from doseguide.errors import MalformedOutput, OracleTimeout, OracleTransportError, RetrievalNotSupported
from doseguide.logging import get_logger
from doseguide.oracle.base import Oracle, OutputSchema

logger = get_logger(__name__, component="anthropic_oracle")


class AnthropicOracle(Oracle):
    """
    Oracle backed by Claude via the Anthropic Messages API.

    Example:
        oracle = AnthropicOracle(api_key=key)
        data = oracle.invoke(system, user, ANSWER_RESULT_SCHEMA)
    """

    def __init__(
            self,
            api_key: str | None = None,
            model: str = "claude-sonnet-4-20250514",
            timeout: float = 45.0,
            temperature: float = 0.0,
            max_output_tokens: int = 1200,
            client: Anthropic | None = None,
    ):
        self.client = client or Anthropic(
            api_key=api_key,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            max_retries=0,
        )
        self._model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

        logger.info("anthropic_oracle_initialized", model=model, timeout=timeout)

    @property
    def model(self) -> str:
        return self._model

    def invoke(
            self,
            system_prompt: str,
            user_prompt: str,
            schema: OutputSchema,
            retrieval_scope: str | None = None,
            max_output_tokens: int | None = None,
    ) -> dict[str, Any]:
        if retrieval_scope:
            raise RetrievalNotSupported(
                f"{self._model} cannot search knowledge store {retrieval_scope}"
            )

        tool = {
            "name": schema.name,
            "description": schema.description or f"Return the {schema.name} object.",
            "input_schema": schema.schema,
        }

        try:
            response = self.client.messages.create(
                model=self._model,
                max_tokens=max_output_tokens or self.max_output_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                tools=[tool],
                tool_choice={"type": "tool", "name": schema.name},
            )
        except APITimeoutError as e:
            logger.warning("oracle_timeout", model=self._model, schema=schema.name)
            raise OracleTimeout(f"{self._model} timed out") from e
        except APIError as e:
            logger.warning("oracle_transport_error", model=self._model, schema=schema.name, error=str(e))
            raise OracleTransportError(f"{self._model} call failed: {e}") from e

        for block in response.content:
            if getattr(block, "type", None) == "tool_use" and block.name == schema.name:
                if isinstance(block.input, dict):
                    return block.input
                raise MalformedOutput(f"tool input is {type(block.input).__name__}, not an object")

        raise MalformedOutput(f"no {schema.name} tool call in response (stop_reason={response.stop_reason})")
