"""
OpenAI Responses API oracle.

Structured output uses a strict json_schema text format. When a retrieval
scope is given, the call carries a file_search tool bound to that single
vector store, so the model can only read the protocol for the topic.

SDK retries are disabled: each pipeline stage makes exactly one attempt and
a failure is handled by the orchestrator.
"""

from typing import Any

import httpx
from openai import APIError, APITimeoutError, OpenAI

from doseguide.errors import MalformedOutput, OracleTimeout, OracleTransportError
from doseguide.logging import get_logger
from doseguide.oracle.base import Oracle, OutputSchema, load_json_object

logger = get_logger(__name__, component="openai_oracle")


class OpenAIOracle(Oracle):
    """
    Oracle backed by the OpenAI Responses API.

    Example:
        oracle = OpenAIOracle(api_key=key, model="gpt-4.1-mini", timeout=30)
        data = oracle.invoke(system, user, EVIDENCE_SET_SCHEMA, retrieval_scope="vs_abc")
    """

    def __init__(
            self,
            api_key: str | None = None,
            model: str = "gpt-4.1-mini",
            timeout: float = 45.0,
            temperature: float = 0.0,
            max_output_tokens: int = 1200,
            client: OpenAI | None = None,
    ):
        """
        Initialize the oracle.

        Args:
            api_key: OpenAI API key (ignored when client is given)
            model: Responses API model
            timeout: Seconds before a call is abandoned as OracleTimeout
            temperature: Sampling temperature
            max_output_tokens: Upper bound on generated tokens per call
            client: Pre-built client, mainly for tests
        """
        self.client = client or OpenAI(
            api_key=api_key,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            max_retries=0,
        )
        self._model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

        logger.info("openai_oracle_initialized", model=model, timeout=timeout)

    @property
    def model(self) -> str:
        return self._model

    def build_request(
            self,
            system_prompt: str,
            user_prompt: str,
            schema: OutputSchema,
            retrieval_scope: str | None = None,
            max_output_tokens: int | None = None,
    ) -> dict[str, Any]:
        """Assemble keyword arguments for responses.create."""
        text_format: dict[str, Any] = {
            "type": "json_schema",
            "name": schema.name,
            "schema": schema.schema,
            "strict": schema.strict,
        }
        if schema.description:
            text_format["description"] = schema.description

        params: dict[str, Any] = {
            "model": self._model,
            "input": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "text": {"format": text_format},
            "temperature": self.temperature,
            "max_output_tokens": max_output_tokens or self.max_output_tokens,
        }

        if retrieval_scope:
            params["tools"] = [
                {"type": "file_search", "vector_store_ids": [retrieval_scope]},
            ]

        return params

    def invoke(
            self,
            system_prompt: str,
            user_prompt: str,
            schema: OutputSchema,
            retrieval_scope: str | None = None,
            max_output_tokens: int | None = None,
    ) -> dict[str, Any]:
        params = self.build_request(
            system_prompt,
            user_prompt,
            schema,
            retrieval_scope=retrieval_scope,
            max_output_tokens=max_output_tokens,
        )

        logger.debug(
            "oracle_call_start",
            model=self._model,
            schema=schema.name,
            retrieval_scope=retrieval_scope,
        )

        try:
            response = self.client.responses.create(**params)
        except APITimeoutError as e:
            logger.warning("oracle_timeout", model=self._model, schema=schema.name)
            raise OracleTimeout(f"{self._model} timed out") from e
        except APIError as e:
            logger.warning("oracle_transport_error", model=self._model, schema=schema.name, error=str(e))
            raise OracleTransportError(f"{self._model} call failed: {e}") from e

        if getattr(response, "status", None) == "incomplete":
            details = getattr(response, "incomplete_details", None)
            raise MalformedOutput(f"incomplete response: {details}")

        data = load_json_object(response.output_text)

        logger.debug("oracle_call_complete", model=self._model, schema=schema.name)
        return data
