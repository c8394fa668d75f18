"""Tests for the OpenAI and Anthropic oracle adapters, using stub SDK clients."""

import json
from types import SimpleNamespace

import anthropic
import httpx
import openai
import pytest

from doseguide.errors import MalformedOutput, OracleTimeout, OracleTransportError, RetrievalNotSupported
from doseguide.oracle import AnthropicOracle, OpenAIOracle
from doseguide.oracle.base import load_json_object
from doseguide.schemas import ANSWER_RESULT_SCHEMA, EVIDENCE_SET_SCHEMA


def _request(url: str) -> httpx.Request:
    return httpx.Request("POST", url)


class StubResponses:
    """Stands in for client.responses; replays one outcome and records kwargs."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def openai_oracle(outcome) -> tuple[OpenAIOracle, StubResponses]:
    responses = StubResponses(outcome)
    client = SimpleNamespace(responses=responses)
    return OpenAIOracle(model="gpt-test", client=client), responses


def openai_response(text: str, status: str = "completed"):
    return SimpleNamespace(output_text=text, status=status, incomplete_details=None)


# -----------------
# OpenAI
# -----------------


def test_request_binds_single_vector_store():
    oracle, _ = openai_oracle(None)

    params = oracle.build_request("sys", "user", EVIDENCE_SET_SCHEMA, retrieval_scope="vs_vanco")

    assert params["tools"] == [{"type": "file_search", "vector_store_ids": ["vs_vanco"]}]
    text_format = params["text"]["format"]
    assert text_format["type"] == "json_schema"
    assert text_format["name"] == "evidence_set"
    assert text_format["strict"] is True
    assert params["input"][0] == {"role": "system", "content": "sys"}


def test_request_without_scope_has_no_tools():
    oracle, _ = openai_oracle(None)

    params = oracle.build_request("sys", "user", ANSWER_RESULT_SCHEMA, max_output_tokens=321)

    assert "tools" not in params
    assert params["max_output_tokens"] == 321


def test_invoke_returns_decoded_object(evidence_payload):
    oracle, responses = openai_oracle(openai_response(json.dumps(evidence_payload)))

    data = oracle.invoke("sys", "user", EVIDENCE_SET_SCHEMA, retrieval_scope="vs_vanco")

    assert data == evidence_payload
    assert responses.kwargs["model"] == "gpt-test"


def test_openai_timeout_maps_to_oracle_timeout():
    error = openai.APITimeoutError(request=_request("https://api.openai.com/v1/responses"))
    oracle, _ = openai_oracle(error)

    with pytest.raises(OracleTimeout):
        oracle.invoke("sys", "user", EVIDENCE_SET_SCHEMA)


def test_openai_connection_error_maps_to_transport_error():
    error = openai.APIConnectionError(request=_request("https://api.openai.com/v1/responses"))
    oracle, _ = openai_oracle(error)

    with pytest.raises(OracleTransportError):
        oracle.invoke("sys", "user", EVIDENCE_SET_SCHEMA)


def test_incomplete_response_is_malformed():
    oracle, _ = openai_oracle(openai_response('{"verdict": "FO', status="incomplete"))

    with pytest.raises(MalformedOutput):
        oracle.invoke("sys", "user", EVIDENCE_SET_SCHEMA)


def test_non_json_output_is_malformed():
    oracle, _ = openai_oracle(openai_response("The loading dose is 25 mg/kg."))

    with pytest.raises(MalformedOutput):
        oracle.invoke("sys", "user", EVIDENCE_SET_SCHEMA)


# -----------------
# Anthropic
# -----------------


class StubMessages:
    def __init__(self, outcome):
        self.outcome = outcome
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def anthropic_oracle(outcome) -> tuple[AnthropicOracle, StubMessages]:
    messages = StubMessages(outcome)
    client = SimpleNamespace(messages=messages)
    return AnthropicOracle(model="claude-test", client=client), messages


def tool_message(*blocks, stop_reason="tool_use"):
    return SimpleNamespace(content=list(blocks), stop_reason=stop_reason)


def test_anthropic_returns_forced_tool_input(answer_payload):
    block = SimpleNamespace(type="tool_use", name="answer_result", input=answer_payload)
    oracle, messages = anthropic_oracle(tool_message(SimpleNamespace(type="text", text="ok"), block))

    data = oracle.invoke("sys", "user", ANSWER_RESULT_SCHEMA, max_output_tokens=700)

    assert data == answer_payload
    assert messages.kwargs["tool_choice"] == {"type": "tool", "name": "answer_result"}
    assert messages.kwargs["tools"][0]["input_schema"] == ANSWER_RESULT_SCHEMA.schema
    assert messages.kwargs["max_tokens"] == 700
    assert messages.kwargs["system"] == "sys"


def test_anthropic_rejects_retrieval_scope():
    oracle, messages = anthropic_oracle(None)

    with pytest.raises(RetrievalNotSupported):
        oracle.invoke("sys", "user", EVIDENCE_SET_SCHEMA, retrieval_scope="vs_vanco")
    assert messages.kwargs is None


def test_anthropic_without_tool_call_is_malformed():
    text = SimpleNamespace(type="text", text="I cannot help with that.")
    oracle, _ = anthropic_oracle(tool_message(text, stop_reason="end_turn"))

    with pytest.raises(MalformedOutput):
        oracle.invoke("sys", "user", ANSWER_RESULT_SCHEMA)


def test_anthropic_timeout_maps_to_oracle_timeout():
    error = anthropic.APITimeoutError(request=_request("https://api.anthropic.com/v1/messages"))
    oracle, _ = anthropic_oracle(error)

    with pytest.raises(OracleTimeout):
        oracle.invoke("sys", "user", ANSWER_RESULT_SCHEMA)


def test_anthropic_connection_error_maps_to_transport_error():
    error = anthropic.APIConnectionError(request=_request("https://api.anthropic.com/v1/messages"))
    oracle, _ = anthropic_oracle(error)

    with pytest.raises(OracleTransportError):
        oracle.invoke("sys", "user", ANSWER_RESULT_SCHEMA)


# -----------------
# JSON decoding
# -----------------


def test_load_json_object_accepts_fenced_block():
    assert load_json_object('```json\n{"verdict": "NOT_FOUND"}\n```') == {"verdict": "NOT_FOUND"}
    assert load_json_object('  {"a": 1}  ') == {"a": 1}


@pytest.mark.parametrize("text", [None, "", "   ", "[1, 2]", "not json", '"string"'])
def test_load_json_object_rejects(text):
    with pytest.raises(MalformedOutput):
        load_json_object(text)
