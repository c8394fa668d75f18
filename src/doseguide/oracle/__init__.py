"""
Oracle adapters: text generation with structured output.

This module handles:
- The Oracle interface shared by both pipeline stages
- OpenAI Responses API calls, with file search over a vector store
- Anthropic Messages API calls (composition only, no retrieval)
- Mapping SDK failures onto the oracle error taxonomy

Usage:
    from doseguide.oracle import OpenAIOracle

    oracle = OpenAIOracle(api_key="sk-...", model="gpt-4.1-mini")
    data = oracle.invoke(system, user, schema, retrieval_scope="vs_123")
"""

from doseguide.oracle.base import Oracle, OutputSchema
from doseguide.oracle.openai_oracle import OpenAIOracle
from doseguide.oracle.anthropic_oracle import AnthropicOracle

__all__ = [
    "Oracle",
    "OutputSchema",
    "OpenAIOracle",
    "AnthropicOracle",
]
