"""
Knowledge stores for protocol documents.

This module handles:
- The topic → vector store table (vectorstores.json)
- Listing and creating OpenAI vector stores

Usage:
    from doseguide.vectorstore import TopicRegistry

    registry = TopicRegistry.from_file("vectorstores.json")
    store_id = registry.resolve("vancomycin")
"""

from doseguide.vectorstore.client import KnowledgeStoreClient
from doseguide.vectorstore.registry import (
    TopicRegistry,
    normalize_topic_key,
    parse_store_map,
)

__all__ = [
    "KnowledgeStoreClient",
    "TopicRegistry",
    "normalize_topic_key",
    "parse_store_map",
]
