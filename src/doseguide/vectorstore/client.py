"""
OpenAI vector store operations for protocol documents.

This module provides:
- Listing the files attached to a topic's knowledge store
- Creating a knowledge store from protocol documents (upload + index)

Usage:
    from doseguide.vectorstore.client import KnowledgeStoreClient

    store = KnowledgeStoreClient(api_key=key)
    for f in store.list_files("vs_abc"):
        print(f["id"], f["status"])

    store_id = store.create_store("vancomycin", [Path("vanco.pdf")])
"""

from contextlib import ExitStack
from pathlib import Path

from openai import APIError, OpenAI

from doseguide.errors import KnowledgeStoreError
from doseguide.logging import get_logger

logger = get_logger(__name__, component="vectorstore")

FILE_LIST_LIMIT = 100


class KnowledgeStoreClient:
    """
    Thin wrapper over the OpenAI vector stores API.

    Only used by operators (CLI); the answering pipeline reaches the stores
    through the oracle's file_search tool.
    """

    def __init__(self, api_key: str | None = None, client: OpenAI | None = None):
        self.client = client or OpenAI(api_key=api_key)

    def list_files(self, store_id: str, with_names: bool = False) -> list[dict]:
        """
        List files attached to a vector store.

        Args:
            store_id: Vector store id
            with_names: Also look up each file's filename (one extra call per file)

        Returns:
            List of dicts with id, status and filename (None unless with_names)
        """
        try:
            page = self.client.vector_stores.files.list(
                vector_store_id=store_id,
                limit=FILE_LIST_LIMIT,
            )
            files = []
            for item in page:
                filename = None
                if with_names:
                    filename = self.client.files.retrieve(item.id).filename
                files.append({
                    "id": item.id,
                    "status": getattr(item, "status", None),
                    "filename": filename,
                })
        except APIError as e:
            logger.warning("list_files_failed", store_id=store_id, error=str(e))
            raise KnowledgeStoreError(f"could not list files of {store_id}: {e}") from e

        logger.debug("listed_files", store_id=store_id, count=len(files))
        return files

    def create_store(self, name: str, paths: list[Path]) -> str:
        """
        Create a vector store and index protocol documents into it.

        Blocks until indexing finishes.

        Args:
            name: Display name of the new store
            paths: Documents to upload (PDF, DOCX, TXT, ...)

        Returns:
            The new vector store id
        """
        missing = [str(p) for p in paths if not Path(p).is_file()]
        if missing:
            raise KnowledgeStoreError(f"files not found: {', '.join(missing)}")

        try:
            store = self.client.vector_stores.create(name=name)
            logger.info("vector_store_created", store_id=store.id, name=name)

            with ExitStack() as stack:
                streams = [stack.enter_context(open(p, "rb")) for p in paths]
                batch = self.client.vector_stores.file_batches.upload_and_poll(
                    vector_store_id=store.id,
                    files=streams,
                )
        except APIError as e:
            logger.warning("create_store_failed", name=name, error=str(e))
            raise KnowledgeStoreError(f"could not create store {name!r}: {e}") from e

        counts = batch.file_counts
        logger.info(
            "vector_store_indexed",
            store_id=store.id,
            completed=counts.completed,
            failed=counts.failed,
        )

        if counts.completed == 0:
            raise KnowledgeStoreError(f"no file was indexed into {store.id} (failed={counts.failed})")

        return store.id
