"""Basic retrieval pipeline example.

Demonstrates the core ingest-and-query workflow using mock mode and the
in-memory store, then saves and restores a snapshot.
No API keys or database required.

Usage:
    python examples/basic_pipeline.py
"""

import asyncio

from src.rag.config import RAGConfig, RunMode
from src.rag.document import SearchOptions
from src.rag.pipeline import RetrievalPipeline
from src.retrieval.memory_store import InMemoryStore


async def main() -> None:
    # 1. Configure pipeline in mock mode (no API keys needed)
    config = RAGConfig(
        mode=RunMode.MOCK,
        chunk_size=128,
        chunk_overlap=24,
        top_k=3,
    )
    pipeline = RetrievalPipeline(config, store=InMemoryStore())

    # 2. Ingest sample texts
    texts = {
        "fastapi-docs.md": (
            "FastAPI is a modern Python web framework for building APIs. "
            "It provides automatic OpenAPI documentation and type validation "
            "with Pydantic. FastAPI is built on Starlette and supports async/await."
        ),
        "docker-guide.md": (
            "Docker containers package applications with their dependencies "
            "for consistent deployment across environments. A Dockerfile "
            "defines the build steps. Containers are lightweight compared to "
            "virtual machines."
        ),
    }
    total = 0
    for source, text in texts.items():
        stored = await pipeline.ingest(text, base_id=source, metadata={"source": source})
        total += len(stored)
    print(f"Ingested {total} chunks from {len(texts)} texts")

    # 3. Query, with and without a metadata filter
    for query in ["What is FastAPI?", "How do Docker containers work?"]:
        print(f"\nQ: {query}")
        for result in await pipeline.query(query):
            print(f"   {result.score:.3f}  {result.document.id}")

    only_docker = SearchOptions(filter={"source": "docker-guide.md"})
    results = await pipeline.query("Python web framework", options=only_docker)
    print(f"\nFiltered to docker-guide.md: {[r.document.id for r in results]}")

    # 4. Snapshot the store and restore it elsewhere
    snapshot = await pipeline.store.serialize()
    restored = InMemoryStore()
    await restored.deserialize(snapshot)
    print(f"\nRestored {restored.count} chunks from a {len(snapshot)}-byte snapshot")


if __name__ == "__main__":
    asyncio.run(main())
