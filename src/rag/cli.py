"""CLI interface for the retrieval layer.

Provides command-line access to pipeline operations:
- demo: Index bundled sample texts and run a query
- ingest: Chunk and embed files into a snapshot file
- query: Search a snapshot file
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from src.rag.config import MockConfig, RAGConfig
from src.rag.document import SearchOptions, SearchResult
from src.rag.pipeline import RetrievalPipeline
from src.retrieval.memory_store import InMemoryStore

logger = logging.getLogger(__name__)


SAMPLE_TEXTS: dict[str, str] = {
    "semantic-search.md": (
        "Semantic search ranks documents by meaning rather than by shared keywords. "
        "Each document and each query is mapped to an embedding vector. "
        "Documents whose vectors point in a similar direction to the query vector "
        "are considered relevant. Cosine similarity is the usual measure of that "
        "direction, and it ignores vector length."
    ),
    "chunking.md": (
        "Long documents are split into chunks before they are embedded. "
        "A chunk should be small enough to describe one idea, yet large enough to "
        "keep its context. Splitting on sentence boundaries avoids cutting a thought "
        "in half. Overlap between neighbouring chunks carries context across the cut."
    ),
    "vector-indexes.md": (
        "Exact nearest-neighbour search compares the query with every stored vector. "
        "That is simple and always correct, but it slows down as the collection grows. "
        "Approximate indexes such as HNSW and IVF trade a little recall for much faster "
        "queries. PostgreSQL gains these indexes through the pgvector extension."
    ),
    "metadata-filters.md": (
        "Metadata filters narrow a search to documents with matching attributes. "
        "A filter on source or language removes candidates before they are ranked. "
        "Filtering keeps results relevant when one collection holds many kinds of text."
    ),
}


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Semantic retrieval - chunk, embed, store and search text"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run a complete demo")
    demo_parser.add_argument(
        "--query",
        default="How does an approximate index speed up search?",
        help="Query to demo",
    )

    # Ingest command
    ingest_parser = subparsers.add_parser("ingest", help="Ingest files into a snapshot")
    ingest_parser.add_argument("files", nargs="+", help="Files to ingest")
    ingest_parser.add_argument("--snapshot", required=True, help="Snapshot file to update")

    # Query command
    query_parser = subparsers.add_parser("query", help="Search a snapshot")
    query_parser.add_argument("question", help="Query text")
    query_parser.add_argument("--snapshot", required=True, help="Snapshot file to search")
    query_parser.add_argument("--top-k", type=int, default=5, help="Number of results")
    query_parser.add_argument(
        "--metric", default=None, help="cosine or euclidean (default: RAG_METRIC)"
    )
    query_parser.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Metadata filter, repeatable",
    )

    args = parser.parse_args(argv)
    config = RAGConfig()
    _configure_logging("DEBUG" if args.verbose else config.log_level)

    if args.command == "demo":
        asyncio.run(run_demo(args.query))
    elif args.command == "ingest":
        asyncio.run(run_ingest(args.files, Path(args.snapshot), config))
    elif args.command == "query":
        options = SearchOptions(filter=parse_filters(args.filter) or None, metric=args.metric)
        asyncio.run(run_query(args.question, Path(args.snapshot), args.top_k, options, config))
    else:
        parser.print_help()
        sys.exit(1)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def parse_filters(pairs: list[str]) -> dict[str, Any]:
    """Parse ``KEY=VALUE`` pairs; values are read as JSON when possible."""
    filters: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise SystemExit(f"Invalid filter {pair!r}, expected KEY=VALUE")
        try:
            filters[key] = json.loads(raw)
        except json.JSONDecodeError:
            filters[key] = raw
    return filters


def _memory_pipeline(config: RAGConfig) -> RetrievalPipeline:
    return RetrievalPipeline(config, store=InMemoryStore())


def _result_to_dict(result: SearchResult) -> dict[str, Any]:
    return {
        "id": result.document.id,
        "score": result.score,
        "content": result.document.content,
        "metadata": result.document.metadata,
    }


async def run_demo(query: str, config: Optional[RAGConfig] = None) -> None:
    """Run a complete demo with sample data."""
    config = config or MockConfig.with_overrides(chunk_size=200, chunk_overlap=40)
    pipeline = _memory_pipeline(config)

    print("=" * 60)
    print("Semantic Retrieval - Demo Mode")
    print("=" * 60)
    print()

    print(f"[1/3] Ingesting {len(SAMPLE_TEXTS)} sample texts...")
    total = 0
    for source, text in SAMPLE_TEXTS.items():
        stored = await pipeline.ingest(text, base_id=source, metadata={"source": source})
        total += len(stored)
    print(f"      Indexed {total} chunks")
    print()

    print(f'[2/3] Querying: "{query}"')
    print()
    results = await pipeline.query(query, top_k=3)

    print("[3/3] Results:")
    print("-" * 60)
    for i, result in enumerate(results, 1):
        print(f"  [{i}] {result.document.id} (score: {result.score:.3f})")
        print(f"      {result.document.content[:100]}...")
        print()
    print("=" * 60)

    print("JSON output:")
    print(json.dumps({"query": query, "results": [_result_to_dict(r) for r in results]}, indent=2))


async def run_ingest(files: list[str], snapshot: Path, config: RAGConfig) -> None:
    """Ingest files into a snapshot file, creating it if missing."""
    pipeline = _memory_pipeline(config)
    if snapshot.exists():
        await pipeline.store.deserialize(snapshot.read_text())

    total = 0
    ingested = 0
    for file_path in files:
        path = Path(file_path)
        if not path.exists():
            print(f"WARNING: File not found: {file_path}")
            continue
        stored = await pipeline.ingest(
            path.read_text(), base_id=path.name, metadata={"source": str(path)}
        )
        total += len(stored)
        ingested += 1

    if not ingested:
        print("No valid files to ingest")
        sys.exit(1)

    snapshot.write_text(await pipeline.store.serialize())
    logger.info("Wrote snapshot %s", snapshot)
    print(f"Indexed {total} chunks from {ingested} files into {snapshot}")


async def run_query(
    question: str,
    snapshot: Path,
    top_k: int,
    options: SearchOptions,
    config: RAGConfig,
) -> None:
    """Search a snapshot file and print the results as JSON."""
    if not snapshot.exists():
        print(f"ERROR: Snapshot not found: {snapshot}")
        sys.exit(1)

    pipeline = _memory_pipeline(config)
    await pipeline.store.deserialize(snapshot.read_text())
    results = await pipeline.query(question, top_k=top_k, options=options)

    print(json.dumps({
        "query": question,
        "result_count": len(results),
        "results": [_result_to_dict(r) for r in results],
    }, indent=2))


if __name__ == "__main__":
    main()
