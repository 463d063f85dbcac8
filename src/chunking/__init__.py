"""Text chunking for embedding ingestion."""

from src.chunking.text_splitter import ChunkingStrategy, TextSplitter

__all__ = ["ChunkingStrategy", "TextSplitter"]
