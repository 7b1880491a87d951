"""Unit tests for ContextAssembler."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock

from errors import StorageError
from models.chunk import SearchResult, StoredChunk
from services.context_assembler import BLOCK_SEPARATOR, ContextAssembler

URL = "https://github.com/amasad/jfk_files/blob/main/104-10004-10143.md"


def make_result(chunk_index, similarity=0.82, document_id=7, content=None):
    chunk = StoredChunk(
        document_id=document_id,
        chunk_index=chunk_index,
        content=content or f"chunk {chunk_index}",
        title="104-10004-10143.md",
        url=URL,
        similarity=similarity,
    )
    return SearchResult(chunk=chunk, similarity=similarity, position_weight=1.0, length_weight=1.0, rank=similarity)


def window_from(document_chunks):
    """Build a get_chunk_window side effect over an in-memory document."""
    def get_chunk_window(document_id, center_index, radius=1):
        return [
            StoredChunk(document_id=document_id, chunk_index=i, content=content)
            for i, content in enumerate(document_chunks)
            if center_index - radius <= i <= center_index + radius
        ]
    return get_chunk_window


class TestContextAssembler:
    """Test suite for ContextAssembler."""

    @pytest.fixture
    def mock_vector_store(self):
        store = Mock()
        store.get_chunk_window.side_effect = window_from(["c0", "c1", "c2", "c3", "c4"])
        return store

    @pytest.fixture
    def assembler(self, mock_vector_store):
        return ContextAssembler(mock_vector_store)

    def test_middle_chunk_includes_both_neighbours(self, assembler, mock_vector_store):
        [block] = assembler.assemble([make_result(2)])

        assert "c1\n\nc2\n\nc3" in block
        assert "c0" not in block and "c4" not in block
        mock_vector_store.get_chunk_window.assert_called_once_with(7, 2, radius=1)

    def test_first_chunk_has_no_previous_neighbour(self, assembler):
        [block] = assembler.assemble([make_result(0)])
        assert "c0\n\nc1\n\nSource:" in block
        assert "c2" not in block

    def test_last_chunk_has_no_next_neighbour(self, assembler):
        [block] = assembler.assemble([make_result(4)])
        assert "c3\n\nc4\n\nSource:" in block

    def test_block_format(self, assembler):
        [block] = assembler.assemble([make_result(2, similarity=0.8234)])
        assert block == (
            "From 104-10004-10143.md (Similarity: 0.82):\n\n"
            "c1\n\nc2\n\nc3\n\n"
            f"Source: {URL}"
        )

    def test_overlapping_windows_are_not_deduplicated(self, assembler):
        blocks = assembler.assemble([make_result(1), make_result(2)])

        assert len(blocks) == 2
        assert "c0\n\nc1\n\nc2" in blocks[0]
        assert "c1\n\nc2\n\nc3" in blocks[1]

    def test_blocks_follow_result_order(self, assembler):
        blocks = assembler.assemble([make_result(4, similarity=0.9), make_result(0, similarity=0.7)])
        assert "(Similarity: 0.90)" in blocks[0]
        assert "(Similarity: 0.70)" in blocks[1]

    def test_empty_window_falls_back_to_match(self, mock_vector_store):
        mock_vector_store.get_chunk_window.side_effect = None
        mock_vector_store.get_chunk_window.return_value = []
        assembler = ContextAssembler(mock_vector_store)

        [block] = assembler.assemble([make_result(3, content="lonely chunk")])
        assert "lonely chunk" in block

    def test_no_results(self, assembler, mock_vector_store):
        assert assembler.assemble([]) == []
        mock_vector_store.get_chunk_window.assert_not_called()

    def test_storage_errors_propagate(self, mock_vector_store):
        mock_vector_store.get_chunk_window.side_effect = StorageError("connection reset")
        assembler = ContextAssembler(mock_vector_store)

        with pytest.raises(StorageError):
            assembler.assemble([make_result(1)])

    def test_join_uses_separator(self):
        assert ContextAssembler.join(["a", "b"]) == "a" + BLOCK_SEPARATOR + "b"
        assert BLOCK_SEPARATOR == "\n\n---\n\n"
