import os

import pyperclip
import pytest
from unittest.mock import patch
from repo2clip.core.errors import OutputError
from repo2clip.core.models import OutputTarget, RenderedArtifact
from repo2clip.core.output import CLIPBOARD, OutputSink, chunk_path, split_chunks


class TestChunking:
    def test_split_concatenates_back(self):
        data = ("héllo wörld " * 50).encode("utf-8")

        chunks = split_chunks(data, 64)

        assert b"".join(chunks) == data
        assert all(len(c) == 64 for c in chunks[:-1])
        assert 0 < len(chunks[-1]) <= 64

    def test_split_empty(self):
        assert split_chunks(b"", 10) == [b""]

    def test_split_invalid_size(self):
        with pytest.raises(ValueError):
            split_chunks(b"abc", 0)

    def test_chunk_path(self):
        assert chunk_path("out/context.txt", 1, 3) == "out/context_001.txt"
        assert chunk_path("context", 12, 12) == "context_012"
        assert chunk_path("c.md", 7, 1500) == "c_0007.md"


class TestOutputSink:
    def test_clipboard(self):
        sink = OutputSink(OutputTarget())
        with patch('pyperclip.copy') as mock_copy:
            destinations = sink.deliver(RenderedArtifact("hello", 1))

        assert destinations == [CLIPBOARD]
        mock_copy.assert_called_once_with("hello")

    def test_clipboard_unavailable(self):
        sink = OutputSink(OutputTarget())
        with patch('pyperclip.copy', side_effect=pyperclip.PyperclipException("no backend")):
            with pytest.raises(OutputError, match="Clipboard unavailable"):
                sink.deliver(RenderedArtifact("hello", 1))

    def test_write_single_file(self, temp_workspace):
        path = str(temp_workspace / "out.txt")

        destinations = OutputSink(OutputTarget(path=path)).deliver(RenderedArtifact("héllo", 2))

        assert destinations == [path]
        with open(path, "rb") as f:
            assert f.read() == "héllo".encode("utf-8")

    def test_overwrite_and_append(self, temp_workspace):
        path = str(temp_workspace / "out.txt")
        OutputSink(OutputTarget(path=path)).deliver(RenderedArtifact("first\n", 1))
        OutputSink(OutputTarget(path=path)).deliver(RenderedArtifact("second\n", 1))
        OutputSink(OutputTarget(path=path, append=True)).deliver(RenderedArtifact("third\n", 1))

        with open(path) as f:
            assert f.read() == "second\nthird\n"

    def test_chunked_files(self, temp_workspace):
        path = str(temp_workspace / "out.txt")
        text = "x" * 25

        destinations = OutputSink(OutputTarget(path=path, chunk_size=10)).deliver(RenderedArtifact(text, 5))

        assert [os.path.basename(p) for p in destinations] == ["out_001.txt", "out_002.txt", "out_003.txt"]
        joined = b""
        for p in destinations:
            with open(p, "rb") as f:
                joined += f.read()
        assert joined == text.encode("utf-8")
        assert not os.path.exists(path)

    def test_no_chunking_when_it_fits(self, temp_workspace):
        path = str(temp_workspace / "out.txt")

        destinations = OutputSink(OutputTarget(path=path, chunk_size=100)).deliver(RenderedArtifact("small", 1))

        assert destinations == [path]

    def test_check_writable_directory(self, temp_workspace):
        with pytest.raises(OutputError, match="is a directory"):
            OutputSink(OutputTarget(path=str(temp_workspace))).check_writable()

    def test_check_writable_missing_parent(self, temp_workspace):
        path = str(temp_workspace / "missing" / "out.txt")
        with pytest.raises(OutputError, match="does not exist"):
            OutputSink(OutputTarget(path=path)).check_writable()

    def test_check_writable_clipboard(self):
        OutputSink(OutputTarget()).check_writable()
