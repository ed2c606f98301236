"""Tests for agentsh/tools/file_ops.py

One test, one thing. Clear names, obvious assertions.
"""

from agentsh.tools.file_ops import read_file, write_file

# =============================================================================
# read_file tests
# =============================================================================


class TestReadFile:
    """Tests for read_file function."""

    def test_read_existing_file_returns_content(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "hello.txt").write_text("Hello World")

        result = read_file("hello.txt")

        assert result["success"] is True
        assert result["content"] == "Hello World"

    def test_read_missing_file_returns_error(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = read_file("nonexistent.txt")

        assert result["success"] is False
        assert "not found" in result["error"].lower()

    def test_read_directory_returns_error(self, tmp_path):
        (tmp_path / "sub").mkdir()

        result = read_file("sub", working_dir=tmp_path)

        assert result["success"] is False
        assert "not a file" in result["error"].lower()

    def test_read_binary_file_returns_error(self, tmp_path):
        (tmp_path / "blob.bin").write_bytes(b"\xff\xfe\x00\x81")

        result = read_file("blob.bin", working_dir=tmp_path)

        assert result["success"] is False
        assert "binary" in result["error"].lower()

    def test_read_large_file_is_not_truncated(self, tmp_path):
        content = "line\n" * 10_000
        (tmp_path / "big.txt").write_text(content)

        result = read_file("big.txt", working_dir=tmp_path)

        assert result["content"] == content

    def test_read_absolute_path(self, tmp_path):
        target = tmp_path / "abs.txt"
        target.write_text("absolute")

        result = read_file(str(target), working_dir="/")

        assert result["content"] == "absolute"

    def test_empty_path_returns_error(self):
        result = read_file("")

        assert result["success"] is False


# =============================================================================
# write_file tests
# =============================================================================


class TestWriteFile:
    """Tests for write_file function."""

    def test_write_new_file(self, tmp_path):
        result = write_file("out.txt", "data", working_dir=tmp_path)

        assert result["success"] is True
        assert result["is_new_file"] is True
        assert (tmp_path / "out.txt").read_text() == "data"

    def test_write_overwrites_existing_file(self, tmp_path):
        (tmp_path / "out.txt").write_text("old content that is longer")

        result = write_file("out.txt", "new", working_dir=tmp_path)

        assert result["is_new_file"] is False
        assert (tmp_path / "out.txt").read_text() == "new"

    def test_write_creates_parent_directories(self, tmp_path):
        result = write_file("a/b/c/deep.txt", "nested", working_dir=tmp_path)

        assert result["success"] is True
        assert (tmp_path / "a" / "b" / "c" / "deep.txt").read_text() == "nested"

    def test_write_to_directory_returns_error(self, tmp_path):
        (tmp_path / "target").mkdir()

        result = write_file("target", "data", working_dir=tmp_path)

        assert result["success"] is False
        assert "directory" in result["error"].lower()

    def test_bytes_written_counts_utf8(self, tmp_path):
        result = write_file("u.txt", "é", working_dir=tmp_path)

        assert result["bytes_written"] == 2

    def test_relative_path_uses_cwd_by_default(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        write_file("here.txt", "x")

        assert (tmp_path / "here.txt").exists()


class TestRoundTrip:
    """write then read returns exactly what was written."""

    def test_write_then_read(self, tmp_path):
        content = "first line\nsecond line\n\ttabbed ünïcode\n"

        write_file("notes.md", content, working_dir=tmp_path)
        result = read_file("notes.md", working_dir=tmp_path)

        assert result["content"] == content

    def test_second_write_replaces_first(self, tmp_path):
        write_file("notes.md", "one", working_dir=tmp_path)
        write_file("notes.md", "two", working_dir=tmp_path)

        assert read_file("notes.md", working_dir=tmp_path)["content"] == "two"
