"""Tests for document intake."""
from pathlib import Path

from etl.intake import collect_paths, load_documents


def write(path: Path, content: bytes) -> Path:
    path.write_bytes(content)
    return path


class TestIntake:

    def test_directory_is_expanded_in_name_order(self, tmp_path):
        write(tmp_path / "b.pdf", b"%PDF")
        write(tmp_path / "a.docx", b"PK")
        write(tmp_path / "notes.exe", b"MZ")
        (tmp_path / "nested").mkdir()

        paths = collect_paths([str(tmp_path)])

        assert [p.name for p in paths] == ["a.docx", "b.pdf"]

    def test_explicit_files_keep_given_order(self, tmp_path):
        second = write(tmp_path / "z.txt", b"z")
        first = write(tmp_path / "y.bin", b"y")

        paths = collect_paths([str(second), str(first)])

        assert paths == [second, first]

    def test_missing_paths_are_skipped(self, tmp_path):
        assert collect_paths([str(tmp_path / "missing.pdf")]) == []

    def test_load_documents_assigns_unique_ids(self, tmp_path):
        write(tmp_path / "a.txt", b"Alice")
        write(tmp_path / "b.pdf", b"%PDF-1.4")

        documents = load_documents([str(tmp_path)])

        assert [d.name for d in documents] == ["a.txt", "b.pdf"]
        assert documents[0].data == b"Alice"
        assert documents[0].size == 5
        assert documents[1].mime_type == "application/pdf"
        assert len({d.id for d in documents}) == 2
