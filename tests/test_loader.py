"""Tests for corpus loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from lexindex.ingestion.loader import load_corpus, read_document, render_json


class TestRenderJson:
    """Test JSON to text conversion."""

    def test_string_value_used_verbatim(self) -> None:
        """A top-level JSON string is returned without quotes."""
        assert render_json(json.dumps("Storm safety\nStay indoors"), Path("s.json")) == "Storm safety\nStay indoors"

    def test_structure_pretty_printed(self) -> None:
        """Objects are re-serialised with indentation."""
        raw = '{"title": "AQI", "levels": [1, 2]}'
        text = render_json(raw, Path("aqi.json"))

        assert text == json.dumps({"title": "AQI", "levels": [1, 2]}, indent=2)
        assert '\n  "title": "AQI"' in text

    def test_non_ascii_kept_readable(self) -> None:
        """Unicode is not escaped."""
        assert "°F" in render_json('{"unit": "°F"}', Path("u.json"))

    def test_malformed_json_falls_back_to_raw(self) -> None:
        """Unparseable JSON is kept as raw text."""
        raw = '{"title": "broken",'
        assert render_json(raw, Path("bad.json")) == raw


class TestReadDocument:
    """Test read_document function."""

    def test_reads_text_file(self, tmp_path: Path) -> None:
        """Plain text is returned as is."""
        path = tmp_path / "notes.txt"
        path.write_text("Humidity above 60%", encoding="utf-8")

        assert read_document(path) == "Humidity above 60%"

    def test_json_file_rendered(self, tmp_path: Path) -> None:
        """JSON files go through render_json."""
        path = tmp_path / "data.json"
        path.write_text('["wind", "chill"]', encoding="utf-8")

        assert read_document(path) == '[\n  "wind",\n  "chill"\n]'

    def test_invalid_utf8_is_replaced(self, tmp_path: Path) -> None:
        """Undecodable bytes do not make the file unreadable."""
        path = tmp_path / "latin.txt"
        path.write_bytes(b"caf\xe9 menu")

        assert read_document(path) == "caf\ufffd menu"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Read errors surface as OSError."""
        with pytest.raises(OSError):
            read_document(tmp_path / "missing.txt")


class TestLoadCorpus:
    """Test load_corpus function."""

    def test_missing_root_is_created(self, tmp_path: Path) -> None:
        """A missing root directory is created and yields no documents."""
        root = tmp_path / "datasets"

        documents = load_corpus(root)

        assert documents == []
        assert root.is_dir()

    def test_relative_paths_and_order(self, tmp_path: Path) -> None:
        """Documents carry paths relative to the root in sorted order."""
        (tmp_path / "b.txt").write_text("bee")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "a.md").write_text("ant")
        (tmp_path / "a.txt").write_text("aardvark")

        documents = load_corpus(tmp_path)

        assert [d.path for d in documents] == ["a.txt", "b.txt", "sub/a.md"]
        assert documents[2].text == "ant"

    def test_extra_file_included_when_present(self, tmp_path: Path) -> None:
        """The sibling README is appended after the corpus files."""
        root = tmp_path / "datasets"
        root.mkdir()
        (root / "doc.txt").write_text("doc")
        readme = tmp_path / "README.md"
        readme.write_text("# Project")

        documents = load_corpus(root, extra_files=[readme])

        assert [d.path for d in documents] == ["doc.txt", "../README.md"]
        assert documents[-1].text == "# Project"

    def test_extra_file_ignored_when_absent(self, tmp_path: Path) -> None:
        """A missing README is not an error."""
        root = tmp_path / "datasets"
        documents = load_corpus(root, extra_files=[tmp_path / "README.md"])
        assert documents == []

    def test_unreadable_file_skipped(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """A dangling link is logged and skipped; other files still load."""
        (tmp_path / "good.txt").write_text("fine")
        (tmp_path / "dangling.txt").symlink_to(tmp_path / "nowhere.txt")

        with caplog.at_level(logging.WARNING, logger="lexindex.ingestion.loader"):
            documents = load_corpus(tmp_path)

        assert [d.path for d in documents] == ["good.txt"]
        assert "Skipping unreadable file" in caplog.text

    def test_read_error_skipped(self, tmp_path: Path) -> None:
        """Any OSError from reading one file only drops that file."""
        (tmp_path / "a.txt").write_text("alpha")
        (tmp_path / "b.txt").write_text("beta")
        original = Path.read_bytes

        def flaky_read(self: Path) -> bytes:
            if self.name == "a.txt":
                raise PermissionError("denied")
            return original(self)

        with patch.object(Path, "read_bytes", flaky_read):
            documents = load_corpus(tmp_path)

        assert [d.path for d in documents] == ["b.txt"]

    def test_malformed_json_kept_as_text(self, tmp_path: Path) -> None:
        """Broken JSON still becomes a document."""
        (tmp_path / "broken.json").write_text("{not json")

        documents = load_corpus(tmp_path)

        assert documents[0].text == "{not json"

    def test_traversal_failure_propagates(self, tmp_path: Path) -> None:
        """Errors walking the tree are not swallowed."""
        with patch("lexindex.ingestion.loader.iter_corpus_paths", side_effect=OSError("gone")):
            with pytest.raises(OSError):
                load_corpus(tmp_path)
