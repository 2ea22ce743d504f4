"""
Tests for the YAML outline loader.
"""

import pytest

from coursepath.errors import MalformedInput
from coursepath.utils import get_available_outlines, load_outline, resolve_outline_path
from coursepath.utils.outline_loader import OUTLINES_DIR

OUTLINE_YAML = """
company:
  name: Acme
title: Data Analysis
modules:
  - title: Start
    lessons:
      - title: Welcome
        video_url: https://youtu.be/a
"""


class TestOutlineLoader:
    """Test outline resolution and loading."""

    def test_resolve_name(self, tmp_path):
        assert resolve_outline_path("intro", tmp_path) == tmp_path / "intro.yaml"

    def test_resolve_path(self, tmp_path):
        path = tmp_path / "custom.yml"
        assert resolve_outline_path(path) == path

    def test_load_by_name(self, tmp_path):
        (tmp_path / "intro.yaml").write_text(OUTLINE_YAML, encoding="utf-8")
        outline = load_outline("intro", tmp_path)
        assert outline.title == "Data Analysis"
        assert outline.lesson_count == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_outline("missing", tmp_path)

    def test_invalid_outline(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("title: No company\n", encoding="utf-8")
        with pytest.raises(MalformedInput):
            load_outline("bad", tmp_path)

    def test_unparsable_yaml(self, tmp_path):
        (tmp_path / "broken.yaml").write_text("title: [unclosed\n  modules: {\n", encoding="utf-8")
        with pytest.raises(MalformedInput, match="Invalid YAML"):
            load_outline("broken", tmp_path)

    def test_empty_file(self, tmp_path):
        (tmp_path / "empty.yaml").write_text("", encoding="utf-8")
        with pytest.raises(MalformedInput):
            load_outline("empty", tmp_path)

    def test_available_outlines(self, tmp_path):
        (tmp_path / "b.yaml").write_text(OUTLINE_YAML, encoding="utf-8")
        (tmp_path / "a.yaml").write_text(OUTLINE_YAML, encoding="utf-8")
        assert get_available_outlines(tmp_path) == ["a", "b"]
        assert get_available_outlines(tmp_path / "nowhere") == []

    def test_bundled_example_outline(self):
        outline = load_outline("example_course")
        assert outline.company.name == "Acme Learning"
        assert "example_course" in get_available_outlines(OUTLINES_DIR)
