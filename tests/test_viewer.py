"""
Tests for lesson viewer HTML fragments.
"""

from coursepath.schemas import Company, Course, Lesson, LessonMaterial
from coursepath.viewer import (
    format_duration,
    get_embed_url,
    render_course_card,
    render_lesson_description,
    render_lesson_header,
    render_materials,
    render_video_embed,
)


def make_lesson(**overrides):
    fields = {"id": "l1", "module_id": "m1", "title": "Welcome", "video_url": "https://youtu.be/abc123"}
    fields.update(overrides)
    return Lesson(**fields)


class TestEmbedUrl:
    """Test video URL conversion."""

    def test_short_link(self):
        assert get_embed_url("https://youtu.be/abc123") == "https://www.youtube.com/embed/abc123"

    def test_watch_link(self):
        url = "https://www.youtube.com/watch?v=abc123&t=42"
        assert get_embed_url(url) == "https://www.youtube.com/embed/abc123"

    def test_embed_link_unchanged(self):
        url = "https://www.youtube.com/embed/abc123"
        assert get_embed_url(url) == url

    def test_other_hosts_unchanged(self):
        url = "https://player.vimeo.com/video/123"
        assert get_embed_url(url) == url


class TestFormatDuration:
    """Test duration formatting."""

    def test_unknown(self):
        assert format_duration(None) == ""
        assert format_duration(0) == ""

    def test_minutes(self):
        assert format_duration(245) == "4:05"

    def test_hours(self):
        assert format_duration(3725) == "1:02:05"


class TestRendering:
    """Test HTML fragments."""

    def test_video_embed(self):
        html = render_video_embed(make_lesson())
        assert 'src="https://www.youtube.com/embed/abc123"' in html

    def test_header_with_duration(self):
        html = render_lesson_header(make_lesson(duration_seconds=90), "Module 1 · Lesson 1 of 3")
        assert "Module 1 · Lesson 1 of 3 · 1:30" in html
        assert "Welcome" in html

    def test_header_escapes_title(self):
        html = render_lesson_header(make_lesson(title="<script>x</script>"), "Module 1 · Lesson 1 of 1")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_description_paragraphs(self):
        html = render_lesson_description(make_lesson(description="First.\n\nSecond."))
        assert html.count("<p>") == 2
        assert render_lesson_description(make_lesson()) == ""

    def test_materials(self):
        materials = [
            LessonMaterial(id="a", lesson_id="l1", title="Slides", file_url="https://example.com/s.pdf", file_type="pdf"),
        ]
        html = render_materials(materials)
        assert 'href="https://example.com/s.pdf"' in html
        assert "PDF" in html
        assert render_materials([]) == ""

    def test_course_card(self):
        course = Course(id="c1", title="Data Analysis", description="Learn data")
        company = Company(id="co1", name="Acme", logo_url="https://example.com/logo.png")
        html = render_course_card(course, company)
        assert "Data Analysis" in html
        assert 'alt="Acme"' in html
        assert "<img" not in render_course_card(course)
