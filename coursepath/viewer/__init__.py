"""
CoursePath Viewer - Rendering components for the lesson viewer.

This module provides:
- Video embedding and lesson headers
- Materials list
- Course cards for the student dashboard
"""

from .lesson import (
    get_viewer_css,
    get_embed_url,
    format_duration,
    render_video_embed,
    render_lesson_header,
    render_lesson_description,
    render_materials,
    render_course_card,
)

__all__ = [
    "get_viewer_css",
    "get_embed_url",
    "format_duration",
    "render_video_embed",
    "render_lesson_header",
    "render_lesson_description",
    "render_materials",
    "render_course_card",
]
