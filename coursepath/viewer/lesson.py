"""
Lesson renderer - HTML fragments for the lesson viewer.

Provides:
- Video embedding (YouTube links become embed URLs)
- Lesson header with "Module N · Lesson N of T" label
- Materials list and course cards
"""

import html
from typing import Optional
from urllib.parse import parse_qs, urlparse

from coursepath.schemas import Company, Course, Lesson, LessonMaterial


def get_viewer_css() -> str:
    """Get CSS styles for the lesson viewer."""
    return """
    <style>
    .video-frame {
        position: relative;
        width: 100%;
        padding-top: 56.25%;
        background: #000;
        border-radius: 8px;
        overflow: hidden;
    }
    .video-frame iframe {
        position: absolute;
        inset: 0;
        width: 100%;
        height: 100%;
        border: 0;
    }
    .lesson-label {
        font-size: 0.85em;
        color: #94a3b8;
        letter-spacing: 0.05em;
        text-transform: uppercase;
        margin: 1em 0 0.3em;
    }
    .lesson-title {
        font-size: 1.6em;
        font-weight: 700;
        margin-bottom: 0.5em;
    }
    .lesson-description {
        color: #475569;
        line-height: 1.6;
    }
    .material-item {
        display: flex;
        align-items: center;
        gap: 0.8em;
        padding: 0.7em 1em;
        margin: 0.4em 0;
        background: #f1f5f9;
        border-radius: 8px;
        text-decoration: none;
        color: #0f172a;
    }
    .material-item:hover {
        background: #ffedd5;
    }
    .material-type {
        font-size: 0.8em;
        color: #64748b;
    }
    .course-card {
        border: 1px solid #e2e8f0;
        border-radius: 12px;
        padding: 1.2em;
        margin-bottom: 0.5em;
    }
    .course-card img {
        height: 48px;
        object-fit: contain;
        margin-bottom: 0.8em;
    }
    .course-card-title {
        font-size: 1.2em;
        font-weight: 700;
        color: #0f172a;
    }
    .course-card-description {
        color: #64748b;
        font-size: 0.9em;
        margin-top: 0.4em;
    }
    </style>
    """


def get_embed_url(url: str) -> str:
    """
    Convert a watch/share link into an embeddable player URL.

    YouTube links (youtube.com/watch?v=ID and youtu.be/ID) become
    https://www.youtube.com/embed/ID; everything else is returned unchanged.
    """
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()

    if host.endswith("youtu.be"):
        video_id = parsed.path.lstrip("/").split("/")[0]
        if video_id:
            return f"https://www.youtube.com/embed/{video_id}"
    elif host.endswith("youtube.com"):
        if parsed.path.startswith("/embed/"):
            return url
        video_id = parse_qs(parsed.query).get("v", [""])[0]
        if video_id:
            return f"https://www.youtube.com/embed/{video_id}"

    return url


def format_duration(seconds: Optional[int]) -> str:
    """Format a duration as M:SS or H:MM:SS; empty when unknown."""
    if not seconds:
        return ""
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def render_video_embed(lesson: Lesson) -> str:
    src = html.escape(get_embed_url(lesson.video_url), quote=True)
    return (
        '<div class="video-frame">'
        f'<iframe src="{src}" allow="accelerometer; autoplay; clipboard-write; '
        'encrypted-media; gyroscope; picture-in-picture" allowfullscreen></iframe>'
        "</div>"
    )


def render_lesson_header(lesson: Lesson, label: str) -> str:
    """Render the label line and title above the lesson description."""
    duration = format_duration(lesson.duration_seconds)
    suffix = f" · {duration}" if duration else ""
    return (
        f'<div class="lesson-label">{html.escape(label)}{suffix}</div>'
        f'<div class="lesson-title">{html.escape(lesson.title)}</div>'
    )


def render_lesson_description(lesson: Lesson) -> str:
    if not lesson.description:
        return ""
    paragraphs = [p.strip() for p in lesson.description.split("\n\n") if p.strip()]
    body = "".join(f"<p>{html.escape(p)}</p>" for p in paragraphs)
    return f'<div class="lesson-description">{body}</div>'


def render_materials(materials: list[LessonMaterial]) -> str:
    """Render downloadable materials as links; empty string when there are none."""
    if not materials:
        return ""
    items = []
    for material in materials:
        href = html.escape(material.file_url, quote=True)
        items.append(
            f'<a class="material-item" href="{href}" target="_blank" rel="noopener noreferrer">'
            f'<span>{html.escape(material.title)}</span>'
            f'<span class="material-type">{html.escape(material.file_type.upper())}</span>'
            "</a>"
        )
    return "".join(items)


def render_course_card(course: Course, company: Optional[Company] = None) -> str:
    logo = ""
    if company and company.logo_url:
        logo = (
            f'<img src="{html.escape(company.logo_url, quote=True)}" '
            f'alt="{html.escape(company.name, quote=True)}">'
        )
    description = ""
    if course.description:
        description = f'<div class="course-card-description">{html.escape(course.description)}</div>'
    return (
        '<div class="course-card">'
        f"{logo}"
        f'<div class="course-card-title">{html.escape(course.title)}</div>'
        f"{description}"
        "</div>"
    )
