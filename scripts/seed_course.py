#!/usr/bin/env python3
"""
seed_course.py - Create a course from a YAML outline.

Reads an outline from outlines/ (or any .yaml path) and writes the company,
course, modules, lessons and materials to the hosted database using the
service role key. Module and lesson order follow their position in the file.

Usage:
  python scripts/seed_course.py example_course
  python scripts/seed_course.py outlines/example_course.yaml --dry-run
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from coursepath.admin import seed_outline
from coursepath.config import LOG_FORMAT, create_store, load_settings
from coursepath.errors import CoursePathError
from coursepath.store import InMemoryStore
from coursepath.utils import get_available_outlines, load_outline

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Seed a course from a YAML outline",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "outline",
        help="Outline name in outlines/ or path to a .yaml file"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and build the course in memory without touching the database"
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: project root)"
    )

    args = parser.parse_args()

    logger.info(f"Loading outline {args.outline}...")
    try:
        outline = load_outline(args.outline)
    except FileNotFoundError as exc:
        logger.error(str(exc))
        available = get_available_outlines()
        if available:
            logger.info(f"Available outlines: {', '.join(available)}")
        return 1
    except CoursePathError as exc:
        logger.error(str(exc))
        return 1

    logger.info(f"  {outline.title}: {len(outline.modules)} modules, {outline.lesson_count} lessons")

    if args.dry_run:
        logger.info("Dry run: writing to an in-memory store")
        store = InMemoryStore()
    else:
        settings = load_settings(args.env_file)
        try:
            store = create_store(settings, service_role=True)
        except ValueError as exc:
            logger.error(str(exc))
            return 1

    try:
        result = seed_outline(outline, store)
    except CoursePathError as exc:
        logger.error(f"Seeding failed: {exc}")
        return 1

    logger.info("=" * 50)
    logger.info(f"Course created: {result.course.title} ({result.course.id})")
    logger.info(f"  Modules: {result.modules}")
    logger.info(f"  Lessons: {result.lessons}")
    logger.info(f"  Materials: {result.materials}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
