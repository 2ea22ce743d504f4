"""
Outline loader utility for CoursePath.

Loads YAML course outlines from the outlines/ directory.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from coursepath.errors import MalformedInput
from coursepath.schemas import CourseOutline


# Default outlines directory (relative to project root)
OUTLINES_DIR = Path(__file__).parent.parent.parent / "outlines"


def resolve_outline_path(name_or_path: str | Path, outlines_dir: Path | None = None) -> Path:
    """
    Find an outline file.

    Accepts a path to a .yaml file or a bare outline name looked up in the
    outlines directory.
    """
    path = Path(name_or_path)
    if path.suffix in (".yaml", ".yml"):
        return path
    return (outlines_dir or OUTLINES_DIR) / f"{path.name}.yaml"


def load_outline(name_or_path: str | Path, outlines_dir: Path | None = None) -> CourseOutline:
    """
    Load and validate a course outline.

    Args:
        name_or_path: Outline file path, or outline name without .yaml extension
        outlines_dir: Optional custom outlines directory

    Returns:
        Validated CourseOutline

    Raises:
        FileNotFoundError: If outline file doesn't exist
        MalformedInput: If the YAML does not parse or is not a valid outline
    """
    file_path = resolve_outline_path(name_or_path, outlines_dir)

    if not file_path.exists():
        raise FileNotFoundError(f"Course outline not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise MalformedInput(f"Invalid YAML in {file_path}: {exc}") from exc

    try:
        return CourseOutline.model_validate(data or {})
    except ValidationError as exc:
        raise MalformedInput(f"Invalid course outline {file_path}: {exc}") from exc


def get_available_outlines(outlines_dir: Path | None = None) -> list[str]:
    """
    List all available outlines.

    Returns:
        List of outline names (without .yaml extension)
    """
    dir_path = outlines_dir or OUTLINES_DIR
    if not dir_path.exists():
        return []
    return sorted(p.stem for p in dir_path.glob("*.yaml"))
