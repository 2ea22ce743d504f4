"""Row parsing shared by every store reader."""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from coursepath.errors import MalformedInput

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_rows(model: type[ModelT], rows: list[dict], table: str) -> list[ModelT]:
    """Validate store rows into models, reporting bad rows as MalformedInput."""
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as exc:
        raise MalformedInput(f"Invalid row in {table}: {exc}") from exc
