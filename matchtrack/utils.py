"""JSON file helpers shared by the roster, history and config loaders."""

import dataclasses
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('matchtrack.utils')


def load_json(path: Path | str, schema: type[T] | None = None) -> Any | T:
    """
    Read a tracker data file, validating it against a pydantic schema if given.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file is not JSON (message names the file)
        ValueError: If the data doesn't match the schema

    Example:
        from matchtrack.schemas import RosterFile
        roster = load_json('data/roster.json', schema=RosterFile)
    """
    path = Path(path)
    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema is None:
        return data

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'Schema validation failed for {path}: {e}')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def _to_jsonable(data: Any) -> Any:
    """Pydantic models and dataclasses (or lists of them) as plain JSON data."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode='json')
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    if isinstance(data, (list, tuple)):
        return [_to_jsonable(item) for item in data]
    return data


def save_json(path: Path | str, data: Any, indent: int = 2) -> None:
    """
    Write data as JSON, replacing the file only once the new content is complete.

    games.json is rewritten on every recorded game, so the new content goes
    to a temporary file in the same directory first.

    Raises:
        TypeError: If data is not JSON-serializable
        OSError: If the file cannot be written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        content = json.dumps(_to_jsonable(data), indent=indent, ensure_ascii=False)
    except TypeError as e:
        logger.error(f'Data for {path} is not JSON-serializable: {e}')
        raise

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f'.{path.name}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug(f'Wrote {path}')
