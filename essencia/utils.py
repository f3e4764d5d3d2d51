"""File helpers for status exports, report records and uploads."""

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .schemas import PlayerStatus, ReportRecord

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('essencia.utils')


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Read a JSON document, optionally validating it into a pydantic model.

    Args:
        path: Path to the JSON file
        schema: Pydantic model the document must satisfy

    Returns:
        The decoded document, or a model instance when schema is given

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
        ValueError: If the document doesn't satisfy the schema

    Example:
        from essencia.schemas import EngineConfig
        config = load_json('data/engine_config.json', schema=EngineConfig)
    """
    path = Path(path)
    logger.debug(f'Reading {path}')

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    with open(path, encoding='utf-8-sig') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
            raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema is None:
        return data

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'{path} does not match {schema.__name__}: {e}')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def save_json(path: Path | str, data: Any, indent: int = 2) -> None:
    """
    Write data as UTF-8 JSON, creating parent directories.

    Pydantic models are dumped by field name first.

    Raises:
        TypeError: If data is not JSON-serializable
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = data.model_dump() if isinstance(data, BaseModel) else data

    try:
        text = json.dumps(payload, indent=indent, ensure_ascii=False)
    except TypeError as e:
        logger.error(f'Cannot serialize data for {path}: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e

    path.write_text(text + '\n', encoding='utf-8')
    logger.debug(f'Wrote {path}')


def load_player_status(path: Path | str) -> PlayerStatus:
    """Load a player status export from the gamification platform."""
    return load_json(path, schema=PlayerStatus)


def load_report_record(path: Path | str) -> ReportRecord:
    """Load a stored per-cycle report record."""
    return load_json(path, schema=ReportRecord)


def read_upload(path: Path | str) -> str:
    """
    Read an uploaded CSV as text.

    Spreadsheet exports often start with a byte-order mark; it is dropped.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file isn't UTF-8 text
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'CSV file not found: {path}')
    try:
        return path.read_text(encoding='utf-8-sig')
    except UnicodeDecodeError as e:
        raise ValueError(f'CSV file is not UTF-8 text: {path}') from e
