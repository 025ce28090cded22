"""
Stroke-path serialization.

A drawing is an ordered list of stroke-path objects exactly as the drawing
surface exports them (e.g. {"points": [[0, 0], [1, 1]]} or the
{"drawMode", "strokeColor", "strokeWidth", "paths"} shape of the browser
canvas). Only the outer structure is checked: a JSON array of objects.
"""
import json
from typing import Any, Dict, List

from pydantic import TypeAdapter, ValidationError

from onlynote.core.errors import ParseError

StrokePath = Dict[str, Any]

_paths_adapter = TypeAdapter(List[StrokePath])


def parse_paths(text: str) -> List[StrokePath]:
    """
    Parse serialized stroke paths.

    Raises:
        ParseError: If `text` is not a JSON array of objects
    """
    if text is None:
        raise ParseError("No drawing content")
    try:
        return _paths_adapter.validate_json(text)
    except ValidationError as exc:
        raise ParseError(f"Invalid drawing content: {exc.error_count()} error(s)") from exc


def validate_paths(paths: Any) -> List[StrokePath]:
    """Check already-decoded content has the stroke-path list shape."""
    try:
        return _paths_adapter.validate_python(paths)
    except ValidationError as exc:
        raise ParseError(f"Invalid drawing content: {exc.error_count()} error(s)") from exc


def dump_paths(paths: List[StrokePath]) -> str:
    return json.dumps(paths, ensure_ascii=False, separators=(",", ":"))
