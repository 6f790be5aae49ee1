"""Load dashboard views from JSON payloads."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from devhud.resources.models import View

logger = logging.getLogger(__name__)


class SnapshotLoadError(Exception):
    """Raised when a view payload cannot be decoded or validated."""

    pass


def load_view_from_data(data: Any) -> View:
    """Validate a decoded payload.

    Accepts either a view object (``{"Resources": [...]}``) or a bare list of
    resources.

    Raises:
        SnapshotLoadError: If the payload does not describe a view
    """
    if isinstance(data, list):
        data = {"Resources": data}
    try:
        return View.model_validate(data)
    except ValidationError as e:
        raise SnapshotLoadError(f"Invalid view payload: {e}") from e


def load_view_from_string(content: str) -> View:
    """Decode and validate a JSON view payload."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise SnapshotLoadError(f"View payload is not valid JSON: {e}") from e
    return load_view_from_data(data)


def load_view(path: Path) -> View:
    """Read a view payload from a JSON file."""
    try:
        content = path.read_text()
    except OSError as e:
        raise SnapshotLoadError(f"Cannot read {path}: {e}") from e

    view = load_view_from_string(content)
    logger.debug(f"Loaded {len(view.resources)} resources from {path}")
    return view
