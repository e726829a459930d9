"""
meta.py — Schema for the per-leaf meta.json file.

The browser embeds a YouTube player for `youtube` (a video id, or a list of
them) and a Spotify player for `spotify` (an embed URL). Both are optional
and other keys are left alone.
"""

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError


class MetaFile(BaseModel):
    model_config = ConfigDict(extra="allow")

    youtube: Optional[Union[str, list[str]]] = None
    spotify: Optional[str] = None


class MetaFileError(ValueError):
    pass


def load_meta(path) -> MetaFile:
    """Parse and validate a meta.json file. Raises MetaFileError if invalid."""
    try:
        with open(Path(path), encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MetaFileError(str(e)) from e

    if not isinstance(data, dict):
        raise MetaFileError("expected a JSON object")
    try:
        return MetaFile.model_validate(data)
    except ValidationError as e:
        # union errors report one loc per member type; keep the field name
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise MetaFileError(f"bad field(s): {', '.join(fields)}") from e
