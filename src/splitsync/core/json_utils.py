#!/usr/bin/env python3
"""
JSON Utilities Module

Provides centralized JSON reading, writing and serialization with consistent
formatting. Cached responses, the submission ledger and CLI output all use
these helpers.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def read_json(filepath: str | Path) -> Any:
    """
    Read data from a JSON file.

    Args:
        filepath: Path to the JSON file

    Returns:
        The parsed JSON data
    """
    with open(filepath, encoding="utf-8") as f:
        return json.load(f)


def format_json(data: Any, ensure_ascii: bool = False, sort_keys: bool = False, default: Any = None) -> str:
    """
    Format data as a pretty-printed JSON string.

    Args:
        data: Data to format
        ensure_ascii: If True, escape non-ASCII characters (default: False)
        sort_keys: If True, sort dictionary keys (default: False)
        default: Function to serialize non-JSON types (default: None)

    Returns:
        Pretty-printed JSON string
    """
    if default is not None:
        return json.dumps(data, indent=2, ensure_ascii=ensure_ascii, sort_keys=sort_keys, default=default)
    return json.dumps(data, indent=2, ensure_ascii=ensure_ascii, sort_keys=sort_keys)


def write_text_atomic(filepath: str | Path, text: str) -> None:
    """
    Replace a file's contents atomically.

    Writes to a temporary file in the destination directory and renames it over
    the target, so readers see either the old or the new contents.

    Raises:
        OSError: If the directory cannot be created or the file cannot be written
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, filepath)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise
