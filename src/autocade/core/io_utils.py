"""
YAML helpers for settings files and feed recordings.

Files are replaced through a sibling temp file, so a recording interrupted
mid-save leaves the previous version in place. Readers can state which
document shape they expect (settings are a mapping, a recording may be a
mapping or a bare snapshot list) and get a ValueError otherwise.
"""
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, Union
import logging

import yaml

logger = logging.getLogger(__name__)

ExpectedType = Union[Type, Tuple[Type, ...]]


def _comment_block(header: str) -> str:
    return "".join(f"# {line}".rstrip() + "\n" for line in header.splitlines())


def atomic_write_yaml(
        filepath: Path,
        data: Union[Dict[str, Any], list],
        header: Optional[str] = None
) -> None:
    """
    Write a YAML document via temp file + os.replace().

    Args:
        filepath: Target file path
        data: Mapping or list to serialize
        header: Optional text written above the document as `#` comment lines

    Raises:
        IOError: If write operation fails
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(
        dir=filepath.parent,
        prefix=f".{filepath.stem}_",
        suffix=".tmp"
    )

    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            if header:
                f.write(_comment_block(header))
            yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

        os.replace(temp_path, filepath)
        logger.debug(f"Wrote {filepath}")

    except Exception as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        logger.error(f"Failed to write {filepath}: {e}")
        raise IOError(f"Atomic write failed: {e}") from e


def load_yaml(filepath: Path, expect: Optional[ExpectedType] = None) -> Any:
    """
    Load a YAML document.

    Args:
        filepath: Path to YAML file
        expect: Type (or tuple of types) the top-level document must have

    Returns:
        Parsed document ({} for an empty file)

    Raises:
        FileNotFoundError: If file does not exist
        yaml.YAMLError: If file is malformed
        ValueError: If the document is not of the expected type
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"YAML file not found: {filepath}")

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse {filepath}: {e}")
        raise

    if data is None:
        data = {}

    if expect is not None and not isinstance(data, expect):
        raise ValueError(f"Unexpected {type(data).__name__} document in {filepath}")

    logger.debug(f"Loaded {filepath}")
    return data
