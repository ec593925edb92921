"""
Feed recordings: snapshot sequences stored as YAML for replay and debugging.
"""
from pathlib import Path
from typing import List, Optional
import logging

from autocade.core import BoardSnapshot, atomic_write_yaml, load_yaml

logger = logging.getLogger(__name__)

RECORDING_HEADER = "autocade feed recording, {count} snapshots"


def save_recording(filepath: Path, snapshots: List[BoardSnapshot], note: Optional[str] = None) -> None:
    """
    Write snapshots to a YAML recording.

    Args:
        filepath: Target file
        snapshots: Snapshots in feed order
        note: Extra line for the comment header (e.g. game and players)
    """
    header = RECORDING_HEADER.format(count=len(snapshots))
    if note:
        header = f"{header}\n{note}"

    data = {"snapshots": [s.to_dict() for s in snapshots]}
    atomic_write_yaml(filepath, data, header=header)
    logger.info(f"Saved {len(snapshots)} snapshots to {filepath}")


def load_recording(filepath: Path) -> List[BoardSnapshot]:
    """
    Load snapshots from a YAML recording.

    Accepts either a mapping with a `snapshots` list or a bare list.

    Raises:
        FileNotFoundError: If the recording does not exist
        ValueError: If the document holds no snapshot list
    """
    data = load_yaml(filepath, expect=(dict, list))
    raw = data.get("snapshots") if isinstance(data, dict) else data

    if not isinstance(raw, list):
        raise ValueError(f"No snapshot list in recording {filepath}")

    snapshots = [BoardSnapshot.from_dict(item) for item in raw]
    logger.info(f"Loaded {len(snapshots)} snapshots from {filepath}")
    return snapshots
