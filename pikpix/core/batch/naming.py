"""Collision-free output file names."""

from dataclasses import dataclass
from pathlib import Path

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class OutputTarget:
    """Destination path that did not exist when it was chosen."""

    path: Path
    created_directory: bool = False


def name_for(directory: str, base_name: str, extension: str) -> OutputTarget:
    """
    Pick ``base.ext``, or ``base_1.ext``, ``base_2.ext``... if it is taken.

    The directory and its missing parents are created first. The check is
    not atomic, so callers must not name files concurrently in one directory.

    Args:
        directory: Destination directory
        base_name: File name without extension
        extension: Extension without the leading dot

    Returns:
        The chosen target
    """
    target_dir = Path(directory)
    created = not target_dir.is_dir()
    if created:
        target_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("Created output directory", directory=str(target_dir))

    candidate = target_dir / f"{base_name}.{extension}"
    counter = 1
    while candidate.exists():
        candidate = target_dir / f"{base_name}_{counter}.{extension}"
        counter += 1

    return OutputTarget(path=candidate, created_directory=created)
