"""File collection and loading utilities."""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..errors import ConfigurationError
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


def _normalize_extensions(extensions: Optional[Iterable[str]]) -> Optional[set]:
    if not extensions:
        return None
    return {("." + ext.lstrip(".")).lower() for ext in extensions if ext.strip(".")}


def collect_files(
    paths: Sequence[Path],
    extensions: Optional[Iterable[str]] = None,
    recursive: bool = True,
) -> List[Path]:
    """Collect the files to compare.

    Files named directly are always kept. Directories are searched (sorted,
    so the item order is reproducible) and filtered by extension.

    Args:
        paths: Files and/or directories
        extensions: Extensions to keep, with or without the leading dot;
            case-insensitive. ``None`` keeps everything.
        recursive: Descend into subdirectories

    Returns:
        List of file paths, without duplicates, in discovery order
    """
    wanted = _normalize_extensions(extensions)
    files: List[Path] = []
    seen = set()

    def add(p: Path):
        key = p.resolve()
        if key not in seen:
            seen.add(key)
            files.append(p)

    for base in paths:
        base = Path(base)
        if not base.exists():
            logger.warning(f"Path does not exist: {base}")
            continue

        if base.is_file():
            add(base)
            continue

        candidates = base.rglob("*") if recursive else base.glob("*")
        for p in sorted(candidates):
            if not p.is_file():
                continue
            if wanted is not None and p.suffix.lower() not in wanted:
                continue
            add(p)

    logger.info(f"Collected {len(files)} files")
    return files


def read_contents(files: Sequence[Path], encoding: str = "utf-8") -> List[str]:
    """
    Read every file as text.

    Undecodable bytes are replaced rather than failing the whole run.

    Raises:
        ConfigurationError: A file cannot be read
    """
    contents = []
    for path in files:
        try:
            contents.append(Path(path).read_text(encoding=encoding, errors="replace"))
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}", parameter="paths") from e
    return contents
