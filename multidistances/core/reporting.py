"""
CSV export and import of distance matrices and diversity sequences.

Matrix files have a ``File,<name_0>,...,<name_n-1>`` header and one row per
item. Sequence files have a ``File,Rank_<strategy>`` header and list items
in selection order with 1-based ranks.
"""

import csv
import io
from pathlib import Path
from typing import IO, List, Sequence, Tuple, Union

import numpy as np

from ..errors import ConfigurationError
from ..utils.logging_setup import get_logger
from .diversity import DiversitySequence
from .matrix import validate_matrix

logger = get_logger(__name__)

Target = Union[str, Path, IO[str]]


def _open_for_write(target: Target):
    if isinstance(target, (str, Path)):
        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        return open(path, "w", newline="", encoding="utf-8"), True
    return target, False


def _format(value: float) -> str:
    return repr(float(value))


def write_matrix_csv(target: Target, names: Sequence[str], matrix: np.ndarray) -> None:
    """
    Write a distance matrix as CSV.

    Args:
        target: Output path or text stream
        names: Item names, in matrix order
        matrix: N x N distance matrix
    """
    if len(names) != matrix.shape[0]:
        raise ConfigurationError(
            f"Got {len(names)} names for a {matrix.shape[0]}x{matrix.shape[0]} matrix",
            parameter="names",
        )
    handle, owned = _open_for_write(target)
    try:
        writer = csv.writer(handle)
        writer.writerow(["File", *names])
        for name, row in zip(names, matrix):
            writer.writerow([name, *(_format(v) for v in row)])
    finally:
        if owned:
            handle.close()
        else:
            handle.flush()
    logger.info(f"Wrote {len(names)}x{len(names)} distance matrix")


def read_matrix_csv(source: Union[str, Path, IO[str]]) -> Tuple[List[str], np.ndarray]:
    """
    Read a matrix written by :func:`write_matrix_csv`.

    Returns:
        ``(names, matrix)``

    Raises:
        ConfigurationError: Malformed file or invalid matrix
    """
    if isinstance(source, (str, Path)):
        text = Path(source).read_text(encoding="utf-8")
    else:
        text = source.read()

    rows = [row for row in csv.reader(io.StringIO(text)) if row]
    if not rows or rows[0][:1] != ["File"]:
        raise ConfigurationError("Distance matrix CSV must start with a 'File' header",
                                 parameter="matrix")

    names = rows[0][1:]
    body = rows[1:]
    if len(body) != len(names):
        raise ConfigurationError(
            f"Distance matrix CSV has {len(names)} columns but {len(body)} rows",
            parameter="matrix",
        )
    for i, row in enumerate(body):
        if row[0] != names[i]:
            raise ConfigurationError(
                f"Distance matrix CSV row {i + 1} is '{row[0]}' but the header has '{names[i]}'",
                parameter="matrix",
            )
    try:
        values = [[float(v) for v in row[1:]] for row in body]
    except ValueError as e:
        raise ConfigurationError(f"Non-numeric distance in matrix CSV: {e}",
                                 parameter="matrix") from e
    if any(len(row) != len(names) for row in values):
        raise ConfigurationError("Distance matrix CSV rows have inconsistent lengths",
                                 parameter="matrix")

    return names, validate_matrix(values)


def write_sequence_csv(target: Target, names: Sequence[str], seq: DiversitySequence) -> None:
    """
    Write a diversity sequence as CSV, one row per item in selection order.

    Ranks are written 1-based.
    """
    if len(names) != len(seq):
        raise ConfigurationError(
            f"Got {len(names)} names for a sequence of {len(seq)} items",
            parameter="names",
        )
    handle, owned = _open_for_write(target)
    try:
        writer = csv.writer(handle)
        writer.writerow(["File", f"Rank_{seq.strategy.label}"])
        for item in seq.order:
            writer.writerow([names[item], seq.rank[item] + 1])
    finally:
        if owned:
            handle.close()
        else:
            handle.flush()
    logger.info(f"Wrote {seq.strategy.label} sequence of {len(seq)} items")
