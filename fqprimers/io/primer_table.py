"""
Primer table parsing.

The primer file is a headerless TSV with four columns:
label, sequence, barcode, direction (F or R).
"""

from io import StringIO
from pathlib import Path
from typing import Union
import logging

import pandas as pd

from ..core.primers import Direction, InvalidPrimerError, Primer, PrimerTable

logger = logging.getLogger(__name__)

PRIMER_COLUMNS = ['label', 'sequence', 'barcode', 'direction']


class PrimerTableError(ValueError):
    """Raised when the primer file is structurally invalid."""


def parse_direction(token: str, strict: bool = False) -> Direction:
    """
    Map a direction token to a Direction.

    'F' is forward and 'R' is reverse. Any other token is treated as
    reverse with a warning, unless strict is set, in which case it makes
    the primer invalid.

    Raises:
        InvalidPrimerError: If strict and the token is neither 'F' nor 'R'
    """
    token = token.strip()
    if token == Direction.FORWARD.value:
        return Direction.FORWARD
    if token == Direction.REVERSE.value:
        return Direction.REVERSE
    if strict:
        raise InvalidPrimerError(f"Unknown primer direction: {token!r}")
    logger.warning(f"Unknown primer direction {token!r}, treating as reverse")
    return Direction.REVERSE


def read_primer_table(path: Union[str, Path], strict_direction: bool = False) -> PrimerTable:
    """
    Load primers from a primer TSV file.

    Primers failing validation are logged and skipped; the rest are kept
    in file order.

    Args:
        path: Path to primer TSV
        strict_direction: Reject direction tokens other than F and R

    Returns:
        PrimerTable of valid primers

    Raises:
        PrimerTableError: If a row does not have exactly four fields
    """
    with open(path) as f:
        # Only whole-line comments; a '#' inside a field is data
        content = ''.join(line for line in f if not line.startswith('#'))

    try:
        df = pd.read_csv(
            StringIO(content),
            sep='\t',
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        logger.warning(f"Primer file is empty: {path}")
        return PrimerTable()
    except pd.errors.ParserError as e:
        raise PrimerTableError(f"Bad primer record in {path}: {e}") from e

    if df.shape[1] != len(PRIMER_COLUMNS):
        raise PrimerTableError(
            f"Primer file must have {len(PRIMER_COLUMNS)} columns "
            f"({', '.join(PRIMER_COLUMNS)}), found {df.shape[1]}"
        )
    df.columns = PRIMER_COLUMNS

    incomplete = df.isna().any(axis=1)
    if incomplete.any():
        first = df[incomplete].index[0]
        raise PrimerTableError(f"Bad primer record in {path}: row {first + 1} is missing fields")

    primers = []
    errors = []

    for _, row in df.iterrows():
        try:
            direction = parse_direction(row['direction'], strict=strict_direction)
            primer = Primer(
                label=row['label'].strip(),
                sequence=row['sequence'].strip(),
                barcode=row['barcode'].strip(),
                direction=direction,
            )
            primer.check()
        except InvalidPrimerError as e:
            errors.append(str(e))
            continue
        primers.append(primer)

    for err in errors:
        logger.warning(f"Primer read error: {err}")

    table = PrimerTable(primers)
    n_fwd = sum(1 for p in table if p.direction is Direction.FORWARD)
    logger.info(
        f"Loaded {len(table)} primers ({n_fwd} forward, {len(table) - n_fwd} reverse) "
        f"from {path}, skipped {len(errors)}"
    )
    return table
