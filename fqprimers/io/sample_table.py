"""
Sample table parsing.

Two layouts are supported:

wide:
    Reverse primers across the first row (the row starts with whitespace),
    forward primers down the first column, sample names in the cells.

        \toVK010\toVK020
        oVK001\tsample_1\tsample_2
        oVK002\tsample_3\tsample_4

long:
    TSV with a header and one row per sample; required columns are
    forward, reverse and sample, with an optional is_control column.
"""

from pathlib import Path
from typing import Iterator, Union
import logging

import pandas as pd

from ..core.samples import PrimerPair, SampleData, SamplesTable

logger = logging.getLogger(__name__)

SAMPLE_FORMATS = ('wide', 'long')
LONG_COLUMNS = ('forward', 'reverse', 'sample')
TRUE_VALUES = {'true', 'yes', 'y', '1'}


class SampleTableError(ValueError):
    """Raised when a sample table is structurally invalid."""


def _content_lines(handle) -> Iterator[str]:
    """Yield lines that are neither blank nor comments."""
    for line in handle:
        line = line.rstrip('\r\n')
        if not line.strip():
            continue
        if line.lstrip().startswith('#'):
            continue
        yield line


def read_wide_table(path: Union[str, Path]) -> SamplesTable:
    """
    Load a sample table in wide layout.

    Args:
        path: Path to sample table

    Returns:
        SamplesTable

    Raises:
        SampleTableError: If the file has no content, the header line does
            not start with whitespace, or a row has more cells than there
            are reverse primers
    """
    table = SamplesTable()

    # Split on any run of whitespace and allow ragged rows; neither fits
    # a rectangular read_csv frame, so this layout is parsed line by line.
    with open(path) as f:
        lines = _content_lines(f)

        header = next(lines, None)
        if header is None:
            raise SampleTableError("File must contain at least one line.")
        if not header.startswith((' ', '\t')):
            raise SampleTableError("First line must begin with whitespace.")
        rev_primers = header.split()

        for line in lines:
            elements = line.split()
            fwd_primer, samples = elements[0], elements[1:]
            if len(samples) > len(rev_primers):
                raise SampleTableError(
                    f"Row for {fwd_primer} has {len(samples)} samples "
                    f"but only {len(rev_primers)} reverse primers"
                )
            for rev_primer, sample in zip(rev_primers, samples):
                table.insert(PrimerPair(fwd_primer, rev_primer), SampleData(sample))

    logger.info(f"Loaded {len(table)} samples from {path}")
    return table


def read_long_table(path: Union[str, Path]) -> SamplesTable:
    """
    Load a sample table in long layout.

    Args:
        path: Path to sample TSV

    Returns:
        SamplesTable

    Raises:
        SampleTableError: If the file is empty or required columns are missing
    """
    try:
        df = pd.read_csv(path, sep='\t', dtype=str, keep_default_na=False, comment='#')
    except pd.errors.EmptyDataError as e:
        raise SampleTableError("File must contain at least one line.") from e
    except pd.errors.ParserError as e:
        raise SampleTableError(f"Bad sample record in {path}: {e}") from e

    missing = [c for c in LONG_COLUMNS if c not in df.columns]
    if missing:
        raise SampleTableError(f"Sample table missing columns: {', '.join(missing)}")

    df = df.fillna('')
    table = SamplesTable()
    for _, row in df.iterrows():
        is_control = str(row.get('is_control', '')).strip().lower() in TRUE_VALUES
        pair = PrimerPair(row['forward'].strip(), row['reverse'].strip())
        if not all([pair.forward, pair.reverse, row['sample'].strip()]):
            logger.warning(f"Skipping incomplete sample row: {pair.forward}\t{pair.reverse}\t{row['sample']}")
            continue
        if pair in table:
            logger.warning(f"Duplicate primer pair {pair.forward}-{pair.reverse}, keeping last sample")
        table.insert(pair, SampleData(row['sample'].strip(), is_control))

    logger.info(f"Loaded {len(table)} samples ({table.n_controls} controls) from {path}")
    return table


def read_sample_table(path: Union[str, Path], fmt: str = 'wide') -> SamplesTable:
    """Load a sample table in the given layout ('wide' or 'long')."""
    if fmt == 'wide':
        return read_wide_table(path)
    if fmt == 'long':
        return read_long_table(path)
    raise ValueError(f"Unknown sample table format: {fmt} (expected one of {', '.join(SAMPLE_FORMATS)})")
