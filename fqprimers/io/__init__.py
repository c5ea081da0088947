"""
I/O modules for fqprimers.
"""

from .fastq import (
    FastqRecord,
    FastqWriter,
    read_fastq,
)
from .primer_table import (
    PrimerTableError,
    parse_direction,
    read_primer_table,
)
from .sample_table import (
    SAMPLE_FORMATS,
    SampleTableError,
    read_long_table,
    read_sample_table,
    read_wide_table,
)

__all__ = [
    'FastqRecord',
    'FastqWriter',
    'read_fastq',
    'PrimerTableError',
    'parse_direction',
    'read_primer_table',
    'SAMPLE_FORMATS',
    'SampleTableError',
    'read_wide_table',
    'read_long_table',
    'read_sample_table',
]
