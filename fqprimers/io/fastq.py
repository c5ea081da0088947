"""
FASTQ reading and writing.

Records are read four lines at a time, so a damaged record is reported
on its own and never consumes the records that follow it.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, TextIO, Union
import gzip

import click

STDIN = '-'


@dataclass
class FastqRecord:
    """A single FASTQ record."""
    id: str
    seq: str
    qual: str
    desc: Optional[str] = None
    parse_errors: List[str] = field(default_factory=list, repr=False, compare=False)

    def check(self) -> List[str]:
        """Check the record structure. Returns list of problems."""
        errors = list(self.parse_errors)
        if not self.id:
            errors.append("Expecting id for FastQ record.")
        if not self.seq.isascii():
            errors.append("Non-ascii character found in sequence.")
        if len(self.seq) != len(self.qual):
            errors.append(
                f"Unequal length of sequence ({len(self.seq)}) and qualities ({len(self.qual)})."
            )
        return errors

    def is_valid(self) -> bool:
        return not self.check()

    def format(self) -> str:
        header = f"@{self.id} {self.desc}" if self.desc else f"@{self.id}"
        return f"{header}\n{self.seq}\n+\n{self.qual}\n"


def _open_fastq(path: str) -> TextIO:
    # Undecodable bytes become U+FFFD so check() reports them per record
    if path == STDIN:
        return click.open_file(path, 'r', encoding='utf-8', errors='replace')
    opener = gzip.open if path.endswith('.gz') else open
    return opener(path, 'rt', encoding='utf-8', errors='replace')


def _parse_record(header: str, seq: str, sep: str, qual: str) -> FastqRecord:
    errors = []
    if not header.startswith('@'):
        errors.append(f"Expected '@' at start of record, found {header[:20]!r}.")
    if not sep.startswith('+'):
        errors.append(f"Expected '+' separator line, found {sep[:20]!r}.")

    fields = header[1:].split(None, 1) if header.startswith('@') else []
    name = fields[0] if fields else ''
    desc = fields[1] if len(fields) > 1 else None

    return FastqRecord(id=name, seq=seq, qual=qual, desc=desc, parse_errors=errors)


def read_fastq(path: Union[str, Path]) -> Iterator[FastqRecord]:
    """
    Iterate over the records of a FASTQ file.

    Every record is exactly four lines. Structural problems are attached
    to the record and surface through FastqRecord.check(); a file cut
    short yields a final record with missing lines left empty.

    Args:
        path: FASTQ path (gzipped if it ends in .gz), or '-' for standard input

    Yields:
        FastqRecord
    """
    with _open_fastq(str(path)) as f:
        while True:
            header = f.readline()
            if not header:
                break
            header = header.rstrip('\r\n')
            if not header.strip():
                continue
            seq = f.readline().rstrip('\r\n')
            sep = f.readline().rstrip('\r\n')
            qual = f.readline().rstrip('\r\n')
            yield _parse_record(header, seq, sep, qual)


class FastqWriter:
    """Write FASTQ records to an open text handle."""

    def __init__(self, handle: TextIO):
        self.handle = handle
        self.records_written = 0

    def write_record(self, record: FastqRecord):
        self.handle.write(record.format())
        self.records_written += 1

    def flush(self):
        self.handle.flush()
