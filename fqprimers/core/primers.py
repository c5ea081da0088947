"""
Primer representation and exact-match search.

A Primer carries its sequence, the reverse complement of that sequence and a
searcher for each orientation, so a primer table can be built once
and queried against any number of reads.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List

from ..utils.sequence import is_valid_dna, reverse_complement


# Appended to a primer label to name its reverse complement
RC_SUFFIX = 'rc'


class InvalidPrimerError(ValueError):
    """Raised when a primer fails label or alphabet validation."""


class Direction(Enum):
    """Reading direction of a primer."""
    FORWARD = 'F'
    REVERSE = 'R'

    def opposite(self) -> 'Direction':
        if self is Direction.FORWARD:
            return Direction.REVERSE
        return Direction.FORWARD


class ExactSearcher:
    """Exact, case-sensitive searcher for a single pattern.

    Built once per primer orientation and reused for any number of queries.
    Substring search runs in time linear in the text and pattern lengths.
    """

    __slots__ = ('_pattern',)

    def __init__(self, pattern: str):
        self._pattern = pattern

    @property
    def pattern(self) -> str:
        return self._pattern

    def is_found_in(self, text: str) -> bool:
        """Return True if the pattern occurs in text."""
        if not self._pattern or not text:
            return False
        return self._pattern in text

    def __repr__(self) -> str:
        return f"ExactSearcher({self._pattern!r})"


@dataclass(frozen=True)
class Primer:
    """
    A single primer.

    Construction always succeeds; call check() before trusting the primer.

    Attributes:
        label: Primer identifier, unique within a primer table
        sequence: Primer sequence
        barcode: Barcode carried with the primer, not interpreted here
        direction: End of the read this primer is expected to anchor
        label_rc: Label reported for reverse-complement matches
        sequence_rc: Reverse complement of sequence
    """
    label: str
    sequence: str
    barcode: str
    direction: Direction

    label_rc: str = field(init=False)
    sequence_rc: str = field(init=False)
    searcher: ExactSearcher = field(init=False, repr=False, compare=False)
    searcher_rc: ExactSearcher = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        sequence_rc = reverse_complement(self.sequence)
        object.__setattr__(self, 'label_rc', f"{self.label}{RC_SUFFIX}")
        object.__setattr__(self, 'sequence_rc', sequence_rc)
        object.__setattr__(self, 'searcher', ExactSearcher(self.sequence))
        object.__setattr__(self, 'searcher_rc', ExactSearcher(sequence_rc))

    def check(self) -> None:
        """Validate the primer.

        Raises:
            InvalidPrimerError: If the label is empty or the sequence is
                empty or contains symbols outside the DNA alphabet.
        """
        if not self.label:
            raise InvalidPrimerError("Empty primer label.")
        if not self.sequence or not is_valid_dna(self.sequence):
            raise InvalidPrimerError(f"Invalid DNA sequence for primer {self.label}: {self.sequence!r}")

    def is_valid(self) -> bool:
        try:
            self.check()
        except InvalidPrimerError:
            return False
        return True

    def is_found_in(self, seq: str) -> bool:
        """Search in seq for the primer sequence."""
        return self.searcher.is_found_in(seq)

    def is_found_in_rc(self, seq: str) -> bool:
        """Search in seq for the reverse complement of the primer sequence."""
        return self.searcher_rc.is_found_in(seq)


class PrimerTable:
    """Ordered, read-only collection of primers.

    Built once per run and shared by every classification call.
    """

    def __init__(self, primers=()):
        self._primers = tuple(primers)

    def __iter__(self) -> Iterator[Primer]:
        return iter(self._primers)

    def __len__(self) -> int:
        return len(self._primers)

    def __getitem__(self, index: int) -> Primer:
        return self._primers[index]

    def __repr__(self) -> str:
        return f"PrimerTable({len(self._primers)} primers)"

    def labels(self) -> List[str]:
        return [p.label for p in self._primers]
