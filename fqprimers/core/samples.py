"""
Sample registry keyed by primer pair.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, NamedTuple, Optional, Set, Tuple

import pandas as pd


class PrimerPair(NamedTuple):
    """Forward and reverse primer labels identifying a sample."""
    forward: str
    reverse: str


@dataclass(frozen=True)
class SampleData:
    """A sample assigned to a primer pair."""
    name: str
    is_control: bool = False


class SamplesTable:
    """Mapping from primer pair to sample.

    Holds at most one sample per pair; inserting an existing pair replaces
    the previous sample. A pair that is absent is a valid "no sample"
    outcome, so get() returns None instead of raising.
    """

    def __init__(self):
        self._samples: Dict[PrimerPair, SampleData] = {}
        self.forward_primers: Set[str] = set()
        self.reverse_primers: Set[str] = set()

    def insert(self, primers: PrimerPair, sample: SampleData) -> 'SamplesTable':
        self.forward_primers.add(primers.forward)
        self.reverse_primers.add(primers.reverse)
        self._samples[primers] = sample
        return self

    def insert_by_names(
        self,
        forward: str,
        reverse: str,
        name: str,
        is_control: bool = False,
    ) -> 'SamplesTable':
        return self.insert(PrimerPair(forward, reverse), SampleData(name, is_control))

    def get(self, primers: Tuple[str, str]) -> Optional[SampleData]:
        """Look up the sample for a (forward, reverse) pair."""
        return self._samples.get(PrimerPair(*primers))

    def contains_sample(self, primers: Tuple[str, str]) -> bool:
        return PrimerPair(*primers) in self._samples

    def __contains__(self, primers) -> bool:
        return self.contains_sample(primers)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Tuple[PrimerPair, SampleData]]:
        return iter(self._samples.items())

    @property
    def n_controls(self) -> int:
        return sum(1 for s in self._samples.values() if s.is_control)

    def to_long_format(self) -> pd.DataFrame:
        """Return one row per primer pair with its sample."""
        rows = [
            {
                'forward': pair.forward,
                'reverse': pair.reverse,
                'sample': sample.name,
                'is_control': sample.is_control,
            }
            for pair, sample in self._samples.items()
        ]
        return pd.DataFrame(rows, columns=['forward', 'reverse', 'sample', 'is_control'])

    def __str__(self) -> str:
        return ''.join(
            f"{pair.forward}\t{pair.reverse}\t{sample.name}\n"
            for pair, sample in self._samples.items()
        )

    def __repr__(self) -> str:
        return (
            f"SamplesTable({len(self)} samples, {len(self.forward_primers)} forward, "
            f"{len(self.reverse_primers)} reverse primers)"
        )
