"""
Primer-pair classification of reads.

Each read is scanned for every primer in both orientations. Hits are split
by the primer's declared direction and the read is assigned:
- Matched: exactly one forward and exactly one reverse primer
- Ambiguous: more than one candidate on an end, none missing
- Unmatched: no candidate on at least one end
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set

from .primers import Direction, Primer, PrimerTable
from .samples import PrimerPair, SampleData, SamplesTable


TAG_PREFIX = 'primers:'
INVALID_TAG = 'primers:invalid'
MATCH_SEPARATOR = ':'


class ClassificationStatus(Enum):
    """Outcome of classifying one read."""
    MATCHED = 'matched'
    AMBIGUOUS = 'ambiguous'
    UNMATCHED = 'unmatched'


@dataclass(frozen=True)
class PrimerHit:
    """A primer found in a read, in one or both orientations."""
    primer: Primer
    forward_strand: bool
    reverse_strand: bool

    @property
    def direction(self) -> Direction:
        return self.primer.direction

    @property
    def labels(self) -> List[str]:
        """Labels of the orientations that matched."""
        labels = []
        if self.forward_strand:
            labels.append(self.primer.label)
        if self.reverse_strand:
            labels.append(self.primer.label_rc)
        return labels


@dataclass
class ClassificationResult:
    """Result of classifying one read."""
    status: ClassificationStatus
    forward_candidates: List[Primer] = field(default_factory=list)
    reverse_candidates: List[Primer] = field(default_factory=list)
    hits: List[PrimerHit] = field(default_factory=list)
    sample: Optional[SampleData] = None

    @property
    def is_valid(self) -> bool:
        return self.status is ClassificationStatus.MATCHED

    @property
    def primer_pair(self) -> Optional[PrimerPair]:
        if not self.is_valid:
            return None
        return PrimerPair(self.forward_candidates[0].label, self.reverse_candidates[0].label)

    @property
    def tag(self) -> str:
        """Primer-pair tag, or the invalid sentinel."""
        pair = self.primer_pair
        if pair is None:
            return INVALID_TAG
        return f"{TAG_PREFIX}{pair.forward}-{pair.reverse}"

    @property
    def matched_labels(self) -> Set[str]:
        """Every primer and reverse-complement label found in the read."""
        return {label for hit in self.hits for label in hit.labels}

    @property
    def match_string(self) -> str:
        """Matched labels joined for diagnostic annotation; order is not defined."""
        return MATCH_SEPARATOR.join(label for hit in self.hits for label in hit.labels)


def decide(n_forward: int, n_reverse: int) -> ClassificationStatus:
    """Apply the tie-break policy to candidate counts."""
    if n_forward == 1 and n_reverse == 1:
        return ClassificationStatus.MATCHED
    if n_forward == 0 or n_reverse == 0:
        return ClassificationStatus.UNMATCHED
    return ClassificationStatus.AMBIGUOUS


class ReadClassifier:
    """Classify reads against a primer table.

    The classifier holds no per-read state, so one instance can be shared
    across any number of reads (and threads).
    """

    def __init__(self, primers: PrimerTable, samples: Optional[SamplesTable] = None):
        self.primers = primers
        self.samples = samples

    def scan(self, sequence: str) -> List[PrimerHit]:
        """Return every primer found in sequence, in primer table order."""
        hits = []
        for primer in self.primers:
            fwd = primer.is_found_in(sequence)
            rev = primer.is_found_in_rc(sequence)
            if fwd or rev:
                hits.append(PrimerHit(primer, fwd, rev))
        return hits

    def classify(self, sequence: str) -> ClassificationResult:
        """
        Classify a read sequence.

        Hits are partitioned by the primer's declared direction, not by
        the orientation in which the primer was found.

        Args:
            sequence: Read sequence

        Returns:
            ClassificationResult; sample is set when the matched primer pair
            is present in the sample registry
        """
        hits = self.scan(sequence)
        forward = [h.primer for h in hits if h.direction is Direction.FORWARD]
        reverse = [h.primer for h in hits if h.direction is Direction.REVERSE]

        result = ClassificationResult(
            status=decide(len(forward), len(reverse)),
            forward_candidates=forward,
            reverse_candidates=reverse,
            hits=hits,
        )
        result.sample = self.resolve_sample(result)
        return result

    def resolve_sample(self, result: ClassificationResult) -> Optional[SampleData]:
        """Look up the sample for a matched result; None when there is none."""
        pair = result.primer_pair
        if pair is None or self.samples is None:
            return None
        return self.samples.get(pair)
