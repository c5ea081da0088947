"""
Core classification modules for fqprimers.
"""

from .classifier import (
    INVALID_TAG,
    ClassificationResult,
    ClassificationStatus,
    PrimerHit,
    ReadClassifier,
    decide,
)
from .primers import (
    Direction,
    ExactSearcher,
    InvalidPrimerError,
    Primer,
    PrimerTable,
)
from .samples import (
    PrimerPair,
    SampleData,
    SamplesTable,
)

__all__ = [
    # Primers
    'Direction',
    'ExactSearcher',
    'InvalidPrimerError',
    'Primer',
    'PrimerTable',
    # Samples
    'PrimerPair',
    'SampleData',
    'SamplesTable',
    # Classification
    'INVALID_TAG',
    'ClassificationStatus',
    'ClassificationResult',
    'PrimerHit',
    'ReadClassifier',
    'decide',
]
