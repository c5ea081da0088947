"""
fqprimers - tag sequencing reads by primer pair and sample.
"""

__version__ = "0.1.0"

from .core.classifier import ClassificationResult, ClassificationStatus, ReadClassifier
from .core.primers import Direction, InvalidPrimerError, Primer, PrimerTable
from .core.samples import PrimerPair, SampleData, SamplesTable

__all__ = [
    "Direction",
    "Primer",
    "PrimerTable",
    "InvalidPrimerError",
    "PrimerPair",
    "SampleData",
    "SamplesTable",
    "ReadClassifier",
    "ClassificationResult",
    "ClassificationStatus",
    "__version__",
]
