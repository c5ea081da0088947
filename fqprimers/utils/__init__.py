"""
Utility modules for fqprimers.
"""

from .sequence import (
    is_valid_dna,
    reverse_complement,
)

__all__ = [
    'is_valid_dna',
    'reverse_complement',
]
