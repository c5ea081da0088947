"""
Sequence manipulation utilities.

Provides the DNA alphabet check and reverse complement used by primers.
"""

import re


# Symbols accepted in a primer sequence
DNA_PATTERN = re.compile(r'[ACGTacgt]*')

# Symbols missing from the table are left unchanged
_COMPLEMENT = str.maketrans('ACGTNacgtn', 'TGCANtgcan')


def is_valid_dna(seq: str) -> bool:
    """Return True if every symbol in seq belongs to the DNA alphabet.

    The empty sequence is a valid word; callers that need a non-empty
    sequence check its length themselves.
    """
    return DNA_PATTERN.fullmatch(seq) is not None


def reverse_complement(seq: str) -> str:
    """Return reverse complement of DNA sequence.

    Case is preserved. Symbols outside the complement table pass through
    unchanged, which keeps the function an involution on any input.
    """
    return seq.translate(_COMPLEMENT)[::-1]
