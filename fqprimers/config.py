"""
Run configuration for fqprimers.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from .io.sample_table import SAMPLE_FORMATS


# Value meaning standard input or standard output
STDIO = '-'


@dataclass
class RunConfig:
    """Configuration for a classification run."""
    primers: Path
    samples: Path
    samples_format: str = 'wide'
    input: str = STDIO
    output: str = STDIO
    strict_direction: bool = False
    report_matches: bool = False
    summary: Optional[Path] = None

    def __post_init__(self):
        self.primers = Path(self.primers)
        self.samples = Path(self.samples)
        if self.summary is not None:
            self.summary = Path(self.summary)
        if self.samples_format not in SAMPLE_FORMATS:
            raise ValueError(
                f"samples_format must be one of {', '.join(SAMPLE_FORMATS)}, got {self.samples_format!r}"
            )

    def validate(self) -> List[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not self.primers.exists():
            errors.append(f"Primers file not found: {self.primers}")

        if not self.samples.exists():
            errors.append(f"Samples file not found: {self.samples}")

        if self.input != STDIO and not Path(self.input).exists():
            errors.append(f"Input FASTQ not found: {self.input}")

        return errors

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'RunConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        for required in ('primers', 'samples'):
            if not d.get(required):
                raise ValueError(f"Configuration must set '{required}'")
        return cls(**d)

    @classmethod
    def from_yaml(cls, path: Path) -> 'RunConfig':
        """Load configuration from YAML file."""
        return cls.from_dict(load_yaml(path))


def load_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping of configuration settings."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


CONFIG_TEMPLATE = '''# fqprimers configuration template
# Edit this file and run: fqprimers classify --config <this file>

# Required: primer and sample tables
primers: primers.tsv        # label, sequence, barcode, direction (F/R)
samples: samples.tsv        # sample table

# Sample table layout: wide (primer matrix) or long (forward/reverse/sample columns)
samples_format: wide

# Reads in and annotated reads out ('-' for stdin/stdout)
input: reads.fastq.gz
output: tagged.fastq

# Reject primer direction tokens other than F and R
strict_direction: false

# Append all matched primer labels to each read description
report_matches: false

# Optional per-tag count report
# summary: summary.tsv
'''
