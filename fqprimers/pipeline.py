"""
Single-pass classification of a FASTQ stream.

Reads are pulled one at a time, classified, annotated and written before
the next read is read. Malformed reads are skipped; reads without a unique
primer pair are still written, tagged with the invalid sentinel.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable
import logging

import click
import pandas as pd

from .config import RunConfig
from .core.classifier import ClassificationResult, ClassificationStatus, ReadClassifier
from .io.fastq import FastqRecord, FastqWriter, read_fastq
from .io.primer_table import read_primer_table
from .io.sample_table import read_sample_table

logger = logging.getLogger(__name__)


@dataclass
class ClassificationSummary:
    """Counts for a classification run."""
    records_read: int = 0
    malformed: int = 0
    matched: int = 0
    ambiguous: int = 0
    unmatched: int = 0
    with_sample: int = 0
    without_sample: int = 0
    tag_counts: Counter = field(default_factory=Counter)
    sample_counts: Counter = field(default_factory=Counter)

    @property
    def errors(self) -> int:
        """Malformed, ambiguous and unmatched reads together."""
        return self.malformed + self.ambiguous + self.unmatched

    @property
    def classified(self) -> int:
        return self.records_read - self.malformed

    @property
    def match_rate(self) -> float:
        return self.matched / self.classified if self.classified > 0 else 0

    def add(self, result: ClassificationResult):
        """Count one classified read."""
        if result.status is ClassificationStatus.MATCHED:
            self.matched += 1
            if result.sample is not None:
                self.with_sample += 1
                self.sample_counts[result.sample.name] += 1
            else:
                self.without_sample += 1
        elif result.status is ClassificationStatus.AMBIGUOUS:
            self.ambiguous += 1
        else:
            self.unmatched += 1
        self.tag_counts[result.tag] += 1

    def to_dataframe(self) -> pd.DataFrame:
        """Per-tag read counts, most frequent first."""
        rows = [{'tag': tag, 'reads': n} for tag, n in self.tag_counts.most_common()]
        return pd.DataFrame(rows, columns=['tag', 'reads'])

    def write_summary_tsv(self, path: Path):
        self.to_dataframe().to_csv(path, sep='\t', index=False)
        logger.info(f"Wrote tag summary to {path}")

    def __str__(self) -> str:
        return f"records read: {self.records_read}\nerrors: {self.errors}"


def annotate(record: FastqRecord, result: ClassificationResult, report_matches: bool = False) -> FastqRecord:
    """Return a copy of record whose description carries the classification."""
    parts = [result.tag]
    if result.sample is not None:
        parts.append(f"sample:{result.sample.name}")
    if report_matches:
        parts.append(f"matches:{result.match_string}")
    return FastqRecord(id=record.id, seq=record.seq, qual=record.qual, desc=' '.join(parts))


def classify_stream(
    records: Iterable[FastqRecord],
    classifier: ReadClassifier,
    writer: FastqWriter,
    report_matches: bool = False,
) -> ClassificationSummary:
    """
    Classify and write every record of a read stream.

    Args:
        records: FASTQ records
        classifier: ReadClassifier over the run's primer table
        writer: Destination for annotated records
        report_matches: Append all matched primer labels to each description

    Returns:
        ClassificationSummary for the run
    """
    summary = ClassificationSummary()

    for record in records:
        summary.records_read += 1

        problems = record.check()
        if problems:
            summary.malformed += 1
            logger.debug(f"Skipping malformed record {record.id!r}: {'; '.join(problems)}")
            continue

        result = classifier.classify(record.seq)
        summary.add(result)

        if result.is_valid and result.sample is None:
            logger.debug(f"No sample for {result.tag} ({record.id})")

        writer.write_record(annotate(record, result, report_matches))

    return summary


class ClassificationPipeline:
    """Load primer and sample tables, then classify a FASTQ stream."""

    def __init__(self, config: RunConfig):
        self.config = config

        self.primers = read_primer_table(config.primers, strict_direction=config.strict_direction)
        if len(self.primers) == 0:
            logger.warning("Primer table is empty; every read will be tagged invalid")

        self.samples = read_sample_table(config.samples, config.samples_format)
        self._check_sample_primers()

        self.classifier = ReadClassifier(self.primers, self.samples)

    def _check_sample_primers(self):
        """Warn about sample table primers missing from the primer table."""
        known = set(self.primers.labels())
        unknown = (self.samples.forward_primers | self.samples.reverse_primers) - known
        if unknown:
            listed = ', '.join(sorted(unknown)[:10])
            logger.warning(
                f"{len(unknown)} primers in sample table not in primer table: "
                f"{listed}{'...' if len(unknown) > 10 else ''}"
            )

    def run(self) -> ClassificationSummary:
        """Run classification from config.input to config.output."""
        logger.info(f"Classifying reads from {self.config.input}")

        with click.open_file(self.config.output, 'w') as out:
            writer = FastqWriter(out)
            summary = classify_stream(
                read_fastq(self.config.input),
                self.classifier,
                writer,
                report_matches=self.config.report_matches,
            )
            writer.flush()

        logger.info(
            f"Matched {summary.matched}/{summary.classified} reads "
            f"({summary.match_rate:.1%}), {summary.with_sample} assigned to samples"
        )

        if self.config.summary:
            summary.write_summary_tsv(self.config.summary)

        return summary
