"""
Command-line interface for fqprimers.
"""

import logging
import sys
from pathlib import Path

import click
import yaml

from . import __version__
from .config import CONFIG_TEMPLATE, RunConfig, load_yaml
from .io.sample_table import SAMPLE_FORMATS


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


@click.group()
@click.version_option(version=__version__)
def cli():
    """fqprimers: tag FASTQ reads by primer pair and sample."""
    pass


@cli.command()
@click.option('--primers', '-p', type=click.Path(exists=True),
              help='Primer TSV: label, sequence, barcode, direction (F/R)')
@click.option('--samples', '-s', type=click.Path(exists=True),
              help='Sample table (forward primers x reverse primers)')
@click.option('--samples-format', type=click.Choice(SAMPLE_FORMATS), default=None,
              help='Sample table layout (default: wide)')
@click.option('--input', '-i', 'input_', type=click.Path(allow_dash=True), default=None,
              help="Input FASTQ, optionally gzipped (default: '-' for stdin)")
@click.option('--output', '-o', type=click.Path(allow_dash=True), default=None,
              help="Output FASTQ (default: '-' for stdout)")
@click.option('--strict-direction/--lenient-direction', default=None,
              help='Reject primer directions other than F and R (default: lenient)')
@click.option('--report-matches/--no-report-matches', default=None,
              help='Append all matched primer labels to each read description')
@click.option('--summary', type=click.Path(), default=None,
              help='Write per-tag read counts to this TSV')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
              help='YAML configuration file; command-line options override it')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def classify(primers, samples, samples_format, input_, output, strict_direction,
             report_matches, summary, config_path, verbose):
    """
    Tag each read with the primer pair found in it.

    Every read is written with a description of 'primers:<F>-<R>' (plus
    'sample:<name>' when the pair is in the sample table), or
    'primers:invalid' when no unique forward/reverse pair is found.
    Malformed records are skipped.

    \b
    Example:
      fqprimers classify -p primers.tsv -s samples.tsv -i reads.fastq.gz -o tagged.fastq
    """
    from .io.primer_table import PrimerTableError
    from .io.sample_table import SampleTableError
    from .pipeline import ClassificationPipeline

    _setup_logging(verbose)

    settings = {}
    if config_path:
        try:
            settings = load_yaml(Path(config_path))
        except (yaml.YAMLError, ValueError) as e:
            click.echo(f"Error reading config: {e}", err=True)
            sys.exit(1)

    overrides = {
        'primers': primers,
        'samples': samples,
        'samples_format': samples_format,
        'input': input_,
        'output': output,
        'strict_direction': strict_direction,
        'report_matches': report_matches,
        'summary': summary,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = RunConfig.from_dict(settings)
    except (TypeError, ValueError) as e:
        click.echo(f"Error in configuration: {e}", err=True)
        sys.exit(1)

    errors = config.validate()
    if errors:
        for err in errors:
            click.echo(f"Error: {err}", err=True)
        sys.exit(1)

    try:
        pipeline = ClassificationPipeline(config)
    except (PrimerTableError, SampleTableError, OSError) as e:
        click.echo(f"Error loading tables: {e}", err=True)
        sys.exit(1)

    result = pipeline.run()

    click.echo(str(result), err=True)


@cli.command('check-primers')
@click.argument('primers', type=click.Path(exists=True))
@click.option('--strict-direction', is_flag=True,
              help='Reject primer directions other than F and R')
def check_primers(primers, strict_direction):
    """Validate a primer table and list the primers that would be used."""
    from .io.primer_table import PrimerTableError, read_primer_table

    _setup_logging(False)

    try:
        table = read_primer_table(Path(primers), strict_direction=strict_direction)
    except (PrimerTableError, OSError) as e:
        click.echo(f"Error loading primers: {e}", err=True)
        sys.exit(1)

    for p in table:
        click.echo(f"{p.label}\t{p.direction.value}\t{p.sequence}\t{p.sequence_rc}")

    click.echo(f"{len(table)} valid primers", err=True)


@cli.command()
@click.argument('samples', type=click.Path(exists=True))
@click.option('--samples-format', type=click.Choice(SAMPLE_FORMATS), default='wide',
              help='Sample table layout (default: wide)')
def samples(samples, samples_format):
    """Print a sample table as forward, reverse, sample rows."""
    from .io.sample_table import SampleTableError, read_sample_table

    _setup_logging(False)

    try:
        table = read_sample_table(Path(samples), samples_format)
    except (SampleTableError, OSError) as e:
        click.echo(f"Error loading samples: {e}", err=True)
        sys.exit(1)

    click.echo(str(table), nl=False)


@cli.command()
@click.option('--output', '-o', type=click.Path(), default='fqprimers.yaml',
              help='Output config file path')
def init(output):
    """Generate a template configuration file."""
    with open(output, 'w') as f:
        f.write(CONFIG_TEMPLATE)

    click.echo(f"Generated configuration template: {output}")
    click.echo("\nEdit this file and run:")
    click.echo(f"  fqprimers classify --config {output}")


if __name__ == '__main__':
    cli()
