"""
Utility CLI commands.

  bed-to-interval-list - Convert BED to interval list
  compare-metrics      - Compare two metrics files
  targets              - Load bait/target interval lists
"""

import click
from pathlib import Path
from typing import Optional

from intervaltools.cli.utils import (
    echo_success,
    echo_error,
    echo_info,
    echo_warning,
    format_number,
)
from intervaltools.cli.main import AliasedGroup


@click.group(cls=AliasedGroup)
@click.pass_context
def util(ctx: click.Context) -> None:
    """
    Interval list utilities.

    \b
    Available commands:
      bed-to-interval-list - Convert a BED file to an interval list
      compare-metrics      - Compare two metrics files
      targets              - Summarize bait/target interval lists
    """
    pass


@util.command("bed-to-interval-list")
@click.option(
    "-i", "--input",
    required=True,
    type=click.Path(path_type=Path),
    help="Input BED file.",
)
@click.option(
    "-d", "--sequence-dictionary", "--sequence_dictionary", "sequence_dictionary",
    required=True,
    type=click.Path(path_type=Path),
    help="Sequence dictionary (.dict, .fai, FASTA, SAM/BAM/CRAM, VCF or interval list).",
)
@click.option(
    "-o", "--output",
    required=True,
    type=click.Path(path_type=Path),
    help="Output interval list.",
)
@click.option(
    "--sort",
    type=click.BOOL,
    default=True,
    show_default=True,
    help="Sort the output by dictionary order, start, end (true/false).",
)
@click.option(
    "--unique",
    type=click.BOOL,
    default=True,
    show_default=True,
    help="Merge overlapping or abutting intervals; implies --sort (true/false).",
)
@click.option(
    "--name-merge", "--name_merge", "name_merge",
    type=click.Choice(["concatenate", "first", "drop"]),
    default="concatenate",
    help="Names of merged intervals: join distinct names with '|', keep the first, or drop (default: concatenate).",
)
@click.option(
    "--same-strand/--any-strand",
    default=False,
    help="Only merge intervals on the same strand (default: any strand, first strand kept).",
)
@click.pass_context
def bed_to_interval_list(
    ctx: click.Context,
    input: Path,
    sequence_dictionary: Path,
    output: Path,
    sort: bool,
    unique: bool,
    name_merge: str,
    same_strand: bool,
) -> None:
    """
    Convert a BED file to an interval list.

    BED starts are 0-based and ends exclusive; interval lists are 1-based
    and end-inclusive, so 'chr1 0 100' becomes 'chr1 1 100'. Every record
    is checked against the sequence dictionary; the first invalid record
    aborts the run and no output is written.

    \b
    Example:
      intervaltools util bed-to-interval-list -i baits.bed -d ref.dict -o baits.interval_list
    """
    from intervaltools.core.models import MergePolicy, NameMerge
    from intervaltools.util.bed_to_interval_list import run_bed_to_interval_list

    verbose = ctx.obj.get("verbose", False)

    if unique and not sort:
        echo_warning("--unique true implies --sort true; output will be sorted")

    echo_info(f"Converting {input} using dictionary {sequence_dictionary}")

    result = run_bed_to_interval_list(
        input_path=input,
        dictionary_path=sequence_dictionary,
        output_path=output,
        sort=sort,
        unique=unique,
        policy=MergePolicy(names=NameMerge(name_merge), same_strand=same_strand),
        verbose=verbose,
    )

    if result.is_err():
        echo_error(f"Conversion failed: {result.unwrap_err()}")
        raise SystemExit(1)

    stats = result.unwrap()
    echo_success(
        f"Wrote {format_number(stats['output_intervals'])} intervals "
        f"({format_number(stats['input_records'])} BED records) to {output}"
    )


@util.command("compare-metrics")
@click.argument("metrics_a", type=click.Path(path_type=Path))
@click.argument("metrics_b", type=click.Path(path_type=Path))
@click.pass_context
def compare_metrics(ctx: click.Context, metrics_a: Path, metrics_b: Path) -> None:
    """
    Compare two metrics files.

    Metric rows and histograms must match exactly; header lines are
    ignored. Prints EQUAL or NOT EQUAL.
    """
    from intervaltools.util.compare_metrics import run_compare_metrics

    verbose = ctx.obj.get("verbose", False)

    result = run_compare_metrics(metrics_a, metrics_b, verbose=verbose)
    if result.is_err():
        echo_error(f"Comparison failed: {result.unwrap_err()}")
        raise SystemExit(1)

    stats = result.unwrap()
    click.echo(f"Files {metrics_a} and {metrics_b} are {stats['status']}")


@util.command()
@click.option(
    "-b", "--bait-intervals", "--bait_intervals", "bait_intervals",
    required=True,
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Bait (or amplicon) interval list; may be given more than once.",
)
@click.option(
    "-t", "--target-intervals", "--target_intervals", "target_intervals",
    required=True,
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Target interval list; may be given more than once.",
)
@click.option(
    "-n", "--name",
    type=str,
    default=None,
    help="Bait set name (default: inferred from bait file names).",
)
@click.option(
    "--assay",
    type=click.Choice(["hybrid-selection", "targeted-pcr"]),
    default="hybrid-selection",
    help="Assay type (default: hybrid-selection).",
)
@click.pass_context
def targets(
    ctx: click.Context,
    bait_intervals: tuple,
    target_intervals: tuple,
    name: Optional[str],
    assay: str,
) -> None:
    """
    Load bait and target interval lists and report their territory.

    When no name is given the bait set name is built from the bait file
    names without their extension, sorted and joined with '.'.
    """
    from intervaltools.util.targets import AssayKind, run_targets

    verbose = ctx.obj.get("verbose", False)

    result = run_targets(
        probe_paths=list(bait_intervals),
        target_paths=list(target_intervals),
        kind=AssayKind(assay),
        name=name,
        verbose=verbose,
    )
    if result.is_err():
        echo_error(f"Loading intervals failed: {result.unwrap_err()}")
        raise SystemExit(1)

    summary = result.unwrap()
    echo_success(f"Probe set: {summary['probe_set_name']} ({summary['assay']})")
    echo_info(
        f"Probes: {format_number(summary['probe_intervals'])} intervals, "
        f"{format_number(summary['probe_territory'])} bp"
    )
    echo_info(
        f"Targets: {format_number(summary['target_intervals'])} intervals, "
        f"{format_number(summary['target_territory'])} bp"
    )
