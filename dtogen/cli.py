"""
Command-line interface for dtogen.

Single-type mode generates one DTO from flags; ``--config`` runs a batch
document; ``--init`` writes a sample batch document.
"""

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich import box

from . import __version__
from .core.config import SAMPLE_CONFIG_FILE, generate_sample, load_config
from .core.errors import ConfigError
from .core.naming import default_output_file, default_output_name
from .core.schema import TransformConfig
from .logging_config import get_logger, setup_logging
from .orchestrator import GenerationJob, GenerationResult, Orchestrator, jobs_from_config

logger = get_logger(__name__)

# Initialize rich console
console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dtogen",
        description="Generate DTO classes from existing Python classes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dtogen -s ./models -t User -e password
  dtogen -s app.models -t User -i id,username -r username:login -d ./dto
  dtogen --config dtogen.yaml --jobs 4
  dtogen --init
        """.strip(),
    )

    parser.add_argument(
        "-s", "--src", default=".", help="Source file, directory or module (default: .)"
    )
    parser.add_argument(
        "-t", "--type", dest="type_name", help="Class to generate from (single mode)"
    )
    parser.add_argument("-n", "--name", help="Output DTO class name (default: <Type>DTO)")
    parser.add_argument(
        "-o", "--out", help="Output file name (default: snake_case of the DTO name)"
    )
    parser.add_argument(
        "-d", "--dir", help="Output directory (default: beside the source)"
    )
    parser.add_argument("-e", "--exclude", default="", help="Comma-separated fields to exclude")
    parser.add_argument(
        "-i",
        "--include",
        default="",
        help="Comma-separated fields to include (overrides --exclude)",
    )
    parser.add_argument(
        "-r",
        "--replace",
        action="append",
        default=[],
        metavar="SOURCE:TARGET",
        help="Field rename, can be repeated or comma-separated",
    )
    parser.add_argument("--template", help="Path to a custom Jinja2 template")
    parser.add_argument("--config", help="Path to a YAML batch document")
    parser.add_argument(
        "--init",
        action="store_true",
        help=f"Write a sample batch document ({SAMPLE_CONFIG_FILE})",
    )
    parser.add_argument(
        "--jobs", type=int, default=1, help="Parallel workers in batch mode (default: 1)"
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print generated code instead of writing files",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging and metadata"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def split_list(value: str) -> List[str]:
    """Split a comma-separated flag value, dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_renames(values: Sequence[str]) -> Dict[str, str]:
    """Parse ``Source:Target`` pairs; malformed pairs are skipped with a warning."""
    renames = {}
    for value in values:
        for pair in split_list(value):
            parts = pair.split(":")
            if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
                logger.warning("Ignoring malformed rename %r", pair)
                continue
            renames[parts[0].strip()] = parts[1].strip()
    return renames


def job_from_args(args: argparse.Namespace) -> GenerationJob:
    """Build a single-mode job from parsed flags."""
    output_name = args.name or default_output_name(args.type_name)
    config = TransformConfig(
        output_name=output_name,
        includes=frozenset(split_list(args.include)),
        excludes=frozenset(split_list(args.exclude)),
        renames=parse_renames(args.replace),
        template=Path(args.template) if args.template else None,
    )
    return GenerationJob(
        type_name=args.type_name,
        source=args.src,
        config=config,
        output_dir=args.dir,
        output_file=args.out or default_output_file(output_name),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point.

    Returns:
        Exit code (0 for success, 1 for generation errors, 2 for usage errors)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else args.log_level
    setup_logging(level)

    if args.init:
        return _write_sample()

    orchestrator = Orchestrator(write=not args.stdout)

    if args.config:
        try:
            batch = load_config(args.config)
        except ConfigError as e:
            console.print(f"[red]✗ Error loading config:[/red] {e}")
            return 1
        results = orchestrator.run_batch(jobs_from_config(batch), max_workers=args.jobs)
    else:
        if not args.type_name:
            parser.print_usage()
            console.print("[red]✗ --type is required unless --config or --init is given[/red]")
            return 2
        results = [orchestrator.generate(job_from_args(args))]

    for result in results:
        _report(result, show_code=args.stdout, verbose=args.verbose)

    failed = [r for r in results if not r.success]
    if len(results) > 1:
        console.print(
            f"\n📊 {len(results) - len(failed)} of {len(results)} DTO(s) generated"
        )
    return 1 if failed else 0


def _write_sample() -> int:
    try:
        path = generate_sample(SAMPLE_CONFIG_FILE)
    except ConfigError as e:
        console.print(f"[red]✗ Error generating sample config:[/red] {e}")
        return 1
    console.print(f"[green]✓[/green] Generated [cyan]{path}[/cyan]")
    return 0


def _report(result: GenerationResult, show_code: bool, verbose: bool) -> None:
    """Print one result with rich formatting."""
    job = result.job
    if not result.success:
        console.print(f"[red]✗ Error generating {job.type_name}:[/red] {result.error}")
        return

    if show_code:
        console.print(Syntax(result.code, "python", theme="monokai"))
    else:
        console.print(
            f"[green]✓[/green] {job.type_name} → [cyan]{result.path}[/cyan]"
        )

    for warning in result.warnings:
        console.print(f"  [yellow]⚠️  {warning}[/yellow]")

    if verbose and result.metadata:
        table = Table(box=box.SIMPLE, show_header=True, header_style="bold cyan")
        table.add_column("Property", style="bold")
        table.add_column("Value", style="green")
        for key, value in result.metadata.items():
            table.add_row(key.replace("_", " ").title(), str(value))
        console.print(table)
