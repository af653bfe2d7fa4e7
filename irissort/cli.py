"""
Command-line interface for irissort.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Config, SortConfig
from .constants import PROGRAM, get_console, get_logger
from .core import MediaSorter
from .exceptions import PreconditionError


def setup_logging(verbose: bool = False) -> None:
    """Send program log records to the shared rich console."""
    console_handler = RichHandler(console=get_console(), rich_tracebacks=True, show_path=False)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(message)s"))

    logger = get_logger()
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(console_handler)
    logger.setLevel(logging.DEBUG)


def create_parser(config: Config) -> argparse.ArgumentParser:
    """Create argument parser with dynamic defaults from config."""
    config_inputs = config.get_input_paths() or config.get_last_inputs()
    config_output = config.get_output_path() or config.get_last_output()
    timezone = config.get_timezone()

    input_help = "Input directories containing media to organize"
    output_help = "Output directory for organized media"
    timezone_help = "Timezone for video creation times stored in UTC"
    if config_inputs:
        input_help += f" (default: {', '.join(config_inputs)})"
    if config_output:
        output_help += f" (default: {config_output})"
    timezone_help += f" (default: {timezone or 'UTC'})"

    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Sort photos and videos into {year}-{quarter} folders by creation time",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} ~/Camera -o ~/Pictures/Sorted
  {PROGRAM} -i ~/Camera -i ~/Signal -o ~/Pictures/Sorted --copy
  {PROGRAM} --remove-duplicates
        """
    )

    parser.add_argument(
        "inputs", nargs="*", metavar="INPUT",
        help=input_help
    )
    parser.add_argument(
        "--input", "-i", dest="input_overrides", action="append", metavar="INPUT",
        help="Additional input directory (repeatable)"
    )
    parser.add_argument(
        "--output", "-o", metavar="OUTPUT",
        help=output_help
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--copy", "-c", dest="move_files", action="store_const", const=False,
        help="Copy files and keep the sources"
    )
    mode.add_argument(
        "--move", "-m", dest="move_files", action="store_const", const=True,
        help="Remove sources after a successful copy (default)"
    )
    parser.add_argument(
        "--remove-duplicates", "-r", action="store_true", default=None,
        help="Remove sources that already exist in the output"
    )
    parser.add_argument(
        "--timezone", "--tz", metavar="TIMEZONE",
        help=timezone_help
    )
    parser.add_argument(
        "--config", metavar="PATH",
        help=f"Configuration file (default: ~/.{PROGRAM}/config.yml)"
    )
    parser.add_argument(
        "--yes", "-y", action="store_true",
        help="Auto-confirm processing for last used input/output paths"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def show_processing_plan(config: SortConfig, console: Console) -> None:
    """Display the processing plan before execution."""
    mode = "MOVE" if config.move_files else "COPY"

    console.print("\n[bold]Processing Plan:[/bold]")
    for input_path in config.input_paths:
        console.print(f"  Input:             [blue]{input_path}[/blue]")
    console.print(f"  Output:            [blue]{config.output_path}[/blue]")
    console.print(f"  Processing Mode:   [cyan]{mode}[/cyan]")
    console.print(f"  Remove Duplicates: [cyan]{'Yes' if config.remove_duplicates else 'No'}[/cyan]")
    console.print(f"  Timezone:          [cyan]{config.timezone or 'UTC'}[/cyan]")
    console.print()


def confirm_processing(console: Console) -> bool:
    """Ask for confirmation when using last used paths."""
    console.print("[yellow]Confirm processing plan with last used paths.[/yellow]")

    try:
        response = console.input("Continue? [y/N]: ").strip().lower()
        return response in ['y', 'yes']
    except (EOFError, KeyboardInterrupt):
        console.print("\n[red]Operation cancelled[/red]")
        return False


def _config_path_from_argv() -> Optional[str]:
    # --config must be known before the full parser is built
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config")
    known, _ = pre_parser.parse_known_args()
    return known.config


def main(config_path: Optional[Path] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
    """
    config = Config(config_path=_config_path_from_argv() or config_path)
    parser = create_parser(config)
    args = parser.parse_args()

    if args.version:
        from . import __version__, __copyright__
        if args.verbose:
            print(f"{PROGRAM} version {__version__} {__copyright__}")
            print(f"Config:  {config.config_path}")
            return 0
        print(__version__)
        return 0

    setup_logging(args.verbose)

    explicit_inputs = list(args.inputs) + list(args.input_overrides or [])
    using_saved_paths = not (explicit_inputs or config.get_input_paths()) or \
        not (args.output or config.get_output_path())

    try:
        sort_config = SortConfig.from_sources(
            config,
            input_paths=explicit_inputs,
            output_path=args.output,
            move_files=args.move_files,
            remove_duplicates=args.remove_duplicates,
            timezone=args.timezone,
        )
    except ValueError as e:
        parser.error(str(e))

    console = get_console()
    show_processing_plan(sort_config, console)

    # Show confirmation when falling back to last used paths without --yes flag
    if using_saved_paths and not args.yes:
        if not confirm_processing(console):
            return 0

    sorter = MediaSorter(sort_config)

    try:
        success = sorter.run(show_progress=True)
    except PreconditionError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1

    config.update_paths(sort_config.input_paths, sort_config.output_path)
    if args.timezone:
        config.update_timezone(args.timezone)

    sorter.print_summary()

    if not success:
        console.print("\n[red]✗ Processing stopped early for at least one input folder[/red]")
        return 1

    skipped = sorter.stats_manager.get_errors() + sorter.stats_manager.get_undetermined()
    if skipped > 0:
        console.print(f"\n[green]✓ Processing completed![/green] [yellow]({skipped} files could not be placed)[/yellow]")
    else:
        console.print("\n[green]✓ Processing completed successfully![/green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
