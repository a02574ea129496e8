#!/usr/bin/env python3
"""
Photo Organizer CLI

Scans a folder of photos and copies, moves or links them into a folder tree
built from their EXIF metadata.
"""

import logging
import signal
import sys
from contextlib import contextmanager
from pathlib import Path

import click
from colorama import init, Fore, Style
from tqdm import tqdm

from photo_organizer import (
    CancellationToken,
    Config,
    ConfigError,
    DirectoryNotFoundError,
    OperationCancelled,
    OperationFailedError,
    OperationType,
    OrganizationReporter,
    PhotoOrganizer,
    PhotoScanner,
)
from photo_organizer.utils import format_bytes, get_available_space, parse_extension_list

# Initialize colorama for cross-platform colored output
init()

EXIT_CANCELLED = 130

# Replaced on every setup_logging call
_console_handler = None
_file_handler = None


def setup_logging(level: str = 'INFO', log_dir: Path = None, log_name: str = 'photo_organizer'):
    """Set up logging configuration."""
    global _console_handler
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    if _console_handler is not None:
        root_logger.removeHandler(_console_handler)

    _console_handler = logging.StreamHandler(sys.stdout)
    _console_handler.setFormatter(formatter)

    root_logger.setLevel(numeric_level)
    root_logger.addHandler(_console_handler)

    if log_dir:
        _setup_file_logging(log_dir, formatter, root_logger, log_name)

    # Reduce noise from libraries
    logging.getLogger('exifread').setLevel(logging.ERROR)


def _setup_file_logging(log_dir: Path, formatter: logging.Formatter, root_logger: logging.Logger,
                        log_name: str = 'photo_organizer'):
    """Add file handler to root logger."""
    global _file_handler
    log_dir.mkdir(parents=True, exist_ok=True)

    # Remove previous file handler if any
    if _file_handler is not None:
        root_logger.removeHandler(_file_handler)

    _file_handler = logging.FileHandler(log_dir / f'{log_name}.log')
    _file_handler.setFormatter(formatter)
    root_logger.addHandler(_file_handler)


def print_header(title: str):
    """Print a formatted header."""
    click.echo(f"\n{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}{title.center(60)}{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}\n")


def print_success(message: str):
    """Print success message."""
    click.echo(f"{Fore.GREEN}OK: {message}{Style.RESET_ALL}")


def print_warning(message: str):
    """Print warning message."""
    click.echo(f"{Fore.YELLOW}WARN: {message}{Style.RESET_ALL}")


def print_error(message: str):
    """Print error message."""
    click.echo(f"{Fore.RED}ERROR: {message}{Style.RESET_ALL}")


def print_info(message: str):
    """Print info message."""
    click.echo(f"{Fore.BLUE}INFO: {message}{Style.RESET_ALL}")


@contextmanager
def cancel_on_interrupt():
    """Turn Ctrl-C into a cancellation request for the running stage."""
    token = CancellationToken()

    def handler(signum, frame):
        token.cancel()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


def build_run_config(ctx, source, destination=None, pattern=None, mode=None, extensions=None):
    """Merge command-line options over the loaded configuration."""
    config = ctx.obj['config']
    try:
        return config.build_run_config(
            source,
            destination,
            organization_pattern=pattern,
            operation_type=OperationType.parse(mode) if mode else None,
            file_extensions=parse_extension_list(extensions) if extensions else None,
        )
    except ConfigError as e:
        print_error(str(e))
        sys.exit(1)


def scan_photos(run_config, token):
    """Scan the source folder with a progress bar."""
    scanner = PhotoScanner(max_workers=run_config.scan_workers)
    print_info(f"Scanning directory: {run_config.source_folder}")

    with tqdm(desc="Scanning files", unit="files", disable=None) as pbar:
        def progress_callback(progress):
            pbar.total = progress.total_files
            pbar.set_postfix_str(Path(progress.current_file).name)
            pbar.update(1)

        try:
            return scanner.scan(
                run_config.source_folder,
                run_config.file_extensions,
                progress_callback,
                token,
            )
        except DirectoryNotFoundError as e:
            print_error(str(e))
            sys.exit(1)
        except OperationCancelled:
            print_warning("Scan cancelled")
            sys.exit(EXIT_CANCELLED)


@click.group()
@click.option('--config', '-c', help='Path to configuration file')
@click.option('--log-level', '-l', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level (overrides config)')
@click.pass_context
def cli(ctx, config, log_level):
    """Photo Organizer - sort photos into folders by date, place and camera."""
    try:
        config_obj = Config(config)
    except Exception as e:
        print_error(f"Failed to load configuration: {e}")
        sys.exit(1)

    errors = config_obj.validate_config()
    if errors:
        print_error("Configuration validation failed:")
        for error in errors:
            click.echo(f"  - {error}")
        sys.exit(1)

    setup_logging(
        log_level or config_obj.get_log_level(),
        config_obj.get_log_dir(),
        ctx.invoked_subcommand or 'photo_organizer',
    )

    ctx.ensure_object(dict)
    ctx.obj['config'] = config_obj


@cli.command()
@click.argument('source', type=click.Path())
@click.option('--extensions', help='File extensions to scan (comma-separated, default: .jpg,.jpeg,.png,.heic,.raw,.cr2,.nef)')
@click.pass_context
def scan(ctx, source, extensions):
    """Scan a directory for photos and display metadata."""

    print_header("PHOTO SCAN")

    # Nothing is written during a scan, so the source stands in as destination
    run_config = build_run_config(ctx, source, source, extensions=extensions)

    with cancel_on_interrupt() as token:
        photos = scan_photos(run_config, token)

    if not photos:
        print_error("No photos found!")
        sys.exit(1)

    organizer = PhotoOrganizer()
    reporter = OrganizationReporter(organizer.detector)
    groups = organizer.detect_duplicates(photos)

    print_success(f"Found {len(photos):,} photos")
    click.echo(reporter.generate_scan_report(photos, groups))

    if groups:
        total = sum(len(members) for members in groups.values())
        print_warning(f"Found {len(groups):,} duplicate groups ({total:,} total files)")


@cli.command()
@click.argument('source', type=click.Path())
@click.argument('destination', type=click.Path())
@click.option('--pattern', help='Organization pattern (default: {Year}/{Month})')
@click.option('--extensions', help='File extensions to scan (comma-separated)')
@click.pass_context
def preview(ctx, source, destination, pattern, extensions):
    """Preview organization plan without executing."""

    print_header("ORGANIZATION PREVIEW")

    run_config = build_run_config(ctx, source, destination, pattern, 'copy', extensions)

    with cancel_on_interrupt() as token:
        photos = scan_photos(run_config, token)

    if not photos:
        print_error("No photos found!")
        sys.exit(1)

    organizer = PhotoOrganizer()
    operations = organizer.plan_organization(photos, run_config)

    print_info(f"Preview of {len(operations):,} operations:")
    click.echo(OrganizationReporter().generate_preview(operations, run_config.destination_folder))


@cli.command()
@click.argument('source', type=click.Path())
@click.argument('destination', type=click.Path(), required=False)
@click.option('--pattern', help='Organization pattern (default: {Year}/{Month})')
@click.option('--mode', type=click.Choice(['copy', 'move', 'symlink'], case_sensitive=False),
              help='Operation mode (default: copy)')
@click.option('--dry-run', is_flag=True, help='Preview without executing')
@click.option('--skip-duplicates', is_flag=True, help='Skip duplicate files')
@click.option('--extensions', help='File extensions to scan (comma-separated)')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
@click.option('--report', '-r', type=click.Path(), help='Save a JSON report to this file')
@click.pass_context
def organize(ctx, source, destination, pattern, mode, dry_run, skip_duplicates,
             extensions, yes, report):
    """Organize photos from source to destination folder."""

    print_header("PHOTO ORGANIZATION")

    config = ctx.obj['config']
    run_config = build_run_config(ctx, source, destination, pattern, mode, extensions)
    mode_name = run_config.operation_type.value

    organizer = PhotoOrganizer()
    reporter = OrganizationReporter(organizer.detector)

    with cancel_on_interrupt() as token:
        photos = scan_photos(run_config, token)

    if not photos:
        print_error("No photos found!")
        sys.exit(1)

    operations = organizer.prepare(photos, run_config, skip_duplicates)
    if len(operations) < len(photos):
        print_warning(f"Skipping {len(photos) - len(operations):,} duplicate files")

    print_info(f"Planning {len(operations):,} operations ({mode_name} mode)")

    if dry_run:
        print_info("DRY RUN - No files will be modified")
        click.echo(reporter.generate_preview(operations, run_config.destination_folder))
        if report:
            print_success(f"Report saved: {reporter.save_report(operations, 0, True, report)}")
        return

    if run_config.operation_type == OperationType.COPY:
        needed = sum(op.metadata.file_size for op in operations if op.metadata)
        needed += int(config.get_min_free_space_gb() * 1024 * 1024 * 1024)
        available = get_available_space(Path(run_config.destination_folder))
        if needed > available:
            print_error(
                f"Insufficient space: need {format_bytes(needed)}, "
                f"have {format_bytes(available)}"
            )
            sys.exit(1)

    # Ctrl-C at the prompt aborts normally; the token only covers execution
    if not yes and not click.confirm(f"Execute {len(operations):,} {mode_name} operations?"):
        print_warning("Operation cancelled")
        return

    completed = 0
    with cancel_on_interrupt() as token, \
            tqdm(total=len(operations), desc=f"{mode_name.capitalize()} files",
                 unit="files", disable=None) as pbar:
        def progress_callback(progress):
            nonlocal completed
            completed = progress.operations_completed
            pbar.set_postfix_str(Path(progress.current_file).name)
            pbar.update(1)

        try:
            completed = organizer.execute_operations(operations, progress_callback, token)
        except OperationCancelled:
            print_warning(f"Cancelled after {completed:,}/{len(operations):,} operations")
            if report:
                reporter.save_report(operations, completed, False, report)
            sys.exit(EXIT_CANCELLED)
        except OperationFailedError as e:
            print_error(str(e))
            print_info(f"{completed:,}/{len(operations):,} operations were completed")
            if report:
                reporter.save_report(operations, completed, False, report)
            sys.exit(1)

    print_success(f"Successfully organized {completed:,} photos!")
    if report:
        print_success(f"Report saved: {reporter.save_report(operations, completed, False, report)}")


if __name__ == '__main__':
    cli()
