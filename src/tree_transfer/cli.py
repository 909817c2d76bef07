"""Command-line interface for Tree Transfer."""

import logging
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from typing_extensions import Annotated

from tree_transfer import __version__
from tree_transfer.config import Config
from tree_transfer.config_manager import get_config_path, load_config, save_config
from tree_transfer.errors import TransferError
from tree_transfer.models import TransferManifest, TransferOptions, TransferResult
from tree_transfer.progress import RichProgressSink
from tree_transfer.transfer_engine import TransferEngine

app = typer.Typer(
    name="tree-transfer",
    help="Transfer directory trees with SHA-256 verification",
    add_completion=False,
)
config_app = typer.Typer(help="Manage saved transfer defaults")
app.add_typer(config_app, name="config")

console = Console()


# Color constants for consistent styling
class Colors:
    RED = "[red]"
    GREEN = "[green]"
    RESET = "[/red]"
    GREEN_RESET = "[/green]"


# Message templates for consistent formatting
class Messages:
    CONFIG_LOAD_ERROR = "Error loading configuration: {error}"
    CONFIG_MALFORMED = "Configuration file {path} is malformed: {error}"
    CONFIG_NOT_FOUND = "No configuration file found at {path}"
    CONFIG_SAVED = "Configuration saved to {path}"
    MANIFEST_LOAD_ERROR = "Failed to load manifest {path}: {error}"
    MANIFEST_SAVED = "Manifest saved to {path}"
    TRANSFER_ERROR = "Transfer failed: {error}"
    CHECKSUM_ERROR = "Checksum calculation failed: {error}"
    VERIFY_ERROR = "Verification failed: {error}"
    SKIPPED_FILES = "{count} file(s) could not be read and were skipped"


def error_msg(message: str) -> str:
    """Format error message with consistent styling."""
    return f"{Colors.RED}{escape(message)}{Colors.RESET}"


def success_msg(message: str) -> str:
    """Format success message with consistent styling."""
    return f"{Colors.GREEN}{escape(message)}{Colors.GREEN_RESET}"


def format_size(size: int) -> str:
    """Format a byte count for display."""
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{size} B" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_and_configure(verbose: bool = False) -> Config:
    """Load configuration from the environment and the user config file."""
    config_path = get_config_path()
    try:
        config = Config.load(load_config(config_path))
    except yaml.YAMLError as e:
        console.print(error_msg(Messages.CONFIG_MALFORMED.format(path=config_path, error=e)))
        raise typer.Exit(1)
    except (OSError, ValueError) as e:
        console.print(error_msg(Messages.CONFIG_LOAD_ERROR.format(error=e)))
        raise typer.Exit(1)
    
    if verbose:
        config.verbose = True
    _configure_logging(config.verbose)
    return config


def _display_manifest(manifest: TransferManifest, source: Path) -> None:
    """Display a manifest summary."""
    table = Table(title=f"Manifest for {escape(str(source))}")
    table.add_column("Files", justify="right")
    table.add_column("Total size", justify="right")
    table.add_row(str(manifest.file_count), format_size(manifest.total_size))
    console.print(table)


def _display_result(result: TransferResult) -> None:
    """Display a transfer or verification result."""
    if result.success:
        console.print(success_msg(result.message))
        console.print(f"{result.transferred_files} file(s), {format_size(result.total_size)}")
    else:
        console.print(error_msg(result.message))


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"tree-transfer {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """Transfer directory trees with SHA-256 verification."""


@app.command()
def checksum(
    source: Annotated[Path, typer.Argument(help="Directory to checksum")],
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Write the manifest to this JSON file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")] = False,
) -> None:
    """Calculate a SHA-256 manifest for every file under SOURCE."""
    config = _load_and_configure(verbose)
    engine = TransferEngine(config)
    
    try:
        manifest = engine.calculate_directory_checksum(source)
    except TransferError as e:
        console.print(error_msg(Messages.CHECKSUM_ERROR.format(error=e)))
        raise typer.Exit(1)
    
    _display_manifest(manifest, source)
    if engine.last_failures:
        console.print(error_msg(Messages.SKIPPED_FILES.format(count=len(engine.last_failures))))
    
    if output:
        # A directory gets a timestamped manifest file inside it
        if output.is_dir():
            output = output / engine.manifest_generator.generate_manifest_filename(
                config.manifest.filename_template
            )
        engine.manifest_generator.save_manifest(manifest, output)
        console.print(success_msg(Messages.MANIFEST_SAVED.format(path=output)))


@app.command()
def verify(
    target: Annotated[Path, typer.Argument(help="Directory to verify")],
    manifest_file: Annotated[Path, typer.Argument(help="Manifest JSON written by 'checksum --output'")],
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")] = False,
) -> None:
    """Verify TARGET against a saved manifest."""
    config = _load_and_configure(verbose)
    engine = TransferEngine(config)
    
    try:
        manifest = engine.manifest_generator.load_manifest(manifest_file)
    except (OSError, ValueError) as e:
        console.print(error_msg(Messages.MANIFEST_LOAD_ERROR.format(path=manifest_file, error=e)))
        raise typer.Exit(1)
    
    try:
        result = engine.verify_transfer(target, manifest)
    except TransferError as e:
        console.print(error_msg(Messages.VERIFY_ERROR.format(error=e)))
        raise typer.Exit(1)
    
    _display_result(result)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def transfer(
    source: Annotated[Path, typer.Argument(help="Directory to transfer")],
    target: Annotated[Path, typer.Argument(help="Destination directory")],
    archive: Annotated[
        Optional[bool],
        typer.Option("--archive/--no-archive", help="Move files through a .tar.gz archive"),
    ] = None,
    verify_files: Annotated[
        Optional[bool],
        typer.Option("--verify/--no-verify", help="Verify checksums after the transfer"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")] = False,
) -> None:
    """Transfer SOURCE into TARGET."""
    config = _load_and_configure(verbose)
    
    options = TransferOptions(
        source_path=source.resolve(),
        target_path=target.resolve(),
        create_archive=config.transfer.create_archive if archive is None else archive,
        verify_transfer=config.transfer.verify_transfer if verify_files is None else verify_files,
    )
    
    try:
        with RichProgressSink(console) as sink:
            engine = TransferEngine(config, sink=sink)
            result = engine.transfer_files(options)
    except TransferError as e:
        console.print(error_msg(Messages.TRANSFER_ERROR.format(error=e)))
        if config.verbose:
            console.print_exception()
        raise typer.Exit(1)
    
    _display_result(result)
    if engine.last_failures:
        console.print(error_msg(Messages.SKIPPED_FILES.format(count=len(engine.last_failures))))
    if not result.success:
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show saved transfer defaults."""
    config_path = get_config_path()
    try:
        config_data = load_config(config_path)
    except yaml.YAMLError as e:
        console.print(error_msg(Messages.CONFIG_MALFORMED.format(path=config_path, error=e)))
        raise typer.Exit(1)
    
    if config_data is not None and not isinstance(config_data, dict):
        console.print(error_msg(Messages.CONFIG_MALFORMED.format(path=config_path, error="expected a mapping")))
        raise typer.Exit(1)
    
    if config_data is None:
        console.print(escape(Messages.CONFIG_NOT_FOUND.format(path=config_path)))
        return
    
    console.print(f"Configuration file: {escape(str(config_path))}")
    for key in ("create_archive", "verify_transfer", "temp_dir"):
        value = config_data.get(key)
        console.print(f"  {key}: {'(not set)' if value is None else escape(str(value))}")


@config_app.command("init")
def config_init() -> None:
    """Interactively save transfer defaults."""
    config_path = get_config_path()
    try:
        existing = load_config(config_path) or {}
    except yaml.YAMLError:
        existing = {}
    if not isinstance(existing, dict):
        existing = {}
    
    defaults = Config().transfer
    create_archive = typer.confirm(
        "Transfer through an archive by default?",
        default=existing.get("create_archive", defaults.create_archive),
    )
    verify_files = typer.confirm(
        "Verify checksums after each transfer?",
        default=existing.get("verify_transfer", defaults.verify_transfer),
    )
    
    config_data = {**existing, "create_archive": create_archive, "verify_transfer": verify_files}
    save_config(config_path, config_data)
    console.print(success_msg(Messages.CONFIG_SAVED.format(path=config_path)))


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
