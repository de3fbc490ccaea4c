"""
mcp - MSX CAS Packager Command-Line Interface
=============================================

This module implements the command-line interface for creating,
inspecting, extracting and exporting MSX cassette images.

Commands
--------
- **list**: List the files stored in a CAS file
- **add**: Add files to a CAS file (created if missing)
- **extract**: Extract every file of a CAS file
- **export**: Export a CAS file as a WAVE audio file

File types are chosen by extension when adding:
    .bin  Binary program (BLOAD)
    .bas  Tokenized BASIC program (CLOAD)
    .asc  ASCII text (LOAD)
    other Custom block with no header

Usage Examples
--------------
Create a tape with a loader and a binary:
    $ mcp add game.cas loader.bas game.bin

List its contents:
    $ mcp list game.cas

Extract everything into a directory:
    $ mcp extract -o ./out/ game.cas

Convert to audio for a real MSX:
    $ mcp export game.cas game.wav
    $ mcp export --baud 2400 game.cas game-fast.wav
"""

from pathlib import Path
from typing import Optional
import logging

import click

from msx_cas import __version__
from msx_cas.audio import AudioConfig, VALID_BAUD_RATES, tape_to_wav
from msx_cas.cas import (
    AsciiFile,
    BasicFile,
    BinFile,
    CasFile,
    CustomFile,
    FileType,
    Tape,
)
from msx_cas.cli.errors import handle_cli_exception
from msx_cas.cli.files import (
    file_name_of,
    is_ascii_file,
    is_basic_file,
    is_bin_file,
    read_content,
    unique_filename,
    write_content,
)

# Configure logging
logger = logging.getLogger(__name__)

# Extension used when extracting each named file type
EXTRACT_EXTENSIONS = {
    FileType.BIN: "bin",
    FileType.BASIC: "bas",
    FileType.ASCII: "asc",
}


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores common options like verbosity.
    """

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def open_tape(path: Path) -> Tape:
    """Read and decode a CAS file."""
    return Tape.from_bytes(read_content(path))


def describe(file: CasFile) -> str:
    """Format one listing row for a file."""
    name = file.name or ""
    if isinstance(file, BinFile):
        return (
            f"bin    | {name:6} | {file.size:5} bytes | "
            f"[0x{file.load_address:x},0x{file.end_address:x}]:0x{file.start_address:x}"
        )
    if isinstance(file, BasicFile):
        return f"basic  | {name:6} | {file.size:5} bytes |"
    if isinstance(file, AsciiFile):
        return f"ascii  | {name:6} | {file.size:5} bytes |"
    return f"custom | {name:6} | {file.size:5} bytes |"


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="mcp")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    MSX CAS Packager.

    Create, inspect and extract MSX cassette images (.cas), and export
    them as audio for real hardware.

    \b
    Commands:
      list      List contents of a CAS file
      add       Add files to a CAS file
      extract   Extract files from a CAS file
      export    Export a CAS file to WAVE audio

    \b
    Examples:
      mcp add game.cas loader.bas game.bin
      mcp list game.cas
      mcp export game.cas game.wav
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# List Command
# =============================================================================

@main.command("list")
@click.argument(
    "cas_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_list(ctx: Context, cas_file: Path) -> None:
    """
    List the files stored in a CAS file.

    \b
    Output format:
      bin    | GAME   |  4096 bytes | [0x9000,0x9fff]:0x9000
      basic  | LOADER |   312 bytes |
      custom |        |  1024 bytes |
    """
    try:
        tape = open_tape(cas_file)
        count = 0
        for file in tape.files():
            click.echo(describe(file))
            count += 1

        if ctx.verbose:
            click.echo(f"Total: {count} files in {len(tape)} blocks ({tape.size} bytes)")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Add Command
# =============================================================================

def add_file(tape: Tape, path: Path) -> None:
    """Append one file to the tape, reporting truncation and padding."""
    if is_bin_file(path):
        kind, append = "binary", tape.append_bin
    elif is_ascii_file(path):
        kind, append = "ascii", tape.append_ascii
    elif is_basic_file(path):
        kind, append = "basic", tape.append_basic
    else:
        kind, append = "custom", None

    click.echo(f"Adding {kind} file {path}... ", nl=False)
    data = read_content(path)

    if append is None:
        padding = tape.append_custom(data)
    else:
        name, truncated = file_name_of(path)
        if truncated:
            click.echo(f"Warning: file name truncated to {name.decode('ascii')}... ", nl=False)
        padding = append(name, data)

    if padding:
        click.echo(f"Warning: {padding} padding bytes added... ", nl=False)
    click.echo("Done")


@main.command("add")
@click.argument(
    "cas_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.argument(
    "input_files",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
)
@pass_context
def cmd_add(ctx: Context, cas_file: Path, input_files: tuple[Path, ...]) -> None:
    """
    Add files to a CAS file.

    CAS_FILE is created if it does not exist. INPUT_FILES are stored in
    order; their type is chosen by extension (.bin, .bas, .asc, or
    custom for anything else).

    \b
    Examples:
      mcp add game.cas loader.bas
      mcp add game.cas game.bin screen.dat
    """
    try:
        if cas_file.exists():
            tape = open_tape(cas_file)
        else:
            logger.info(f"Creating new tape {cas_file}")
            tape = Tape()

        for path in input_files:
            add_file(tape, path)

        written = write_content(cas_file, tape.to_bytes())
        if ctx.verbose:
            click.echo(f"Saved {cas_file} ({len(tape)} blocks, {written} bytes)")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Extract Command
# =============================================================================

def output_name(file: CasFile, custom_index: int) -> str:
    """Get the file name a tape file is extracted to."""
    if file.file_type is None:
        return f"custom.{custom_index:03}"
    name = file.get_display_name() or "noname"
    return f"{name}.{EXTRACT_EXTENSIONS[file.file_type]}"


@main.command("extract")
@click.argument(
    "cas_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Output directory (default: current directory)",
)
@pass_context
def cmd_extract(ctx: Context, cas_file: Path, output: Path) -> None:
    """
    Extract every file of a CAS file.

    Named files are written as NAME.bin, NAME.bas or NAME.asc; blocks
    without a header as custom.001, custom.002... Existing files are
    never overwritten: a numeric suffix is added instead.

    \b
    Examples:
      mcp extract game.cas
      mcp extract -o ./out/ game.cas
    """
    try:
        tape = open_tape(cas_file)
        output.mkdir(parents=True, exist_ok=True)

        next_custom = 0
        for file in tape.files():
            if isinstance(file, CustomFile):
                next_custom += 1
            out_path = output / output_name(file, next_custom)

            click.echo(f"Extracting {out_path.name}... ", nl=False)
            target, clash = unique_filename(out_path)
            if clash:
                click.echo(
                    f"Warning: {out_path.name} already exists, writing output to {target.name}... ",
                    nl=False,
                )
            write_content(target, file.to_bytes())
            click.echo("Done")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Export Command
# =============================================================================

@main.command("export")
@click.argument(
    "cas_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "wav_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-b", "--baud",
    type=click.Choice([str(b) for b in VALID_BAUD_RATES]),
    default=None,
    help="Tape baud rate (default: 1200, or $MCP_BAUD)",
)
@pass_context
def cmd_export(ctx: Context, cas_file: Path, wav_file: Path, baud: Optional[str]) -> None:
    """
    Export a CAS file as a WAVE audio file.

    The audio is 8-bit mono PCM at 43200 Hz, suitable for playing into
    the cassette port of an MSX computer.

    \b
    Examples:
      mcp export game.cas game.wav
      mcp export --baud 2400 game.cas game.wav
    """
    try:
        config = AudioConfig.from_env()
        if baud is not None:
            config = AudioConfig(baud=int(baud), sample_rate=config.sample_rate)

        def report(index: int, written: int) -> None:
            click.echo(f"Encoding block {index}... {written // 1024} KiB")

        tape = open_tape(cas_file)
        wav = tape_to_wav(tape, config, report if ctx.verbose else None)
        write_content(wav_file, wav)
        click.echo(f"Exported {wav_file} ({len(tape)} blocks, {len(wav)} bytes)")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
