import logging
import sys
from pathlib import Path

import typer

from patchapply.logging import setup_logging
from patchapply.patching import LineEnding, PatchError, PatchOptions, apply_patch

app = typer.Typer(no_args_is_help = True)


def _read_patch_text(patch: Path) -> str:
    if str(patch) == "-":
        return sys.stdin.read()
    try:
        with patch.open("r", encoding="utf-8", newline="") as f:
            return f.read()
    except OSError as exc:
        raise typer.BadParameter(f"Cannot read patch file {patch}: {exc}")


@app.command("apply")
def apply_cmd(
    patch: Path = typer.Argument(..., help="Unified diff file to apply, or '-' for stdin"),
    directory: Path = typer.Option(Path(""), "--directory", "-d", help="Directory patch paths are relative to"),
    strip: int = typer.Option(0, "--strip", "-p", min=0, help="Leading path components to strip from patch paths"),
    line_ending: LineEnding = typer.Option(LineEnding.NATIVE, "--line-ending", help="Line ending used to split and join file lines"),
    strict: bool = typer.Option(False, "--strict", help="Reject hunks that are out of order or overlap (default from PATCHAPPLY_STRICT_HUNKS)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would change without writing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Apply a unified diff to files on disk.
    """
    if verbose:
        setup_logging(level=logging.DEBUG)

    patch_text = _read_patch_text(patch)
    option_values = {
        "line_ending": line_ending.token,
        "work_directory": directory,
        "strip_num": strip,
        "dry_run": dry_run,
    }
    # without --strict the PATCHAPPLY_STRICT_HUNKS default applies
    if strict:
        option_values["strict_hunk_order"] = True
    options = PatchOptions(**option_values)

    try:
        report = apply_patch(patch_text, options)
    except PatchError as exc:
        typer.echo(f"Error: [{exc.error_type}] {exc}", err=True)
        raise typer.Exit(code=1)

    prefix = "Would patch" if report.dry_run else "Patched"
    for outcome in report.files:
        action = "remove" if outcome.deleted else "write"
        typer.echo(
            f"{prefix}: {outcome.destination_path} ({action}, "
            f"+{outcome.lines_added} -{outcome.lines_removed})"
        )
    typer.echo(f"Files: {len(report.files)}")


@app.callback()
def main():
    """
    PatchApply CLI
    """
    pass
