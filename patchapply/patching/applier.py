import logging
from datetime import datetime
from pathlib import Path

from patchapply.patching.errors import HunkApplyError, PatchIOError, PatchWriteError
from patchapply.patching.models import Add, Context, FilePatch, Hunk
from patchapply.patching.options import PatchOptions
from patchapply.patching.parser import parse_multi
from patchapply.patching.paths import (
    DEV_NULL,
    new_path_token,
    old_path_token,
    resolve_patch_path,
)
from patchapply.patching.results import FilePatchOutcome, PatchReport

logger = logging.getLogger(__name__)


def reconstruct_lines(
    original: list[str],
    hunks: list[Hunk],
    strict: bool = False,
    line_count: int | None = None
) -> list[str]:
    """
    Replay hunks against the original lines and return the new lines.

    Walks a 1-based cursor through `original`:
    - untouched lines before each hunk are copied verbatim
    - `Remove` skips one original line
    - `Add` emits its content without consuming anything
    - `Context` emits the original line (not the hunk's copy) and advances
    - whatever follows the last hunk is copied verbatim

    `line_count` is the number of real lines in `original`; it excludes the
    empty piece left after a final line ending and defaults to
    `len(original)`. Removing or matching a line beyond it raises
    `HunkApplyError`.

    Hunks are expected in ascending `old_start` order. A hunk that starts
    before the cursor skips the gap copy and moves the cursor back, which
    yields wrong output; pass `strict=True` to reject it instead.
    """

    if line_count is None:
        line_count = len(original)

    new_lines: list[str] = []
    cursor = 1

    for index, hunk in enumerate(hunks):
        start = max(hunk.old_start, 1)
        if cursor < start:
            new_lines.extend(original[cursor - 1:start - 1])
        elif start < cursor:
            if strict:
                logger.warning("Hunk %d starts at line %d, before line %d", index, start, cursor)
                raise HunkApplyError(
                    f"Hunk {index} starts at line {start}, before the end of the previous hunk (line {cursor})",
                    hunk_index=index,
                    old_start=hunk.old_start,
                )
            logger.debug("Hunk %d overlaps the previous hunk; gap copy skipped", index)
        cursor = start

        for line in hunk.lines:
            if isinstance(line, Add):
                new_lines.append(line.content)
                continue
            if cursor > line_count:
                raise HunkApplyError(
                    f"Hunk {index} reaches line {cursor}, past the end of the file ({line_count} lines)",
                    hunk_index=index,
                    old_start=hunk.old_start,
                )
            if isinstance(line, Context):
                new_lines.append(original[cursor - 1])
            cursor += 1

    new_lines.extend(original[cursor - 1:])
    return new_lines


def _match_final_newline(new_lines: list[str], hunks: list[Hunk]) -> list[str]:
    if any(hunk.new_missing_newline for hunk in hunks):
        if new_lines and new_lines[-1] == "":
            return new_lines[:-1]
    elif any(hunk.old_missing_newline for hunk in hunks):
        if new_lines and new_lines[-1] != "":
            return [*new_lines, ""]
    return new_lines


def apply_to_text(original: str, hunks: list[Hunk], options: PatchOptions) -> str:
    old_lines = original.split(options.line_ending)
    line_count = len(old_lines) - 1 if old_lines[-1] == "" else len(old_lines)
    new_lines = reconstruct_lines(
        old_lines,
        hunks,
        strict=options.strict_hunk_order,
        line_count=line_count,
    )
    return options.line_ending.join(_match_final_newline(new_lines, hunks))


def _read_source(path: Path, encoding: str) -> str:
    try:
        with path.open("r", encoding=encoding, newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read patch source %s: %s", path, exc)
        raise PatchIOError(path, exc) from exc


def _write_destination(path: Path, content: str, encoding: str) -> None:
    try:
        with path.open("w", encoding=encoding, newline="") as f:
            f.write(content)
    except OSError as exc:
        logger.error("Failed to write patch destination %s: %s", path, exc)
        raise PatchWriteError(path, exc) from exc


def _remove_file(path: Path) -> None:
    try:
        path.unlink()
    except OSError as exc:
        logger.error("Failed to remove %s: %s", path, exc)
        raise PatchWriteError(path, exc) from exc


def apply_file_patch(file_patch: FilePatch, options: PatchOptions) -> FilePatchOutcome:
    """Read, reconstruct and write a single file from its patch record."""

    workdir = options.work_directory
    strip = options.strip_count

    old_token = old_path_token(file_patch.old_file)
    new_token = new_path_token(file_patch.new_file)
    is_new_file = old_token == DEV_NULL
    is_deleted_file = new_token == DEV_NULL

    source = None if is_new_file else resolve_patch_path(workdir, old_token, strip)
    original = "" if source is None else _read_source(source, options.encoding)

    new_content = apply_to_text(original, file_patch.hunks, options)

    if is_deleted_file:
        destination = source if source is not None else Path(DEV_NULL)
    else:
        destination = resolve_patch_path(workdir, new_token, strip)

    if options.dry_run:
        logger.info("Dry run: would %s %s", "remove" if is_deleted_file else "write", destination)
    elif is_deleted_file:
        if source is not None:
            _remove_file(source)
            logger.info("Removed %s", source)
    else:
        _write_destination(destination, new_content, options.encoding)
        logger.info("Patched %s", destination)

    return FilePatchOutcome(
        source_path = source,
        destination_path = destination,
        hunks_applied = len(file_patch.hunks),
        lines_added = sum(h.added for h in file_patch.hunks),
        lines_removed = sum(h.removed for h in file_patch.hunks),
        created = is_new_file,
        deleted = is_deleted_file,
    )


def apply_patch(
    patch_text: str,
    options: PatchOptions | None = None
) -> PatchReport:
    """
    Apply one or more concatenated unified diffs to files on disk.

    Files are processed in patch order. The first failure aborts the run;
    files written before it stay written.

    Raises:
        PatchParseError: the text is not a valid unified diff (nothing touched)
        PatchIOError: a source file could not be read
        HunkApplyError: a hunk could not be replayed
        PatchWriteError: a destination could not be written
    """

    options = options or PatchOptions()
    started_at = datetime.now()

    if not patch_text.endswith(options.line_ending):
        patch_text = f"{patch_text}{options.line_ending}"

    file_patches = parse_multi(patch_text)
    logger.debug(
        "Applying %d file patches in %s (strip %d)",
        len(file_patches),
        options.work_directory,
        options.strip_count,
    )

    outcomes = [apply_file_patch(file_patch, options) for file_patch in file_patches]

    ended_at = datetime.now()
    return PatchReport(
        files = outcomes,
        dry_run = options.dry_run,
        patch_size_bytes = len(patch_text.encode("utf-8")),
        started_at = started_at,
        ended_at = ended_at,
        duration_sec = (ended_at - started_at).total_seconds(),
    )
