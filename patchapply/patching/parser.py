import logging

from unidiff import Hunk as UnidiffHunk
from unidiff import PatchSet, UnidiffParseError
from unidiff.constants import (
    LINE_TYPE_ADDED,
    LINE_TYPE_CONTEXT,
    LINE_TYPE_NO_NEWLINE,
    LINE_TYPE_REMOVED,
    RE_HUNK_HEADER,
)

from patchapply.patching.errors import PatchParseError
from patchapply.patching.models import Add, Context, FilePatch, Hunk, HunkLine, Remove

logger = logging.getLogger(__name__)


def _strip_eol(value: str) -> str:
    if value.endswith("\r\n"):
        return value[:-2]
    if value.endswith(("\n", "\r")):
        return value[:-1]
    return value


def _check_hunk_headers(patch_txt: str) -> None:
    for line_number, line in enumerate(patch_txt.split("\n"), start=1):
        if line.startswith("@@") and not RE_HUNK_HEADER.match(line):
            raise PatchParseError(
                f"Malformed hunk header at line {line_number}: {line.rstrip()}",
                line_number=line_number,
            )


def _convert_hunk(hunk: UnidiffHunk) -> Hunk:
    lines: list[HunkLine] = []
    old_missing_newline = False
    new_missing_newline = False

    for line in hunk:
        content = _strip_eol(line.value)
        if line.line_type == LINE_TYPE_ADDED:
            lines.append(Add(content))
        elif line.line_type == LINE_TYPE_REMOVED:
            lines.append(Remove(content))
        elif line.line_type == LINE_TYPE_CONTEXT:
            lines.append(Context(content))
        elif line.line_type == LINE_TYPE_NO_NEWLINE and lines:
            # the marker belongs to the line right before it
            last = lines[-1]
            if isinstance(last, (Remove, Context)):
                old_missing_newline = True
            if isinstance(last, (Add, Context)):
                new_missing_newline = True

    old_start = hunk.source_start
    # "-N,0" names the line after which the insertion happens
    if hunk.source_length == 0:
        old_start += 1

    return Hunk(
        old_start = old_start,
        old_count = hunk.source_length,
        new_start = hunk.target_start,
        new_count = hunk.target_length,
        lines = lines,
        old_missing_newline = old_missing_newline,
        new_missing_newline = new_missing_newline
    )


def parse_multi(patch_txt: str) -> list[FilePatch]:
    """
    Parse concatenated unified diffs into FilePatch records.

    Args:
        patch_txt (str): one or more `---`/`+++`/`@@` file sections

    Returns:
        list[FilePatch]: one record per file section, in source order

    Raises:
        PatchParseError: the text is not valid unified-diff content, or
            holds no file section at all
    """

    _check_hunk_headers(patch_txt)

    try:
        patch_set = PatchSet(patch_txt)
    except UnidiffParseError as exc:
        raise PatchParseError(str(exc)) from exc

    if not patch_set:
        raise PatchParseError("No file patches found in diff text")

    all_patches: list[FilePatch] = []
    for patched_file in patch_set:
        if patched_file.is_binary_file:
            raise PatchParseError(
                f"Binary patches are not supported: {patched_file.source_file}",
                line_number=patched_file.diff_line_no,
            )
        if not patched_file.source_file.split() or not patched_file.target_file.split():
            raise PatchParseError(
                "File header is missing a path",
                line_number=patched_file.diff_line_no,
            )

        all_patches.append(
            FilePatch(
                old_file = patched_file.source_file,
                new_file = patched_file.target_file,
                hunks = [_convert_hunk(hunk) for hunk in patched_file]
            )
        )

    logger.debug("Parsed %d file patches from unified diff", len(all_patches))
    return all_patches
