from patchapply.patching.applier import (
    apply_file_patch,
    apply_patch,
    reconstruct_lines,
)
from patchapply.patching.errors import (
    HunkApplyError,
    PatchError,
    PatchErrorType,
    PatchIOError,
    PatchParseError,
    PatchWriteError,
)
from patchapply.patching.models import Add, Context, FilePatch, Hunk, HunkLine, Remove
from patchapply.patching.options import LineEnding, PatchOptions
from patchapply.patching.parser import parse_multi
from patchapply.patching.results import FilePatchOutcome, PatchReport

__all__ = [
    "apply_patch",
    "apply_file_patch",
    "reconstruct_lines",
    "parse_multi",
    "PatchOptions",
    "LineEnding",
    "PatchReport",
    "FilePatchOutcome",
    "FilePatch",
    "Hunk",
    "HunkLine",
    "Add",
    "Remove",
    "Context",
    "PatchError",
    "PatchErrorType",
    "PatchParseError",
    "PatchIOError",
    "PatchWriteError",
    "HunkApplyError",
]
