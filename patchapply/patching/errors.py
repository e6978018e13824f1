from enum import StrEnum
from pathlib import Path


class PatchErrorType(StrEnum):
    PARSE_ERROR = "parse_error"
    IO_ERROR = "io_error"
    HUNK_FAIL = "patch_hunk_fail"
    UNKNOWN = "unknown"


class PatchError(Exception):
    def __init__(
        self,
        error_type: PatchErrorType,
        message: str,
        details: dict | None = None
    ):
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = details or {}


class PatchParseError(PatchError):
    """The patch text is not valid unified-diff content."""
    def __init__(
        self,
        message: str,
        line_number: int | None = None
    ):
        super().__init__(
            PatchErrorType.PARSE_ERROR,
            message,
            details = {
                "line_number": line_number
            }
        )
        self.line_number = line_number


class PatchIOError(PatchError):
    """A patch source file could not be read."""
    def __init__(
        self,
        path: Path,
        cause: Exception
    ):
        super().__init__(
            PatchErrorType.IO_ERROR,
            f"Could not read {path}: {cause}",
            details = {
                "path": str(path),
                "cause": repr(cause)
            }
        )
        self.path = path
        self.cause = cause


class PatchWriteError(PatchError):
    """
    A patch destination could not be written or removed.

    Classified as UNKNOWN for callers that switch on `error_type`; the
    underlying OSError is kept on `cause` and chained as `__cause__`.
    """
    def __init__(
        self,
        path: Path,
        cause: Exception
    ):
        super().__init__(
            PatchErrorType.UNKNOWN,
            f"Could not write {path}: {cause}",
            details = {
                "path": str(path),
                "cause": repr(cause)
            }
        )
        self.path = path
        self.cause = cause


class HunkApplyError(PatchError):
    """A hunk cannot be replayed against the original lines."""
    def __init__(
        self,
        message: str,
        hunk_index: int,
        old_start: int
    ):
        super().__init__(
            PatchErrorType.HUNK_FAIL,
            message,
            details = {
                "hunk_index": hunk_index,
                "old_start": old_start
            }
        )
