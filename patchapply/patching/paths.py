import logging
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"


def old_path_token(reference: str) -> str:
    """
    Path embedded in an old-file reference.

    The old reference may carry a leading label (`--- orig src/a.py`), so the
    path is the second whitespace-separated token when there is more than one.
    Paths containing spaces are not supported.
    """

    tokens = reference.split()
    if len(tokens) > 1:
        return tokens[1]
    return tokens[0]


def new_path_token(reference: str) -> str:
    """Path embedded in a new-file reference: the first token."""

    return reference.split()[0]


def resolve_patch_path(
    work_directory: Path,
    raw_path: str,
    strip_num: int = 0
) -> Path:
    """
    Drop `strip_num` leading components from a diff path and join the rest
    onto `work_directory`.

    An absolute remainder replaces `work_directory` entirely, matching
    `Path.joinpath`. Stripping every component yields `work_directory` itself.
    """

    parts = PurePath(raw_path).parts[strip_num:]
    resolved = Path(work_directory).joinpath(*parts)

    logger.debug("Resolved patch path: %s (strip %d) -> %s", raw_path, strip_num, resolved)
    return resolved
