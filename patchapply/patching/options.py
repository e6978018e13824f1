import os
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

STRICT_HUNKS_ENV = "PATCHAPPLY_STRICT_HUNKS"


def line_ending_for(os_name: str) -> str:
    return "\r\n" if os_name == "nt" else "\n"


def default_line_ending() -> str:
    return line_ending_for(os.name)


def _strict_hunks_enabled() -> bool:
    return os.getenv(STRICT_HUNKS_ENV, "").lower() in {"1", "true", "yes"}


class LineEnding(StrEnum):
    NATIVE = "native"
    LF = "lf"
    CRLF = "crlf"

    @property
    def token(self) -> str:
        if self is LineEnding.LF:
            return "\n"
        if self is LineEnding.CRLF:
            return "\r\n"
        return default_line_ending()


class PatchOptions(BaseModel):
    """
    Settings for a single `apply_patch` call.

    - `line_ending`: token used to split originals and join results. It must
      match the files' actual convention.
    - `work_directory`: base every diff path is joined onto
    - `strip_num`: leading components removed from diff paths before the join
    - `strict_hunk_order`: reject hunks that start before the current cursor
    - `dry_run`: compute results without touching the filesystem
    """

    model_config = ConfigDict(
        extra="forbid",
    )

    line_ending: str = Field(default_factory=default_line_ending)
    work_directory: Path = Path("")
    strip_num: int | None = Field(default=None, ge=0)
    strict_hunk_order: bool = Field(default_factory=_strict_hunks_enabled)
    dry_run: bool = False
    encoding: str = "utf-8"

    @field_validator("line_ending")
    @classmethod
    def check_line_ending(cls, v: str) -> str:
        if not v:
            raise ValueError("line_ending must not be empty")
        return v

    @field_serializer("work_directory")
    def serialize_path(self, v: Path) -> str:
        return str(v)

    @property
    def strip_count(self) -> int:
        return self.strip_num or 0
