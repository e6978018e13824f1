from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, field_serializer


class FilePatchOutcome(BaseModel):
    source_path: Path | None
    destination_path: Path
    hunks_applied: int
    lines_added: int
    lines_removed: int
    created: bool = False
    deleted: bool = False

    @field_serializer("source_path", "destination_path")
    def serialize_paths(self, v: Path | None) -> str | None:
        return str(v) if v is not None else None


class PatchReport(BaseModel):
    files: list[FilePatchOutcome] = Field(default_factory=list)
    dry_run: bool = False
    patch_size_bytes: int
    started_at: datetime
    ended_at: datetime
    duration_sec: float

    @property
    def changed_files(self) -> list[str]:
        return [str(f.destination_path) for f in self.files]
