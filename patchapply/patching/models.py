from dataclasses import dataclass, field


@dataclass(frozen=True)
class Remove:
    content: str = ""


@dataclass(frozen=True)
class Add:
    content: str


@dataclass(frozen=True)
class Context:
    content: str


HunkLine = Remove | Add | Context


@dataclass
class Hunk:
    old_start: int
    old_count: int
    lines: list[HunkLine] = field(default_factory=list)
    new_start: int = 0
    new_count: int = 0
    old_missing_newline: bool = False
    new_missing_newline: bool = False

    @property
    def added(self) -> int:
        return sum(1 for line in self.lines if isinstance(line, Add))

    @property
    def removed(self) -> int:
        return sum(1 for line in self.lines if isinstance(line, Remove))


@dataclass
class FilePatch:
    old_file: str
    new_file: str
    hunks: list[Hunk] = field(default_factory=list)
