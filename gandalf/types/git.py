"""Git content data models: identities, commits, refs, diffs."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class GitUser:
    """Author or committer identity."""

    name: str
    email: str
    date: datetime | None = None

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass
class GitCommit:
    """Intent to commit on a branch."""

    message: str
    author: GitUser
    committer: GitUser
    branch: str


@dataclass
class GitLog:
    """A single commit record."""

    ref: str
    author: GitUser | None
    committer: GitUser | None
    subject: str
    created_at: datetime | None
    parent: list[str] = field(default_factory=list)


@dataclass
class GitHistory:
    """A page of commits plus the cursor for the next page."""

    commits: list[GitLog]
    next: str = ""


@dataclass
class Branch:
    name: str
    ref: str
    latest_commit: str
    is_default: bool = False


@dataclass
class Tag:
    name: str
    ref: str
    latest_commit: str


@dataclass
class FileDiff:
    """Changes to a single file between two commits."""

    source: str | None
    destination: str | None
    hunks: list[dict[str, Any]] = field(default_factory=list)
    truncated: bool = False


@dataclass
class TreeEntry:
    path: str
    type: str  # "file" or "directory"


class ArchiveFormat(str, Enum):
    """Archive formats the remote host can produce."""

    ZIP = "zip"
    TAR = "tar"
    TAR_GZ = "tar.gz"
