"""Repository-related data models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CloneURLs:
    """Clone URLs advertised by the remote host."""

    read_only: str = ""
    read_write: str = ""


@dataclass
class Repository:
    """Repository information.

    ``users`` have write access, ``read_only_users`` read access. A public
    repository is readable by everyone.
    """

    name: str
    users: list[str] = field(default_factory=list)
    read_only_users: list[str] = field(default_factory=list)
    is_public: bool = False
    clone_urls: CloneURLs = field(default_factory=CloneURLs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "public": self.is_public,
            "ssh_url": self.clone_urls.read_write,
            "git_url": self.clone_urls.read_only,
        }
