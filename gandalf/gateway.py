"""
Remote repository gateway interface.

Everything that talks to the remote version-control host goes through a
Gateway instance handed in by the caller. ``GandalfClient`` is the
remote-backed implementation; ``gandalf.testing.FakeGateway`` keeps state
in memory.
"""

from abc import ABC, abstractmethod

from gandalf.types.git import (
    ArchiveFormat,
    Branch,
    FileDiff,
    GitHistory,
    Tag,
    TreeEntry,
)
from gandalf.types.repos import Repository
from gandalf.types.users import SSHKey, User


class Gateway(ABC):
    """Abstract base class for remote repository gateways."""

    # Repositories

    @abstractmethod
    def create(
        self,
        name: str,
        users: list[str],
        read_only_users: list[str] | None = None,
        is_public: bool = False,
    ) -> Repository:
        pass

    @abstractmethod
    def get(self, name: str) -> Repository:
        pass

    @abstractmethod
    def remove(self, name: str) -> None:
        pass

    @abstractmethod
    def update(self, name: str, new_data: Repository) -> Repository:
        pass

    @abstractmethod
    def grant_access(
        self, repo_names: list[str], user_names: list[str], read_only: bool = False
    ) -> list[str]:
        pass

    @abstractmethod
    def revoke_access(
        self, repo_names: list[str], user_names: list[str], read_only: bool = False
    ) -> list[str]:
        pass

    # Content

    @abstractmethod
    def get_branches(self, name: str) -> list[Branch]:
        pass

    @abstractmethod
    def get_tags(self, name: str) -> list[Tag]:
        pass

    @abstractmethod
    def get_diff(self, name: str, from_ref: str, to_ref: str) -> list[FileDiff]:
        pass

    @abstractmethod
    def get_archive(
        self, name: str, ref: str, format: ArchiveFormat = ArchiveFormat.ZIP
    ) -> bytes:
        pass

    @abstractmethod
    def get_logs(
        self, name: str, ref: str = "", page_size: int = 1, path: str = "", start: str = ""
    ) -> GitHistory:
        pass

    @abstractmethod
    def get_contents(self, name: str, ref: str, path: str) -> bytes:
        pass

    @abstractmethod
    def get_tree(self, name: str, ref: str = "", path: str = "") -> list[TreeEntry]:
        pass

    # Users and keys

    @abstractmethod
    def get_user(self, name: str) -> User:
        pass

    @abstractmethod
    def add_key(self, user: str, label: str, text: str) -> SSHKey:
        pass

    @abstractmethod
    def add_keys(self, user: str, keys: dict[str, str]) -> list[SSHKey]:
        pass

    @abstractmethod
    def list_keys(self, user: str) -> list[SSHKey]:
        pass

    @abstractmethod
    def remove_key(self, user: str, key_id: int) -> None:
        pass
