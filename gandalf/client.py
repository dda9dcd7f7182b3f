"""
Gandalf main client.

Provides the remote-backed Gateway implementation.
"""

from typing import Any

from gandalf.clients import (
    AccessClient,
    ContentClient,
    KeysClient,
    ReposClient,
    UsersClient,
)
from gandalf.config import DEFAULT_PROJECT, GandalfConfig
from gandalf.gateway import Gateway
from gandalf.transport import HTTPTransport
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


class GandalfClient(Gateway):
    """
    Gateway to a Bitbucket Server style version-control host.

    Aggregates all resource clients over one HTTP transport.

    Example:
        ```python
        from gandalf import GandalfClient, GandalfConfig

        client = GandalfClient.from_config(GandalfConfig.from_file())

        repo = client.create("myteam/proj", users=["alice"])
        history = client.get_logs("myteam/proj", page_size=20)
        ```
    """

    DEFAULT_TIMEOUT = 6.0
    DEFAULT_MUTATION_TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        project: str = DEFAULT_PROJECT,
        timeout: float = DEFAULT_TIMEOUT,
        mutation_timeout: float = DEFAULT_MUTATION_TIMEOUT,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: REST root of the remote host (e.g. https://stash.example.com/rest)
            username: Basic auth user name
            password: Basic auth password
            project: Project holding repositories without a namespace
            timeout: Timeout in seconds for read requests (default: 6.0)
            mutation_timeout: Timeout in seconds for mutations (default: 30.0)
        """
        self.base_url = base_url
        self.project = project

        self._transport = HTTPTransport(
            base_url=base_url,
            username=username,
            password=password,
            timeout=timeout,
            mutation_timeout=mutation_timeout,
        )

        self.repos = ReposClient(self._transport, project)
        self.access = AccessClient(self.repos)
        self.content = ContentClient(self.repos)
        self.users = UsersClient(self._transport)
        self.keys = KeysClient(self._transport)

    @classmethod
    def from_config(cls, config: GandalfConfig) -> "GandalfClient":
        """Create a client from loaded configuration."""
        return cls(
            base_url=config.api_url,
            username=config.api_username,
            password=config.api_password,
            project=config.api_project,
            timeout=config.api_timeout,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def create(
        self,
        name: str,
        users: list[str],
        read_only_users: list[str] | None = None,
        is_public: bool = False,
    ) -> Repository:
        return self.repos.create(name, users, read_only_users, is_public)

    def get(self, name: str) -> Repository:
        return self.repos.get(name)

    def remove(self, name: str) -> None:
        self.repos.remove(name)

    def update(self, name: str, new_data: Repository) -> Repository:
        return self.repos.update(name, new_data)

    def grant_access(
        self, repo_names: list[str], user_names: list[str], read_only: bool = False
    ) -> list[str]:
        return self.access.grant(repo_names, user_names, read_only)

    def revoke_access(
        self, repo_names: list[str], user_names: list[str], read_only: bool = False
    ) -> list[str]:
        return self.access.revoke(repo_names, user_names, read_only)

    def get_branches(self, name: str) -> list[Branch]:
        return self.content.get_branches(name)

    def get_tags(self, name: str) -> list[Tag]:
        return self.content.get_tags(name)

    def get_diff(self, name: str, from_ref: str, to_ref: str) -> list[FileDiff]:
        return self.content.get_diff(name, from_ref, to_ref)

    def get_archive(
        self, name: str, ref: str, format: ArchiveFormat = ArchiveFormat.ZIP
    ) -> bytes:
        return self.content.get_archive(name, ref, format)

    def get_logs(
        self, name: str, ref: str = "", page_size: int = 1, path: str = "", start: str = ""
    ) -> GitHistory:
        return self.content.get_logs(name, ref, page_size, path, start)

    def get_contents(self, name: str, ref: str, path: str) -> bytes:
        return self.content.get_contents(name, ref, path)

    def get_tree(self, name: str, ref: str = "", path: str = "") -> list[TreeEntry]:
        return self.content.get_tree(name, ref, path)

    def get_user(self, name: str) -> User:
        return self.users.get(name)

    def add_key(self, user: str, label: str, text: str) -> SSHKey:
        return self.keys.add(user, label, text)

    def add_keys(self, user: str, keys: dict[str, str]) -> list[SSHKey]:
        return self.keys.add_many(user, keys)

    def list_keys(self, user: str) -> list[SSHKey]:
        return self.keys.list(user)

    def remove_key(self, user: str, key_id: int) -> None:
        self.keys.remove(user, key_id)

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "GandalfClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()
