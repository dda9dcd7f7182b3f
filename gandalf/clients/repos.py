"""Repositories resource client."""

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from gandalf.clients.paging import iter_pages
from gandalf.exceptions import (
    InvalidRepository,
    RemoteGatewayError,
    RepositoryAlreadyExists,
    RepositoryNotFound,
)
from gandalf.logging import get_logger
from gandalf.types.repos import CloneURLs, Repository

if TYPE_CHECKING:
    from gandalf.transport import HTTPTransport

logger = get_logger()

# An optional namespace (no leading period) and exactly one slash before
# the name.
_REPOSITORY_NAME_RE = re.compile(
    r"^([A-Za-z0-9_+@-][A-Za-z0-9_+@.-]*/)?[A-Za-z0-9_-][A-Za-z0-9_.-]*$"
)

REPO_READ = "REPO_READ"
REPO_WRITE = "REPO_WRITE"
REPO_ADMIN = "REPO_ADMIN"


def is_valid_repository_name(name: str) -> bool:
    return _REPOSITORY_NAME_RE.match(name) is not None


def validate_repository(name: str, users: Iterable[str]) -> None:
    """
    Check repository invariants.

    Raises:
        InvalidRepository: If the name is malformed or there are no users
    """
    if not is_valid_repository_name(name):
        raise InvalidRepository("repository name is not valid")
    if not list(users):
        raise InvalidRepository("repository should have at least one user")


def locate(name: str, default_project: str) -> tuple[str, str]:
    """Map a repository name to its remote ``(project, slug)``."""
    namespace, sep, slug = name.rpartition("/")
    if sep:
        return namespace, slug
    return default_project, slug


def _parse_clone_urls(data: dict[str, Any]) -> CloneURLs:
    """Read clone URLs from the link list: ssh is read-write, http read-only."""
    links = data.get("links", {}).get("clone", [])
    by_name = {link.get("name"): link.get("href", "") for link in links}

    read_only = by_name.get("http")
    read_write = by_name.get("ssh")
    if read_only is None and len(links) > 0:
        read_only = links[0].get("href", "")
    if read_write is None and len(links) > 1:
        read_write = links[1].get("href", "")
    return CloneURLs(read_only=read_only or "", read_write=read_write or "")


class ReposClient:
    """Client for repository CRUD operations."""

    def __init__(self, transport: "HTTPTransport", project: str) -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
            project: Project holding repositories without a namespace
        """
        self.transport = transport
        self.project = project

    def path(self, name: str) -> str:
        """API path of a repository."""
        project, slug = locate(name, self.project)
        return f"/api/1.0/projects/{project}/repos/{slug}"

    def create(
        self,
        name: str,
        users: list[str],
        read_only_users: list[str] | None = None,
        is_public: bool = False,
    ) -> Repository:
        """
        Create a new repository and grant its initial permissions.

        If a grant fails the repository is removed again.

        Args:
            name: Repository name, optionally prefixed by one namespace
            users: Users with write access (at least one)
            read_only_users: Users with read-only access
            is_public: Whether anybody may read the repository

        Raises:
            InvalidRepository: If the name is malformed or users is empty
            RepositoryAlreadyExists: If the name is taken
            RemoteGatewayError: On any other remote failure
        """
        read_only_users = list(read_only_users or [])
        logger.debug("Creating repository %r", name)
        try:
            validate_repository(name, users)
        except InvalidRepository as e:
            logger.error("Invalid repository %r: %s", name, e.message)
            raise

        project, slug = locate(name, self.project)
        try:
            response = self.transport.request(
                "POST",
                f"/api/1.0/projects/{project}/repos",
                body={"name": slug, "scmId": "git", "public": is_public},
            )
        except RemoteGatewayError as e:
            if e.status_code == 409:
                raise RepositoryAlreadyExists(name) from e
            raise RemoteGatewayError(
                e.code,
                f"could not create repository {name}: {e.message}",
                status_code=e.status_code,
                cause=e,
            ) from e

        try:
            for user in users:
                self.set_permission(name, user, REPO_WRITE)
            for user in read_only_users:
                self.set_permission(name, user, REPO_READ)
        except RemoteGatewayError as e:
            logger.error("Granting access on %r failed, removing it: %s", name, e.message)
            self.remove(name)
            raise RemoteGatewayError(
                e.code,
                f"could not create repository {name}: {e.message}",
                status_code=e.status_code,
                cause=e,
            ) from e

        return Repository(
            name=name,
            users=list(users),
            read_only_users=read_only_users,
            is_public=is_public,
            clone_urls=_parse_clone_urls(response),
        )

    def get(self, name: str) -> Repository:
        """
        Get repository metadata and membership.

        Raises:
            RepositoryNotFound: If the repository does not exist
        """
        try:
            data = self.transport.request("GET", self.path(name))
        except RemoteGatewayError as e:
            if e.status_code == 404:
                raise RepositoryNotFound(name) from e
            raise

        users, read_only_users = self._members(name)
        return Repository(
            name=name,
            users=users,
            read_only_users=read_only_users,
            is_public=bool(data.get("public", False)),
            clone_urls=_parse_clone_urls(data),
        )

    def exists(self, name: str) -> bool:
        try:
            self.transport.request("GET", self.path(name))
        except RemoteGatewayError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    def remove(self, name: str) -> None:
        """
        Delete a repository on the remote host.

        Raises:
            RepositoryNotFound: If the repository does not exist
        """
        logger.debug("Removing repository %r", name)
        try:
            self.transport.request("DELETE", self.path(name))
        except RemoteGatewayError as e:
            if e.status_code == 404:
                raise RepositoryNotFound(name) from e
            raise

    def update(self, name: str, new_data: Repository) -> Repository:
        """
        Update repository visibility and membership.

        Only fields that differ from the current state are sent.

        Raises:
            RepositoryNotFound: If the repository does not exist
            InvalidRepository: On a rename or when no users would remain
        """
        logger.debug("Updating repository %r data", name)
        try:
            current = self.get(name)
        except RepositoryNotFound:
            logger.error("repository.update(%r): repository not found", name)
            raise

        if new_data.name and new_data.name != name:
            raise InvalidRepository("renaming repositories is not supported")
        if not new_data.users:
            raise InvalidRepository("repository should have at least one user")

        if new_data.is_public != current.is_public:
            self.transport.request("PUT", self.path(name), body={"public": new_data.is_public})

        writers = set(new_data.users)
        readers = set(new_data.read_only_users) - writers
        for user in sorted(writers - set(current.users)):
            self.set_permission(name, user, REPO_WRITE)
        for user in sorted(readers - set(current.read_only_users)):
            self.set_permission(name, user, REPO_READ)
        for user in sorted(set(current.users + current.read_only_users) - writers - readers):
            self.remove_permission(name, user)

        return self.get(name)

    def set_permission(self, name: str, user: str, permission: str) -> None:
        self.transport.request(
            "PUT",
            f"{self.path(name)}/permissions/users",
            params={"name": user, "permission": permission},
        )

    def remove_permission(self, name: str, user: str) -> None:
        self.transport.request(
            "DELETE",
            f"{self.path(name)}/permissions/users",
            params={"name": user},
        )

    def _members(self, name: str) -> tuple[list[str], list[str]]:
        """Split the permission listing into (writers, read-only users)."""
        users: list[str] = []
        read_only_users: list[str] = []
        for entry in iter_pages(self.transport, f"{self.path(name)}/permissions/users"):
            user = entry.get("user", {}).get("name")
            if not user:
                continue
            if entry.get("permission") in (REPO_WRITE, REPO_ADMIN):
                users.append(user)
            elif entry.get("permission") == REPO_READ:
                read_only_users.append(user)
        return users, read_only_users
