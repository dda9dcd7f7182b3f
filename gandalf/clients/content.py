"""Repository content resource client.

Read-only access to branches, tags, diffs, archives, commit history and
file contents. A not-found answer becomes an empty result unless the
repository itself is missing.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TypeVar

from gandalf.clients.paging import iter_pages
from gandalf.exceptions import RemoteGatewayError, RepositoryNotFound
from gandalf.types.git import (
    ArchiveFormat,
    Branch,
    FileDiff,
    GitHistory,
    GitLog,
    GitUser,
    Tag,
    TreeEntry,
)

if TYPE_CHECKING:
    from gandalf.clients.repos import ReposClient

T = TypeVar("T")

DEFAULT_REF = "master"
DIFF_CONTEXT_LINES = 10
TREE_LIMIT = 1000


def _timestamp(value: Any) -> datetime | None:
    """Convert a millisecond epoch timestamp."""
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def _parse_person(data: dict[str, Any] | None, timestamp: Any) -> GitUser | None:
    if not data:
        return None
    return GitUser(
        name=data.get("name", ""),
        email=data.get("emailAddress", ""),
        date=_timestamp(timestamp),
    )


def _parse_commit(data: dict[str, Any]) -> GitLog:
    return GitLog(
        ref=data["id"],
        author=_parse_person(data.get("author"), data.get("authorTimestamp")),
        committer=_parse_person(data.get("committer"), data.get("committerTimestamp")),
        subject=data.get("message", ""),
        created_at=_timestamp(data.get("committerTimestamp")),
        parent=[p["id"] for p in data.get("parents", [])],
    )


def _parse_path(data: dict[str, Any] | None) -> str | None:
    if not data:
        return None
    return data.get("toString")


class ContentClient:
    """Client for read-only repository content."""

    def __init__(self, repos: "ReposClient") -> None:
        """
        Initialize the content client.

        Args:
            repos: Repository client (paths and existence checks)
        """
        self.repos = repos
        self.transport = repos.transport

    def get_branches(self, name: str) -> list[Branch]:
        """
        List branches.

        Raises:
            RepositoryNotFound: If the repository does not exist
        """
        def fetch() -> list[Branch]:
            return [
                Branch(
                    name=b["displayId"],
                    ref=b["id"],
                    latest_commit=b.get("latestCommit", ""),
                    is_default=b.get("isDefault", False),
                )
                for b in iter_pages(self.transport, f"{self.repos.path(name)}/branches")
            ]

        return self._or_empty(name, fetch, [])

    def get_tags(self, name: str) -> list[Tag]:
        """
        List tags.

        Raises:
            RepositoryNotFound: If the repository does not exist
        """
        def fetch() -> list[Tag]:
            return [
                Tag(
                    name=t["displayId"],
                    ref=t["id"],
                    latest_commit=t.get("latestCommit", ""),
                )
                for t in iter_pages(self.transport, f"{self.repos.path(name)}/tags")
            ]

        return self._or_empty(name, fetch, [])

    def get_diff(self, name: str, from_ref: str, to_ref: str) -> list[FileDiff]:
        """
        Diff two commits.

        Args:
            name: Repository name
            from_ref: Newer commit
            to_ref: Older commit to compare against

        Raises:
            RepositoryNotFound: If the repository does not exist
        """
        def fetch() -> list[FileDiff]:
            data = self.transport.request(
                "GET",
                f"{self.repos.path(name)}/diff",
                params={"from": from_ref, "to": to_ref, "contextLines": DIFF_CONTEXT_LINES},
            )
            return [
                FileDiff(
                    source=_parse_path(d.get("source")),
                    destination=_parse_path(d.get("destination")),
                    hunks=d.get("hunks", []),
                    truncated=d.get("truncated", False),
                )
                for d in data.get("diffs", [])
            ]

        return self._or_empty(name, fetch, [])

    def get_archive(
        self,
        name: str,
        ref: str,
        format: ArchiveFormat = ArchiveFormat.ZIP,
    ) -> bytes:
        """
        Download an archive of the tree at ``ref``.

        Raises:
            RepositoryNotFound: If the repository does not exist
        """
        def fetch() -> bytes:
            return self.transport.request_bytes(
                "GET",
                f"{self.repos.path(name)}/archive",
                params={"at": ref, "format": ArchiveFormat(format).value},
            )

        return self._or_empty(name, fetch, b"")

    def get_logs(
        self,
        name: str,
        ref: str = "",
        page_size: int = 1,
        path: str = "",
        start: str = "",
    ) -> GitHistory:
        """
        Get one page of commit history.

        Args:
            name: Repository name
            ref: Commit or branch to start from (default: master)
            page_size: Commits per page, coerced to at least 1
            path: Only commits touching this path
            start: Cursor from a previous page's ``next``

        Returns:
            GitHistory whose ``next`` is empty on the last page

        Raises:
            RepositoryNotFound: If the repository does not exist
        """
        params: dict[str, Any] = {"until": ref or DEFAULT_REF, "limit": max(page_size, 1)}
        if path:
            params["path"] = path
        if start:
            params["start"] = start

        def fetch() -> GitHistory:
            data = self.transport.request(
                "GET", f"{self.repos.path(name)}/commits", params=params
            )
            commits = [_parse_commit(c) for c in data.get("values", [])]
            next_start = data.get("nextPageStart")
            if data.get("isLastPage", True) or next_start is None:
                return GitHistory(commits=commits)
            return GitHistory(commits=commits, next=str(next_start))

        return self._or_empty(name, fetch, GitHistory(commits=[]))

    def get_contents(self, name: str, ref: str, path: str) -> bytes:
        """
        Get a file's raw contents at ``ref``.

        Raises:
            RepositoryNotFound: If the repository does not exist
        """
        def fetch() -> bytes:
            return self.transport.request_bytes(
                "GET",
                f"{self.repos.path(name)}/raw/{path.lstrip('/')}",
                params={"at": ref or DEFAULT_REF},
            )

        return self._or_empty(name, fetch, b"")

    def get_tree(self, name: str, ref: str = "", path: str = "") -> list[TreeEntry]:
        """
        List the entries of a directory at ``ref``.

        Raises:
            RepositoryNotFound: If the repository does not exist
        """
        def fetch() -> list[TreeEntry]:
            data = self.transport.request(
                "GET",
                f"{self.repos.path(name)}/browse/{path.strip('/')}",
                params={"at": ref or DEFAULT_REF, "limit": TREE_LIMIT},
            )
            prefix = path.strip("/")
            entries = []
            for child in data.get("children", {}).get("values", []):
                child_path = _parse_path(child.get("path")) or ""
                entries.append(
                    TreeEntry(
                        path=f"{prefix}/{child_path}" if prefix else child_path,
                        type="directory" if child.get("type") == "DIRECTORY" else "file",
                    )
                )
            return entries

        return self._or_empty(name, fetch, [])

    def _or_empty(self, name: str, fetch: Callable[[], T], empty: T) -> T:
        try:
            return fetch()
        except RemoteGatewayError as e:
            if e.status_code != 404:
                raise
            if not self.repos.exists(name):
                raise RepositoryNotFound(name) from e
            return empty
