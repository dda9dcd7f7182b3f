"""Access control resource client.

Bulk grant/revoke across repositories. Consistency under concurrent
writers is left to the remote host; both operations are safe to retry.
"""

from typing import TYPE_CHECKING

from gandalf.clients.repos import REPO_READ, REPO_WRITE
from gandalf.exceptions import RemoteGatewayError, RepositoryNotFound
from gandalf.logging import get_logger

if TYPE_CHECKING:
    from gandalf.clients.repos import ReposClient

logger = get_logger()


class AccessClient:
    """Client for repository access control operations."""

    def __init__(self, repos: "ReposClient") -> None:
        """
        Initialize the access client.

        Args:
            repos: Repository client used for lookups and permission calls
        """
        self.repos = repos

    def grant(
        self,
        repo_names: list[str],
        user_names: list[str],
        read_only: bool = False,
    ) -> list[str]:
        """
        Give full or read-only permission to users in all given repositories.

        Repositories or users that do not exist are skipped. The host keeps
        one permission per user, so a read-only grant leaves existing
        writers untouched.

        Returns:
            Names of the repositories that matched

        Raises:
            RepositoryNotFound: If none of the repositories exist
            RemoteGatewayError: On remote failures other than not-found
        """
        permission = REPO_READ if read_only else REPO_WRITE
        matched = []
        for name in repo_names:
            writers: list[str] = []
            if read_only:
                try:
                    writers = self.repos.get(name).users
                except RepositoryNotFound:
                    logger.info("grant: skipping unknown repository %r", name)
                    continue
            elif not self.repos.exists(name):
                logger.info("grant: skipping unknown repository %r", name)
                continue
            matched.append(name)
            for user in user_names:
                if user in writers:
                    logger.debug("grant: %r already writes to %r", user, name)
                    continue
                try:
                    self.repos.set_permission(name, user, permission)
                except RemoteGatewayError as e:
                    if e.status_code != 404:
                        raise
                    logger.info("grant: skipping unknown user %r on %r", user, name)

        if not matched:
            raise RepositoryNotFound(", ".join(repo_names))
        return matched

    def revoke(
        self,
        repo_names: list[str],
        user_names: list[str],
        read_only: bool = False,
    ) -> list[str]:
        """
        Revoke full or read-only permission from users in all given repositories.

        A user is only removed when their current permission is the one
        being revoked.

        Returns:
            Names of the repositories that matched

        Raises:
            RepositoryNotFound: If none of the repositories exist
            RemoteGatewayError: On remote failures other than not-found
        """
        matched = []
        for name in repo_names:
            try:
                repo = self.repos.get(name)
            except RepositoryNotFound:
                logger.info("revoke: skipping unknown repository %r", name)
                continue
            matched.append(name)

            members = repo.read_only_users if read_only else repo.users
            for user in user_names:
                if user not in members:
                    continue
                try:
                    self.repos.remove_permission(name, user)
                except RemoteGatewayError as e:
                    if e.status_code != 404:
                        raise

        if not matched:
            raise RepositoryNotFound(", ".join(repo_names))
        return matched
