"""Repository access control.

Pure predicates over already-loaded entities: they never fetch data,
never mutate state and never raise.
"""

from gandalf.exceptions import AccessDenied
from gandalf.types.repos import Repository
from gandalf.types.users import User


def has_write_permission(user: User, repo: Repository) -> bool:
    """Whether ``user`` may push to ``repo``."""
    return user.name in repo.users


def has_read_permission(user: User, repo: Repository) -> bool:
    """Whether ``user`` may fetch from ``repo``."""
    if repo.is_public:
        return True
    return user.name in repo.users or user.name in repo.read_only_users


def check_permission(user: User, repo: Repository, write: bool) -> None:
    """
    Require read or write permission.

    Raises:
        AccessDenied: If the user lacks the requested permission
    """
    if write:
        if not has_write_permission(user, repo):
            raise AccessDenied(
                f"user {user.name} does not have write access to repository {repo.name}"
            )
    elif not has_read_permission(user, repo):
        raise AccessDenied(
            f"user {user.name} does not have read access to repository {repo.name}"
        )
