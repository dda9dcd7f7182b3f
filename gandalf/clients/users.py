"""Users resource client."""

import re
from typing import TYPE_CHECKING

from gandalf.exceptions import InvalidUser, RemoteGatewayError, UserNotFound
from gandalf.types.users import User

if TYPE_CHECKING:
    from gandalf.transport import HTTPTransport

_INVALID_USER_NAME_RE = re.compile(r"\s|[^A-Za-z0-9_+.@-]|(^$)")


def validate_user_name(name: str) -> None:
    """
    Raises:
        InvalidUser: If the name is empty or has disallowed characters
    """
    if _INVALID_USER_NAME_RE.search(name):
        raise InvalidUser("username is not valid")


def _slug(name: str) -> str:
    # Users are known to the remote host by the part before "@".
    return name.split("@")[0]


class UsersClient:
    """Client for user lookups."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def get(self, name: str) -> User:
        """
        Get a user.

        Raises:
            InvalidUser: If the name is not valid
            UserNotFound: If the remote host does not know the user
        """
        validate_user_name(name)
        try:
            self.transport.request("GET", f"/api/1.0/users/{_slug(name)}")
        except RemoteGatewayError as e:
            if e.status_code == 404:
                raise UserNotFound(name) from e
            raise
        return User(name=name)
