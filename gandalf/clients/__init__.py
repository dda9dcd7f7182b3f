"""Gandalf resource clients."""

from gandalf.clients.access import AccessClient
from gandalf.clients.content import ContentClient
from gandalf.clients.keys import KeysClient
from gandalf.clients.repos import ReposClient
from gandalf.clients.users import UsersClient

__all__ = [
    "ReposClient",
    "AccessClient",
    "ContentClient",
    "UsersClient",
    "KeysClient",
]
