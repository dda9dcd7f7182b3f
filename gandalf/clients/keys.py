"""SSH keys resource client."""

from typing import TYPE_CHECKING

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from gandalf.clients.paging import iter_pages
from gandalf.exceptions import DuplicateKey, InvalidKey, KeyNotFound, RemoteGatewayError
from gandalf.types.users import SSHKey

if TYPE_CHECKING:
    from gandalf.transport import HTTPTransport

KEYS_PATH = "/ssh/1.0/keys"


def validate_public_key(text: str) -> None:
    """
    Check that ``text`` is an OpenSSH public key line.

    Raises:
        InvalidKey: If the key cannot be parsed
    """
    try:
        serialization.load_ssh_public_key(text.strip().encode())
    except (ValueError, UnsupportedAlgorithm) as e:
        raise InvalidKey(f"Invalid key: {e}") from e


class KeysClient:
    """Client for a user's SSH public keys."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def add(self, user: str, label: str, text: str) -> SSHKey:
        """
        Register a public key for a user.

        Raises:
            InvalidKey: If the key cannot be parsed
            DuplicateKey: If the key is already registered
        """
        validate_public_key(text)
        try:
            data = self.transport.request(
                "POST",
                KEYS_PATH,
                params={"user": user},
                body={"text": text.strip(), "label": label},
            )
        except RemoteGatewayError as e:
            if e.status_code == 409:
                raise DuplicateKey() from e
            raise
        return SSHKey(
            key_id=data.get("id", 0),
            label=data.get("label", label),
            text=data.get("text", text.strip()),
        )

    def add_many(self, user: str, keys: dict[str, str]) -> list[SSHKey]:
        """
        Register several keys, validating all of them before any is sent.

        Raises:
            InvalidKey: If any key cannot be parsed
            DuplicateKey: If a key is already registered
        """
        for text in keys.values():
            validate_public_key(text)
        return [self.add(user, label, text) for label, text in keys.items()]

    def list(self, user: str) -> list[SSHKey]:
        """List a user's keys."""
        return [
            SSHKey(key_id=k["id"], label=k.get("label", ""), text=k.get("text", ""))
            for k in iter_pages(self.transport, KEYS_PATH, params={"user": user})
        ]

    def remove(self, user: str, key_id: int) -> None:
        """
        Remove one key.

        Raises:
            KeyNotFound: If the key does not exist
        """
        try:
            self.transport.request("DELETE", f"{KEYS_PATH}/{key_id}", params={"user": user})
        except RemoteGatewayError as e:
            if e.status_code == 404:
                raise KeyNotFound() from e
            raise

    def remove_all(self, user: str) -> None:
        """Remove every key of a user."""
        self.transport.request("DELETE", KEYS_PATH, params={"user": user})
