"""User and SSH key data models."""

from dataclasses import dataclass


@dataclass
class User:
    name: str


@dataclass
class SSHKey:
    """Public key registered for a user on the remote host."""

    key_id: int
    label: str
    text: str

    def __str__(self) -> str:
        return self.text
