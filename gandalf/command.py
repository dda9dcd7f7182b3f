"""
SSH git command parsing.

A command arriving through ``SSH_ORIGINAL_COMMAND`` must look like::

    <git-command> '[<namespace>/]<name>.git'

The namespace is optional. When present it contains only alphanumerics,
underscores, ``@``, ``-``, ``+`` and periods, does not start with a
period, and is separated from the name by exactly one slash.
"""

import os
import posixpath
import re
from dataclasses import dataclass

from gandalf.exceptions import MalformedCommand
from gandalf.logging import get_logger

logger = get_logger("ssh")

_COMMAND_RE = re.compile(
    r"^(git-[a-z-]+) '/?([A-Za-z0-9_+@-][A-Za-z0-9_+@.-]*/)?([A-Za-z0-9_-]+)\.git'$"
)

MALFORMED_MESSAGE = (
    "You've tried to execute some weird command, "
    "I'm deliberately denying you to do that, get over it."
)

WRITE_COMMANDS = frozenset({"git-receive-pack"})


@dataclass(frozen=True)
class GitCommand:
    """A validated git command and the repository it targets."""

    command: str
    namespace: str | None
    name: str

    @property
    def repository(self) -> str:
        """Repository name as known to the remote host, e.g. ``team/proj``."""
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    @property
    def path(self) -> str:
        """Repository path relative to the bare root, e.g. ``team/proj.git``."""
        return f"{self.repository}.git"

    @property
    def is_write(self) -> bool:
        return self.command in WRITE_COMMANDS

    @classmethod
    def parse(cls, raw: str | None) -> "GitCommand":
        """
        Parse a raw SSH command string.

        Raises:
            MalformedCommand: If the string does not match the grammar
        """
        match = _COMMAND_RE.match(raw or "")
        if match is None:
            raise MalformedCommand(MALFORMED_MESSAGE)
        command, namespace, name = match.groups()
        return cls(
            command=command,
            namespace=namespace.rstrip("/") if namespace else None,
            name=name,
        )


def parse_git_command(raw: str | None) -> tuple[str, str]:
    """
    Validate a raw SSH command.

    Returns:
        ``(command, repository_path)``, e.g.
        ``("git-upload-pack", "myteam/proj.git")``

    Raises:
        MalformedCommand: If the command is not an allowed git command
    """
    parsed = GitCommand.parse(raw)
    return parsed.command, parsed.path


def format_command(raw: str | None, bare_location: str) -> list[str]:
    """
    Rewrite a raw SSH command to target the physical bare repository.

    Returns:
        ``[git_command, absolute_repository_path]``

    Raises:
        MalformedCommand: If the command is not an allowed git command
    """
    try:
        parsed = GitCommand.parse(raw)
    except MalformedCommand:
        logger.error("Malformed git command: %r", raw)
        raise
    return [parsed.command, posixpath.join(bare_location, parsed.path)]


def command_from_env() -> str:
    """Return the command the SSH client asked to run."""
    return os.environ.get("SSH_ORIGINAL_COMMAND", "")
