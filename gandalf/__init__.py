"""Gandalf - Git repository content-access gateway."""

from gandalf.access import check_permission, has_read_permission, has_write_permission
from gandalf.client import GandalfClient
from gandalf.command import GitCommand, format_command, parse_git_command
from gandalf.config import GandalfConfig
from gandalf.exceptions import (
    AccessDenied,
    CheckoutFailed,
    CloneError,
    CloneGone,
    CloneUnavailable,
    CommitFailed,
    ConfigurationError,
    DuplicateKey,
    GandalfError,
    InvalidArchive,
    InvalidKey,
    InvalidRepository,
    InvalidUser,
    KeyNotFound,
    MalformedCommand,
    PushFailed,
    RemoteGatewayError,
    RepositoryAlreadyExists,
    RepositoryNotFound,
    StageFailed,
    UserNotFound,
)
from gandalf.gateway import Gateway
from gandalf.git import CloneState, WorkingClone, commit_archive
from gandalf.hook import add_hook
from gandalf.logging import configure_logging, get_logger
from gandalf.transport import HTTPTransport

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Gateway
    "Gateway",
    "GandalfClient",
    "GandalfConfig",
    # SSH commands
    "GitCommand",
    "parse_git_command",
    "format_command",
    # Access control
    "has_read_permission",
    "has_write_permission",
    "check_permission",
    # Working clones
    "WorkingClone",
    "CloneState",
    "commit_archive",
    # Hooks
    "add_hook",
    # Exceptions
    "GandalfError",
    "ConfigurationError",
    "MalformedCommand",
    "AccessDenied",
    "InvalidRepository",
    "RepositoryAlreadyExists",
    "RepositoryNotFound",
    "RemoteGatewayError",
    "CloneError",
    "CloneUnavailable",
    "CloneGone",
    "CheckoutFailed",
    "StageFailed",
    "CommitFailed",
    "PushFailed",
    "InvalidArchive",
    "UserNotFound",
    "InvalidUser",
    "DuplicateKey",
    "InvalidKey",
    "KeyNotFound",
    # Transport
    "HTTPTransport",
    # Logging
    "configure_logging",
    "get_logger",
]
