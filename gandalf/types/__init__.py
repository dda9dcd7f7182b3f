"""Gandalf type definitions.

This module exports all data model types used by the gateway.
"""

from gandalf.types.git import (
    ArchiveFormat,
    Branch,
    FileDiff,
    GitCommit,
    GitHistory,
    GitLog,
    GitUser,
    Tag,
    TreeEntry,
)
from gandalf.types.repos import CloneURLs, Repository
from gandalf.types.users import SSHKey, User

__all__ = [
    # Repository types
    "Repository",
    "CloneURLs",
    # Git content types
    "GitUser",
    "GitCommit",
    "GitLog",
    "GitHistory",
    "Branch",
    "Tag",
    "FileDiff",
    "TreeEntry",
    "ArchiveFormat",
    # User types
    "User",
    "SSHKey",
]
