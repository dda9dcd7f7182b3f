"""Gandalf testing utilities.

Provides an in-memory gateway and fixtures for testing code that depends
on the remote repository gateway.
"""

from gandalf.testing.fake import FakeCall, FakeContent, FakeGateway
from gandalf.testing.fixtures import create_bare_repository

__all__ = [
    # Fake gateway
    "FakeGateway",
    "FakeCall",
    "FakeContent",
    # Helper functions
    "create_bare_repository",
]
