"""
Pytest plugin for gandalf testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gandalf.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from gandalf.testing.fixtures import (
    bare_repository,
    fake_gateway,
    gandalf_config,
    gateway_with_clone_source,
    sample_commit,
    sample_git_user,
    sample_repository,
    sample_user,
)

__all__ = [
    "fake_gateway",
    "bare_repository",
    "gateway_with_clone_source",
    "sample_repository",
    "sample_user",
    "sample_git_user",
    "sample_commit",
    "gandalf_config",
]
