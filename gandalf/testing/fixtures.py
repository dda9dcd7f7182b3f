"""
Pytest fixtures for gandalf testing.

Provides common fixtures for tests that need a gateway, sample entities
or a real bare repository to clone from.
"""

import os
import shutil
import subprocess
from collections.abc import Generator
from pathlib import Path

import pytest

from gandalf.config import GandalfConfig
from gandalf.testing.fake import FakeGateway
from gandalf.types.git import GitCommit, GitUser
from gandalf.types.repos import CloneURLs, Repository
from gandalf.types.users import User

SEED_BRANCH = "master"

_GIT_IDENTITY = {
    "GIT_AUTHOR_NAME": "Seed",
    "GIT_AUTHOR_EMAIL": "seed@example.com",
    "GIT_COMMITTER_NAME": "Seed",
    "GIT_COMMITTER_EMAIL": "seed@example.com",
}


def _git(*args: str, cwd: Path) -> str:
    env = {**os.environ, **_GIT_IDENTITY}
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True, env=env
    )
    return result.stdout.strip()


def create_bare_repository(root: Path, name: str = "origin") -> Path:
    """
    Create a bare repository with one commit on ``master``.

    Returns:
        Path of the bare repository
    """
    bare = root / f"{name}.git"
    bare.mkdir(parents=True)
    _git("init", "--bare", "--quiet", cwd=bare)
    _git("symbolic-ref", "HEAD", f"refs/heads/{SEED_BRANCH}", cwd=bare)

    seed = root / f"{name}-seed"
    seed.mkdir()
    _git("init", "--quiet", cwd=seed)
    (seed / "README").write_text("seed\n")
    _git("add", "README", cwd=seed)
    _git("commit", "--quiet", "-m", "seed", cwd=seed)
    _git("push", "--quiet", str(bare), f"HEAD:refs/heads/{SEED_BRANCH}", cwd=seed)
    shutil.rmtree(seed)
    return bare


# ============================================================================
# Gateway Fixtures
# ============================================================================


@pytest.fixture
def fake_gateway() -> Generator[FakeGateway, None, None]:
    """
    Provide an empty FakeGateway knowing the users alice, bob and carol.

    Example:
        ```python
        def test_my_feature(fake_gateway):
            fake_gateway.create("team/proj", users=["alice"])
            assert fake_gateway.was_called("create")
        ```
    """
    gateway = FakeGateway(users=["alice", "bob", "carol"])
    yield gateway
    gateway.reset()


@pytest.fixture
def bare_repository(tmp_path: Path) -> Path:
    """Provide a seeded bare repository; skips when git is not installed."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return create_bare_repository(tmp_path / "remote")


@pytest.fixture
def gateway_with_clone_source(fake_gateway: FakeGateway, bare_repository: Path) -> FakeGateway:
    """Provide a FakeGateway whose repository ``team/proj`` clones from a local bare repository."""
    fake_gateway.clone_url = str(bare_repository)
    fake_gateway.create("team/proj", users=["alice"])
    return fake_gateway


# ============================================================================
# Entity Fixtures
# ============================================================================


@pytest.fixture
def sample_repository() -> Repository:
    return Repository(
        name="team/proj",
        users=["alice"],
        read_only_users=["bob"],
        is_public=False,
        clone_urls=CloneURLs(
            read_only="https://git.example.com/scm/team/proj.git",
            read_write="ssh://git@git.example.com:7999/team/proj.git",
        ),
    )


@pytest.fixture
def sample_user() -> User:
    return User(name="alice")


@pytest.fixture
def sample_git_user() -> GitUser:
    return GitUser(name="Alice", email="alice@example.com")


@pytest.fixture
def sample_commit(sample_git_user: GitUser) -> GitCommit:
    return GitCommit(
        message="update content",
        author=sample_git_user,
        committer=GitUser(name="Gandalf", email="gandalf@example.com"),
        branch="master",
    )


@pytest.fixture
def gandalf_config(tmp_path: Path) -> GandalfConfig:
    """Provide a config rooted in a temporary directory."""
    return GandalfConfig(
        bare_location=str(tmp_path / "repositories"),
        bare_template=str(tmp_path / "template"),
        temp_dir=str(tmp_path / "clones"),
        api_url="https://git.example.com/rest",
        api_username="gandalf",
        api_password="secret",
    )
