"""Hook script installation for bare repositories."""

import os
from pathlib import Path

from gandalf.clients.repos import is_valid_repository_name
from gandalf.config import GandalfConfig
from gandalf.exceptions import InvalidRepository
from gandalf.logging import get_logger

logger = get_logger()

HOOK_MODE = 0o755


def _write_hook(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    os.chmod(path, HOOK_MODE)
    logger.debug("Wrote hook %s", path)


def add_hook(
    name: str,
    repos: list[str] | None,
    content: bytes | str,
    config: GandalfConfig,
) -> list[Path]:
    """
    Install a hook script.

    With repositories, the script goes to ``<bare>/<repo>.git/hooks/<name>``
    for each of them; without, to ``<template>/hooks/<name>`` so that new
    repositories pick it up.

    Returns:
        Paths written

    Raises:
        ValueError: If the hook name contains a path separator
        InvalidRepository: If a repository name is not valid
        ConfigurationError: If the needed location is not configured
    """
    if not name or "/" in name or name in (".", ".."):
        raise ValueError(f"invalid hook name {name!r}")
    if isinstance(content, str):
        content = content.encode()

    for repo in repos or []:
        if not is_valid_repository_name(repo):
            raise InvalidRepository(f"repository name {repo!r} is not valid")

    if repos:
        bare = Path(config.get("git:bare:location"))
        paths = [bare / f"{repo}.git" / "hooks" / name for repo in repos]
    else:
        paths = [Path(config.get("git:bare:template")) / "hooks" / name]

    for path in paths:
        _write_hook(path, content)
    return paths
