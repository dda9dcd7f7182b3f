"""
Tests for hook installation.
"""

import os
import stat
from pathlib import Path

import pytest

from gandalf.config import GandalfConfig
from gandalf.exceptions import ConfigurationError, InvalidRepository
from gandalf.hook import add_hook

SCRIPT = "#!/bin/sh\necho hello\n"


def test_installs_into_each_repository(gandalf_config: GandalfConfig) -> None:
    paths = add_hook("post-receive", ["team/proj", "solo"], SCRIPT, gandalf_config)

    bare = Path(gandalf_config.bare_location)
    assert paths == [
        bare / "team/proj.git/hooks/post-receive",
        bare / "solo.git/hooks/post-receive",
    ]
    for path in paths:
        assert path.read_text() == SCRIPT
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o755


def test_installs_into_template_without_repositories(gandalf_config: GandalfConfig) -> None:
    paths = add_hook("pre-receive", None, SCRIPT.encode(), gandalf_config)

    assert paths == [Path(gandalf_config.bare_template) / "hooks" / "pre-receive"]
    assert paths[0].read_bytes() == SCRIPT.encode()


def test_overwrites_existing_hook(gandalf_config: GandalfConfig) -> None:
    add_hook("post-receive", ["team/proj"], "old", gandalf_config)

    (path,) = add_hook("post-receive", ["team/proj"], "new", gandalf_config)

    assert path.read_text() == "new"


@pytest.mark.parametrize("name", ["", ".", "..", "../post-receive", "hooks/post-receive"])
def test_rejects_bad_hook_names(gandalf_config: GandalfConfig, name: str) -> None:
    with pytest.raises(ValueError):
        add_hook(name, ["team/proj"], SCRIPT, gandalf_config)


def test_rejects_bad_repository_names(gandalf_config: GandalfConfig) -> None:
    with pytest.raises(InvalidRepository):
        add_hook("post-receive", ["team/proj", "../../etc"], SCRIPT, gandalf_config)

    assert not Path(gandalf_config.bare_location).exists()


def test_template_must_be_configured(tmp_path: Path) -> None:
    config = GandalfConfig(bare_location=str(tmp_path))

    with pytest.raises(ConfigurationError):
        add_hook("post-receive", [], SCRIPT, config)
