"""
Tests for the SSH listener: authorization and the gandalf-ssh command.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from gandalf.exceptions import AccessDenied, MalformedCommand, RepositoryNotFound, UserNotFound
from gandalf.ssh import authorize, main
from gandalf.testing.fake import FakeGateway

BARE = "/var/repositories"


@pytest.fixture
def gateway(fake_gateway: FakeGateway) -> FakeGateway:
    fake_gateway.create("team/proj", users=["alice"], read_only_users=["bob"])
    fake_gateway.create("team/public", users=["alice"], is_public=True)
    return fake_gateway


class TestAuthorize:
    def test_writer_may_push(self, gateway: FakeGateway) -> None:
        assert authorize(gateway, "alice", "git-receive-pack 'team/proj.git'", BARE) == [
            "git-receive-pack",
            "/var/repositories/team/proj.git",
        ]

    def test_reader_may_fetch(self, gateway: FakeGateway) -> None:
        command = authorize(gateway, "bob", "git-upload-pack '/team/proj.git'", BARE)

        assert command == ["git-upload-pack", "/var/repositories/team/proj.git"]

    def test_reader_may_not_push(self, gateway: FakeGateway) -> None:
        with pytest.raises(AccessDenied):
            authorize(gateway, "bob", "git-receive-pack 'team/proj.git'", BARE)

    def test_anyone_may_fetch_public(self, gateway: FakeGateway) -> None:
        authorize(gateway, "carol", "git-upload-pack 'team/public.git'", BARE)

    def test_stranger_may_not_fetch_private(self, gateway: FakeGateway) -> None:
        with pytest.raises(AccessDenied):
            authorize(gateway, "carol", "git-upload-pack 'team/proj.git'", BARE)

    def test_malformed_command_reaches_no_gateway(self, gateway: FakeGateway) -> None:
        gateway.reset()

        with pytest.raises(MalformedCommand):
            authorize(gateway, "alice", "ls -la", BARE)

        assert gateway.get_calls() == []

    def test_unknown_user(self, gateway: FakeGateway) -> None:
        with pytest.raises(UserNotFound):
            authorize(gateway, "mallory", "git-upload-pack 'team/proj.git'", BARE)

    def test_unknown_repository(self, gateway: FakeGateway) -> None:
        with pytest.raises(RepositoryNotFound):
            authorize(gateway, "alice", "git-upload-pack 'team/ghost.git'", BARE)


class TestMain:
    @pytest.fixture
    def config_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "gandalf.conf"
        path.write_text(f"git:\n  bare:\n    location: {BARE}\n")
        return path

    @pytest.fixture
    def runs(self, monkeypatch: pytest.MonkeyPatch, gateway: FakeGateway) -> list[list[str]]:
        client_cls = MagicMock()
        client_cls.from_config.return_value.__enter__.return_value = gateway
        monkeypatch.setattr("gandalf.ssh.GandalfClient", client_cls)

        calls: list[list[str]] = []

        def fake_run(command: list[str]) -> subprocess.CompletedProcess:
            calls.append(command)
            return subprocess.CompletedProcess(command, 0)

        monkeypatch.setattr("gandalf.ssh.subprocess.run", fake_run)
        return calls

    def invoke(self, config_file: Path, username: str, command: str):
        return CliRunner().invoke(
            main,
            [username, "--config", str(config_file), "--no-syslog"],
            env={"SSH_ORIGINAL_COMMAND": command},
        )

    def test_runs_authorized_command(self, config_file: Path, runs: list[list[str]]) -> None:
        result = self.invoke(config_file, "alice", "git-receive-pack 'team/proj.git'")

        assert result.exit_code == 0
        assert runs == [["git-receive-pack", "/var/repositories/team/proj.git"]]

    def test_denied_command_is_not_run(self, config_file: Path, runs: list[list[str]]) -> None:
        result = self.invoke(config_file, "bob", "git-receive-pack 'team/proj.git'")

        assert result.exit_code == 1
        assert "write access" in result.output
        assert runs == []

    def test_malformed_command_is_not_run(
        self, config_file: Path, runs: list[list[str]]
    ) -> None:
        result = self.invoke(config_file, "alice", "rm -rf /")

        assert result.exit_code == 1
        assert "weird command" in result.output
        assert runs == []

    def test_missing_config(self, tmp_path: Path, runs: list[list[str]]) -> None:
        result = self.invoke(tmp_path / "nope.conf", "alice", "git-upload-pack 'team/proj.git'")

        assert result.exit_code == 1
        assert runs == []

    def test_missing_git_program(
        self, config_file: Path, runs: list[list[str]], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def missing(command: list[str]) -> subprocess.CompletedProcess:
            raise FileNotFoundError(2, "No such file or directory", command[0])

        monkeypatch.setattr("gandalf.ssh.subprocess.run", missing)

        result = self.invoke(config_file, "alice", "git-upload-pack 'team/proj.git'")

        assert result.exit_code == 1
        assert "could not run git-upload-pack" in result.output
        assert isinstance(result.exception, SystemExit)
