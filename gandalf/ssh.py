"""
SSH listener.

Installed as the forced command of every key in ``authorized_keys``::

    command="gandalf-ssh alice",no-port-forwarding ssh-ed25519 AAAA...

It validates ``SSH_ORIGINAL_COMMAND``, checks the user's permission on the
target repository and runs the git command against the bare repository.
Any failure prints a single line to stderr and exits 1 without running git.
"""

import logging
import os
import subprocess
import sys

import click

from gandalf.access import check_permission
from gandalf.client import GandalfClient
from gandalf.command import GitCommand, command_from_env, format_command
from gandalf.config import GandalfConfig
from gandalf.exceptions import GandalfError
from gandalf.gateway import Gateway
from gandalf.logging import configure_logging, get_logger, syslog_handler

logger = get_logger("ssh")

SYSLOG_ADDRESS = "/dev/log"


def authorize(gateway: Gateway, username: str, raw_command: str, bare_location: str) -> list[str]:
    """
    Validate and authorize a raw SSH command.

    Returns:
        The rewritten ``[git_command, absolute_repository_path]``

    Raises:
        MalformedCommand: If the command is not an allowed git command
        RepositoryNotFound: If the repository does not exist
        UserNotFound: If the user does not exist
        AccessDenied: If the user lacks the needed permission
    """
    parsed = GitCommand.parse(raw_command)
    user = gateway.get_user(username)
    repo = gateway.get(parsed.repository)
    check_permission(user, repo, write=parsed.is_write)
    logger.info(
        "%s %s on %s granted to %s",
        "write" if parsed.is_write else "read",
        parsed.command,
        parsed.repository,
        username,
    )
    return format_command(raw_command, bare_location)


@click.command()
@click.argument("username")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (default: $GANDALF_CONFIG or /etc/gandalf.conf).",
)
@click.option("--no-syslog", is_flag=True, help="Do not log to syslog.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def main(username: str, config_path: str | None, no_syslog: bool, debug: bool) -> None:
    """Run an SSH git command on behalf of USERNAME."""
    # stderr belongs to the SSH client, so logs only go to syslog.
    if no_syslog or not os.path.exists(SYSLOG_ADDRESS):
        handler: logging.Handler = logging.NullHandler()
    else:
        handler = syslog_handler(SYSLOG_ADDRESS)
    configure_logging(level=logging.DEBUG if debug else logging.INFO, handler=handler)

    raw_command = command_from_env()
    try:
        config = GandalfConfig.from_file(config_path)
        with GandalfClient.from_config(config) as client:
            command = authorize(client, username, raw_command, config.bare_location)
    except GandalfError as e:
        logger.error("%s: %s", username, e.message)
        click.echo(e.message, err=True)
        sys.exit(1)

    try:
        result = subprocess.run(command)
    except OSError as e:
        logger.error("%s: could not run %s: %s", username, command[0], e)
        click.echo(f"could not run {command[0]}", err=True)
        sys.exit(1)
    sys.exit(result.returncode)


if __name__ == "__main__":
    main()
