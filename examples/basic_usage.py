#!/usr/bin/env python3
"""
Gandalf - Basic Usage Example

1. Create a repository with a writer and a reader
2. Commit a zip archive to a new branch through a working clone
3. Page through the branch history
4. Remove the repository

Reads the same config file as gandalf-ssh ($GANDALF_CONFIG or
/etc/gandalf.conf).
"""

import io
import logging
import zipfile

from gandalf import GandalfClient, GandalfConfig, commit_archive, configure_logging
from gandalf.exceptions import GandalfError, RepositoryAlreadyExists
from gandalf.types.git import GitCommit, GitUser


def build_archive() -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("README.md", "# example\n")
        zf.writestr("docs/index.md", "Hello from gandalf.\n")
    return buffer.getvalue()


def main() -> None:
    configure_logging(level=logging.INFO)
    config = GandalfConfig.from_file()
    repo_name = "examples/gandalf-demo"

    with GandalfClient.from_config(config) as client:
        print("1. Creating repository...")
        try:
            repo = client.create(repo_name, users=["alice"], read_only_users=["bob"])
        except RepositoryAlreadyExists:
            repo = client.get(repo_name)
        print(f"   ssh: {repo.clone_urls.read_write}")

        print("\n2. Committing archive to branch 'docs'...")
        identity = GitUser(name="Alice", email="alice@example.com")
        head = commit_archive(
            client,
            repo_name,
            build_archive(),
            GitCommit(message="add docs", author=identity, committer=identity, branch="docs"),
            temp_root=config.temp_dir,
        )
        print(f"   pushed {head}")

        print("\n3. History of 'docs'...")
        cursor = ""
        while True:
            history = client.get_logs(repo_name, ref="docs", page_size=10, start=cursor)
            for log in history.commits:
                print(f"   {log.ref[:10]} {log.subject}")
            if not history.next:
                break
            cursor = history.next

        print("\n4. Removing repository...")
        client.remove(repo_name)


if __name__ == "__main__":
    try:
        main()
    except GandalfError as e:
        print(f"error: {e}")
        raise SystemExit(1)
