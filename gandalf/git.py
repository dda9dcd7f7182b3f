"""
Working clones.

A WorkingClone is a temporary checkout of one repository used to stage,
commit and push a content change. It serves exactly one operation and its
directory is removed on every exit path.

Example:
    ```python
    from gandalf.git import WorkingClone

    with WorkingClone(client, "myteam/proj", temp_root="/var/tmp") as clone:
        clone.checkout("feature", new=True)
        (clone.path / "README").write_text("hello")
        clone.stage_all()
        clone.commit("add readme", author, committer)
        clone.push("feature")
    ```
"""

import io
import os
import shutil
import subprocess
import tempfile
import zipfile
from enum import Enum
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

from gandalf.exceptions import (
    CheckoutFailed,
    CloneError,
    CloneGone,
    CloneUnavailable,
    CommitFailed,
    InvalidArchive,
    PushFailed,
    RepositoryNotFound,
    StageFailed,
)
from gandalf.logging import get_logger, log_git_command, mask_sensitive_data
from gandalf.types.git import GitCommit, GitUser

if TYPE_CHECKING:
    from gandalf.config import GandalfConfig
    from gandalf.gateway import Gateway

logger = get_logger("git")

CLONE_PREFIX = "gandalf_clone"


class CloneState(str, Enum):
    UNALLOCATED = "unallocated"
    CLONED = "cloned"
    CHECKED_OUT = "checked_out"
    STAGED = "staged"
    COMMITTED = "committed"
    PUSHED = "pushed"
    CLEANED = "cleaned"
    FAILED = "failed"


class WorkingClone:
    """
    Temporary working clone of a repository.

    Steps run strictly in sequence by a single owner. Any failing step
    moves the clone to FAILED; ``release()`` is still required and always
    succeeds.
    """

    def __init__(
        self,
        gateway: "Gateway",
        repository: str,
        temp_root: str | Path | None = None,
    ) -> None:
        """
        Args:
            gateway: Gateway used to resolve the clone source
            repository: Repository name
            temp_root: Directory under which clones are created
                (default: the system temp directory)
        """
        self.gateway = gateway
        self.repository = repository
        self.temp_root = temp_root
        self.path: Path | None = None
        self.state = CloneState.UNALLOCATED
        self._git: str | None = None

    @classmethod
    def from_config(
        cls, gateway: "Gateway", repository: str, config: "GandalfConfig"
    ) -> "WorkingClone":
        """Create a working clone under the configured ``repository:tempDir``."""
        return cls(gateway, repository, temp_root=config.temp_dir)

    def __enter__(self) -> "WorkingClone":
        self.allocate()
        return self

    def __exit__(self, *args: Any) -> None:
        self.release()

    def allocate(self) -> Path:
        """
        Create the temporary directory and clone the repository into it.

        Returns:
            Path of the clone

        Raises:
            CloneUnavailable: If git is missing, the repository is unknown,
                or the clone could not be created
        """
        if self.state != CloneState.UNALLOCATED:
            raise CloneUnavailable(f"clone of {self.repository} was already allocated")

        git = shutil.which("git")
        if git is None:
            raise CloneUnavailable(
                f"Error when trying to clone repository {self.repository} (git executable not found)."
            )

        try:
            repo = self.gateway.get(self.repository)
        except RepositoryNotFound as e:
            raise CloneUnavailable(
                f"Error when trying to clone repository {self.repository} (Repository does not exist)."
            ) from e

        url = repo.clone_urls.read_write or repo.clone_urls.read_only
        if not url:
            raise CloneUnavailable(
                f"Error when trying to clone repository {self.repository} (no clone URL)."
            )

        if self.temp_root is not None:
            os.makedirs(self.temp_root, exist_ok=True)
        try:
            self.path = Path(tempfile.mkdtemp(prefix=CLONE_PREFIX, dir=self.temp_root))
        except OSError as e:
            raise CloneUnavailable(
                f"Error when trying to clone repository {self.repository} "
                "(Could not create temporary directory)."
            ) from e
        self._git = git
        logger.debug("Allocated clone %s for %r", self.path, self.repository)

        result = self._run(["clone", "--quiet", url, "."])
        if result.returncode != 0:
            self.state = CloneState.FAILED
            self.release()
            raise CloneUnavailable(
                f"Error when trying to clone repository {self.repository} "
                f"({mask_sensitive_data(result.stdout.strip())}).",
                output=result.stdout,
            )

        self.state = CloneState.CLONED
        return self.path

    def checkout(self, branch: str, new: bool = False) -> None:
        """
        Check out ``branch``, creating it when ``new`` is true.

        Raises:
            CloneGone: If the clone directory no longer exists
            CheckoutFailed: If git checkout fails
        """
        if branch.startswith("-"):
            self.state = CloneState.FAILED
            raise CheckoutFailed(f"invalid branch name {branch!r}")
        args = ["checkout"]
        if new:
            args.append("-b")
        args.append(branch)
        self._step(
            args,
            CheckoutFailed,
            f"Error when trying to checkout clone {self.path} into branch {branch}",
            CloneState.CHECKED_OUT,
        )

    def stage_all(self) -> None:
        """
        Stage every working tree change.

        Raises:
            CloneGone: If the clone directory no longer exists
            StageFailed: If git add fails
        """
        self._step(
            ["add", "--all"],
            StageFailed,
            f"Error when trying to add all to clone {self.path}",
            CloneState.STAGED,
        )

    def commit(self, message: str, author: GitUser, committer: GitUser) -> None:
        """
        Commit staged changes.

        The author is passed on the command line, the committer through the
        environment. An empty message is allowed.

        Raises:
            CloneGone: If the clone directory no longer exists
            CommitFailed: If git commit fails
        """
        env = os.environ.copy()
        env["GIT_COMMITTER_NAME"] = committer.name
        env["GIT_COMMITTER_EMAIL"] = committer.email
        if committer.date is not None:
            env["GIT_COMMITTER_DATE"] = committer.date.isoformat()

        args = ["commit", "-m", message, "--author", str(author), "--allow-empty-message"]
        if author.date is not None:
            args.extend(["--date", author.date.isoformat()])

        self._step(
            args,
            CommitFailed,
            f"Error when trying to commit to clone {self.path}",
            CloneState.COMMITTED,
            env=env,
        )

    def push(self, branch: str) -> None:
        """
        Push ``branch`` to origin. A rejected push is not retried.

        Raises:
            CloneGone: If the clone directory no longer exists
            PushFailed: If git push fails or is rejected
        """
        self._step(
            ["push", "origin", branch],
            PushFailed,
            f"Error when trying to push clone {self.path} into origin's {branch} branch",
            CloneState.PUSHED,
        )

    def has_branch(self, branch: str) -> bool:
        """Whether ``branch`` exists locally or on origin."""
        self._ensure_exists()
        for ref in (f"refs/heads/{branch}", f"refs/remotes/origin/{branch}"):
            if self._run(["rev-parse", "--verify", "--quiet", ref]).returncode == 0:
                return True
        return False

    def head(self) -> str:
        """
        Commit id of HEAD.

        Raises:
            CloneGone: If the clone directory no longer exists
        """
        self._ensure_exists()
        result = self._run(["rev-parse", "HEAD"])
        if result.returncode != 0:
            raise CloneError(f"could not resolve HEAD in {self.path}", output=result.stdout)
        return result.stdout.strip()

    def extract(self, archive: bytes | IO[bytes]) -> None:
        """
        Unpack a zip archive over the working tree.

        Raises:
            CloneGone: If the clone directory no longer exists
            InvalidArchive: If the archive is not a zip file or a member
                would land outside the clone or inside .git
        """
        self._ensure_exists()
        assert self.path is not None
        if isinstance(archive, bytes):
            archive = io.BytesIO(archive)

        root = self.path.resolve()
        try:
            with zipfile.ZipFile(archive) as zf:
                members = zf.infolist()
                for member in members:
                    target = (root / member.filename).resolve()
                    if target != root and root not in target.parents:
                        raise InvalidArchive(f"archive member {member.filename!r} escapes the clone")
                    relative = target.relative_to(root).parts
                    if relative and relative[0] == ".git":
                        raise InvalidArchive(f"archive member {member.filename!r} touches .git")
                for member in members:
                    zf.extract(member, root)
        except zipfile.BadZipFile as e:
            self.state = CloneState.FAILED
            raise InvalidArchive(f"not a zip archive: {e}") from e
        except InvalidArchive:
            self.state = CloneState.FAILED
            raise

    def release(self) -> None:
        """
        Remove the clone directory.

        Safe to call more than once. Removal errors are logged, not raised.
        """
        if self.state == CloneState.CLEANED:
            logger.debug("Clone of %r already released", self.repository)
            return

        path = self.path
        self.state = CloneState.CLEANED
        if path is None:
            return
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            logger.info("Clone %s was already removed", path)
        except OSError as e:
            logger.error("Could not remove clone %s: %s", path, e)
        else:
            logger.debug("Released clone %s", path)

    def _ensure_exists(self) -> None:
        if self.path is None or not self.path.is_dir():
            raise CloneGone(f"Clone {self.path} of {self.repository} does not exist.")

    def _step(
        self,
        args: list[str],
        error: type[CloneError],
        message: str,
        next_state: CloneState,
        env: dict[str, str] | None = None,
    ) -> None:
        try:
            self._ensure_exists()
        except CloneGone:
            self.state = CloneState.FAILED
            raise

        result = self._run(args, env=env)
        if result.returncode != 0:
            self.state = CloneState.FAILED
            output = result.stdout.strip()
            logger.error("%s (%s)", message, mask_sensitive_data(output))
            raise error(f"{message} ({output}).", output=result.stdout)
        self.state = next_state

    def _run(
        self, args: list[str], env: dict[str, str] | None = None
    ) -> subprocess.CompletedProcess[str]:
        assert self._git is not None and self.path is not None
        try:
            result = subprocess.run(
                [self._git, *args],
                cwd=self.path,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                env=env,
            )
        except OSError as e:
            result = subprocess.CompletedProcess([self._git, *args], 127, stdout=str(e))
        log_git_command(args, str(self.path), result.returncode)
        return result


def commit_archive(
    gateway: "Gateway",
    repository: str,
    archive: bytes | IO[bytes],
    commit: GitCommit,
    temp_root: str | Path | None = None,
) -> str:
    """
    Commit the contents of a zip archive to ``commit.branch`` and push it.

    The branch is created when it does not exist yet.
    Pass ``temp_root=config.temp_dir`` to honour ``repository:tempDir``.

    Returns:
        Id of the pushed commit

    Raises:
        CloneError: If any clone step fails
        InvalidArchive: If the archive cannot be applied
    """
    with WorkingClone(gateway, repository, temp_root) as clone:
        clone.checkout(commit.branch, new=not clone.has_branch(commit.branch))
        clone.extract(archive)
        clone.stage_all()
        clone.commit(commit.message, commit.author, commit.committer)
        clone.push(commit.branch)
        return clone.head()
