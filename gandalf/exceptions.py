"""Gandalf exception classes."""


class GandalfError(Exception):
    """Base exception for all gandalf errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GandalfError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class MalformedCommand(GandalfError):
    """Raised when an SSH command does not match the git command grammar."""

    def __init__(self, message: str) -> None:
        super().__init__("MALFORMED_COMMAND", message)


class AccessDenied(GandalfError):
    """Raised when a user lacks the permission a command requires."""

    def __init__(self, message: str) -> None:
        super().__init__("ACCESS_DENIED", message)


class InvalidRepository(GandalfError):
    """Raised when a repository breaks its invariants (bad name, no users)."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_REPOSITORY", message)


class RepositoryAlreadyExists(GandalfError):
    """Raised when creating a repository whose name is taken."""

    def __init__(self, name: str) -> None:
        super().__init__("REPOSITORY_ALREADY_EXISTS", "repository already exists")
        self.name = name


class RepositoryNotFound(GandalfError):
    """Raised when a repository does not exist on the remote host."""

    def __init__(self, name: str | None = None) -> None:
        super().__init__("REPOSITORY_NOT_FOUND", "repository not found")
        self.name = name


class RemoteGatewayError(GandalfError):
    """Raised on remote host failures (timeouts, connection and HTTP errors)."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(code, message)
        self.status_code = status_code
        self.cause = cause


class CloneError(GandalfError):
    """Base exception for working clone failures.

    ``output`` holds whatever the git process wrote before failing.
    """

    code = "CLONE_ERROR"

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(self.code, message)
        self.output = output


class CloneUnavailable(CloneError):
    """Raised when a working clone cannot be allocated."""

    code = "CLONE_UNAVAILABLE"


class CloneGone(CloneError):
    """Raised when the clone directory no longer exists."""

    code = "CLONE_GONE"


class CheckoutFailed(CloneError):
    code = "CHECKOUT_FAILED"


class StageFailed(CloneError):
    code = "STAGE_FAILED"


class CommitFailed(CloneError):
    code = "COMMIT_FAILED"


class PushFailed(CloneError):
    code = "PUSH_FAILED"


class InvalidArchive(GandalfError):
    """Raised when an uploaded archive cannot be applied to a clone."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_ARCHIVE", message)


class UserNotFound(GandalfError):
    def __init__(self, name: str) -> None:
        super().__init__("USER_NOT_FOUND", f"user {name} not found")
        self.name = name


class InvalidUser(GandalfError):
    def __init__(self, message: str) -> None:
        super().__init__("INVALID_USER", message)


class DuplicateKey(GandalfError):
    def __init__(self, message: str = "Duplicate key") -> None:
        super().__init__("DUPLICATE_KEY", message)


class InvalidKey(GandalfError):
    def __init__(self, message: str = "Invalid key") -> None:
        super().__init__("INVALID_KEY", message)


class KeyNotFound(GandalfError):
    def __init__(self, message: str = "Key not found") -> None:
        super().__init__("KEY_NOT_FOUND", message)
