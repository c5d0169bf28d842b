"""Error types raised while building and pushing images.

Every error carries a stable ``code`` that callers (and the CLI ``--json``
output) can use for programmatic handling.
"""

from __future__ import annotations

from collections.abc import Sequence

COMMAND_FAILED = "command_failed"
EXECUTION_ERROR = "execution_error"
DIGEST_NOT_FOUND = "digest_not_found"


class ImageError(Exception):
    """Base class for image build failures."""

    def __init__(self, message: str, code: str = "image_error") -> None:
        super().__init__(message)
        self.code = code

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"code": self.code, "message": str(self)}


class ShellCommandError(ImageError):
    """Raised when an external command fails to start or exits non-zero."""

    def __init__(
        self,
        message: str,
        command: str,
        arguments: Sequence[str],
        exit_code: int | None = None,
        output: str = "",
        code: str = COMMAND_FAILED,
    ) -> None:
        super().__init__(message, code=code)
        self.command = command
        self.arguments = list(arguments)
        self.exit_code = exit_code
        self.output = output


class DigestNotFoundError(ImageError):
    """Raised when push output does not contain an image digest."""

    def __init__(self, output: str) -> None:
        super().__init__(
            f"unable to read image digest after push: {output}",
            code=DIGEST_NOT_FOUND,
        )
        self.output = output


__all__ = [
    "COMMAND_FAILED",
    "DIGEST_NOT_FOUND",
    "EXECUTION_ERROR",
    "DigestNotFoundError",
    "ImageError",
    "ShellCommandError",
]
