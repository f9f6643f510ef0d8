"""
Exception classes for releaseflow.

The hierarchy separates errors caused by bad user input (unsupported refs,
malformed release branches or tags, invalid configuration) from internal
contract violations and from failures of the git executable itself.
"""

from typing import Optional, Sequence


class ReleaseFlowError(Exception):
    """Base exception for all releaseflow errors."""

    pass


class InputError(ReleaseFlowError):
    """Raised when the supplied refs or options cannot be used to compute a version."""

    pass


class ConfigurationError(InputError):
    """Raised when the repository configuration is structurally invalid."""

    pass


class UnsupportedRefError(InputError):
    """Raised when a source ref matches none of the supported build triggers."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Unsupported source ref '{ref}'")


class ReleaseBranchFormatError(InputError):
    """Raised when a release branch name does not carry a valid release number."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Release branch '{branch}' is in incorrect format")


class ReleaseTagFormatError(InputError):
    """Raised when a release tag ref does not carry a valid version."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"Release tag '{tag}' is not correctly formatted")


class InvariantError(ReleaseFlowError):
    """Raised when an internal contract is violated. Always a defect."""

    pass


class ExternalError(ReleaseFlowError):
    """Raised when the git executable fails or cannot be run."""

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        stderr: str = "",
    ):
        self.command = list(command) if command else []
        self.stderr = stderr
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
