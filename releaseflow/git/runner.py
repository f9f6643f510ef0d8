import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from git import Git, Repo
from git.exc import GitCommandNotFound, InvalidGitRepositoryError, NoSuchPathError

from releaseflow.exceptions import ExternalError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitExecResult:
    """Exit status and captured output of one git invocation."""

    code: int
    stdout: str
    stderr: str


class GitRunner:
    """
    Runs git commands in a working directory.

    Non-zero exit codes are returned to the caller rather than raised, so
    callers can tell a failed query from an empty answer. The ``repo``
    property exposes the same directory as a GitPython ``Repo``.
    """

    def __init__(self, working_dir: Optional[Union[str, Path]] = None):
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()
        self._git = Git(str(self.working_dir))
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        if self._repo is None:
            try:
                self._repo = Repo(str(self.working_dir), search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise ExternalError(
                    f"Not a git repository: {self.working_dir}", ["git"], str(e)
                ) from e
        return self._repo

    def exec_command(self, args: List[str]) -> GitExecResult:
        command = ["git", *args]
        logger.debug(f"Running command {' '.join(command)}")

        try:
            code, stdout, stderr = self._git.execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
            )
        except GitCommandNotFound as e:
            raise ExternalError("Unable to run git", command, str(e)) from e

        result = GitExecResult(code=code, stdout=stdout, stderr=stderr)
        logger.debug(f"Command exit code {result.code}")
        logger.debug(f"Stdout: {result.stdout}")
        logger.debug(f"Stderr: {result.stderr}")
        return result
