"""
Git access for releaseflow.

The layer is split in two so the version calculation can be exercised
against an in-memory commit graph:

    - GitRunner: runs the git executable (through GitPython) in a repository
    - GitPrimitives: the read-only queries the calculation needs, parsed into
      GitCommitInfo records

Release branch discovery, which also needs the versioning strategy, lives
in releaseflow.git.utils and is not imported here.
"""

from .commit import GitCommitInfo
from .primitives import GitPrimitives, parse_commit_line
from .runner import GitExecResult, GitRunner

__all__ = [
    "GitCommitInfo",
    "GitExecResult",
    "GitPrimitives",
    "GitRunner",
    "parse_commit_line",
]
