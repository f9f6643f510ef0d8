"""Release branch identifiers and the branches that carry them."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from releaseflow.git.commit import GitCommitInfo

from .version import Version


class ReleaseBranchNumber(ABC):
    """
    The parsed number of a release branch, e.g. ``R2`` or ``1.1``.

    Numbers are only comparable within a single versioning strategy.
    Comparing numbers produced by different strategies is a programming
    error and raises InvariantError.
    """

    @abstractmethod
    def compare(self, other: "ReleaseBranchNumber") -> int:
        """Return a negative, zero or positive number like a classic cmp()."""

    @property
    @abstractmethod
    def version(self) -> Version:
        """The version a release branch with this number starts from."""

    @abstractmethod
    def __str__(self) -> str:
        """The number as it appears in the branch name."""

    def __lt__(self, other: "ReleaseBranchNumber") -> bool:
        if not isinstance(other, ReleaseBranchNumber):
            return NotImplemented
        return self.compare(other) < 0

    def __gt__(self, other: "ReleaseBranchNumber") -> bool:
        if not isinstance(other, ReleaseBranchNumber):
            return NotImplemented
        return self.compare(other) > 0


@dataclass(frozen=True)
class Branch:
    """
    A named branch together with its initial commit.

    The initial commit is the fork point between this branch and its parent;
    it is part of both branches' history.
    """

    name: str
    initial_commit: GitCommitInfo


@dataclass(frozen=True)
class ReleaseBranch(Branch):
    """A branch dedicated to stabilising one release line."""

    number: ReleaseBranchNumber

    def compare(self, other: "ReleaseBranch") -> int:
        return self.number.compare(other.number)
