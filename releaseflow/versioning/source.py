"""Version sources: the commits from which a build version is derived."""

from abc import ABC, abstractmethod

from releaseflow.git.commit import GitCommitInfo

from .version import Version


class VersionSource(ABC):
    """
    A commit plus the rule for deriving a Version from it.

    Version sources are ordered by the version they carry.
    """

    def __init__(self, commit: GitCommitInfo):
        self.commit = commit

    @property
    @abstractmethod
    def version(self) -> Version:
        """The version anchored at this source's commit."""

    @abstractmethod
    def __str__(self) -> str:
        """A human-readable description, used in log messages."""

    def compare(self, other: "VersionSource") -> int:
        return self.version.compare(other.version)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.commit.short_sha}, {self.version})"


class TagVersionSource(VersionSource):
    """A version source derived from a release tag."""

    pass
