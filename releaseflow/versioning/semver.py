"""
Semantic versioning.

Release branches are numbered ``major.minor`` (``release/1.1``) and ship
``vMAJOR.MINOR.PATCH`` tags. Since branches already pin the major number,
the primary increment on trunk bumps the minor component.
"""

import re
from dataclasses import dataclass
from typing import Optional

from releaseflow.exceptions import InvariantError
from releaseflow.git.commit import GitCommitInfo

from .branch import ReleaseBranch, ReleaseBranchNumber
from .source import TagVersionSource
from .strategy import VersioningStrategy
from .version import Version


class SemVerTagVersionSource(TagVersionSource):
    """A ``vMAJOR.MINOR.PATCH`` release tag."""

    release_version_regex = re.compile(
        r"^v(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)$"
    )

    def __init__(self, commit: GitCommitInfo, major: int, minor: int, patch: int):
        super().__init__(commit)
        self.major = major
        self.minor = minor
        self.patch = patch

    @property
    def version(self) -> Version:
        return Version(self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return (
            f"release tag 'v{self.major}.{self.minor}.{self.patch}', "
            f"version = {self.version}"
        )

    @classmethod
    def try_parse(
        cls, tag: str, commit: GitCommitInfo
    ) -> Optional["SemVerTagVersionSource"]:
        match = cls.release_version_regex.fullmatch(tag)
        if not match:
            return None
        major, minor, patch = (int(part) for part in match.groups())
        return cls(commit, major, minor, patch)


@dataclass(frozen=True)
class SemVerReleaseBranchNumber(ReleaseBranchNumber):
    major: int
    minor: int

    def compare(self, other: ReleaseBranchNumber) -> int:
        if not isinstance(other, SemVerReleaseBranchNumber):
            raise InvariantError(
                f"Cannot compare semver release number '{self}' "
                f"with {type(other).__name__} '{other}'"
            )
        if self.major == other.major:
            return self.minor - other.minor
        return self.major - other.major

    @property
    def version(self) -> Version:
        return Version(self.major, self.minor, 0)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class SemVerReleaseBranch(ReleaseBranch):
    number: SemVerReleaseBranchNumber


class SemVerVersioningStrategy(VersioningStrategy):
    """Versioning by ``major.minor`` release branches."""

    kind = "SemVer"

    # The minor number may be omitted, it then defaults to zero
    release_branch_number_regex = re.compile(r"^(0|[1-9][0-9]*)(?:\.(0|[1-9][0-9]*))?$")

    def __init__(self, options):
        self.options = options

    def try_parse_release_branch_number(
        self, value: str
    ) -> Optional[SemVerReleaseBranchNumber]:
        match = self.release_branch_number_regex.fullmatch(value)
        if not match:
            return None
        major, minor = match.groups()
        return SemVerReleaseBranchNumber(int(major), int(minor) if minor else 0)

    def try_parse_version_source_from_tag(
        self, tag: str, commit: GitCommitInfo
    ) -> Optional[SemVerTagVersionSource]:
        return SemVerTagVersionSource.try_parse(tag, commit)

    def get_base_version(self) -> Version:
        number = self.try_parse_release_branch_number(str(self.options.base_number))
        if number is None:
            raise InvariantError(
                f"Invalid baseNumber '{self.options.base_number}' in options"
            )
        return number.version

    def create_release_branch(
        self,
        name: str,
        fork_point: GitCommitInfo,
        number: ReleaseBranchNumber,
    ) -> SemVerReleaseBranch:
        return SemVerReleaseBranch(name, fork_point, number)

    def next_primary_version(self, version: Version) -> Version:
        return version.increment_minor()

    def next_patch_version(self, version: Version) -> Version:
        return version.increment_patch()
