"""
Milestone versioning.

Release branches carry a single incrementing milestone counter behind an
optional prefix (``release/R1``, ``release/R2``...). A milestone ``N`` ships
as ``vN.0``; fixes on its release branch ship as ``vN.1``, ``vN.2``...
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from releaseflow.exceptions import InvariantError
from releaseflow.git.commit import GitCommitInfo

from .branch import ReleaseBranch, ReleaseBranchNumber
from .source import TagVersionSource
from .strategy import VersioningStrategy
from .version import Version

logger = logging.getLogger(__name__)

DEFAULT_MILESTONE_PREFIX = "R"


class MilestoneTagVersionSource(TagVersionSource):
    """A ``vMILESTONE.PATCH`` release tag."""

    # The third component is accepted for backwards compatibility and ignored
    release_version_regex = re.compile(
        r"^v(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)(?:\.(0|[1-9][0-9]*))?$"
    )

    def __init__(self, commit: GitCommitInfo, prefix: str, milestone: int, patch: int):
        super().__init__(commit)
        self.prefix = prefix
        self.milestone = milestone
        self.patch = patch

    @property
    def version(self) -> Version:
        return Version(self.milestone, self.patch, 0)

    def __str__(self) -> str:
        return f"release tag 'v{self.milestone}.{self.patch}', version = {self.version}"

    @classmethod
    def try_parse(
        cls, tag: str, commit: GitCommitInfo, prefix: str
    ) -> Optional["MilestoneTagVersionSource"]:
        match = cls.release_version_regex.fullmatch(tag)
        if not match:
            return None
        milestone, patch, _ = match.groups()
        return cls(commit, prefix, int(milestone), int(patch))


@dataclass(frozen=True)
class MilestoneReleaseBranchNumber(ReleaseBranchNumber):
    prefix: str
    milestone: int

    def compare(self, other: ReleaseBranchNumber) -> int:
        if not isinstance(other, MilestoneReleaseBranchNumber):
            raise InvariantError(
                f"Cannot compare milestone release number '{self}' "
                f"with {type(other).__name__} '{other}'"
            )
        return self.milestone - other.milestone

    @property
    def version(self) -> Version:
        return Version(self.milestone, 0, 0)

    def __str__(self) -> str:
        return f"{self.prefix}{self.milestone}"


@dataclass(frozen=True)
class MilestoneReleaseBranch(ReleaseBranch):
    number: MilestoneReleaseBranchNumber


class MilestoneVersioningStrategy(VersioningStrategy):
    """
    Versioning by milestone number.

    The primary increment opens the next milestone (major); the patch
    increment bumps the minor component, which counts releases made from
    one milestone's release branch.
    """

    kind = "Milestone"

    def __init__(self, options):
        self.options = options
        # An explicitly empty prefix is allowed: branches are then bare numbers
        self.prefix = (
            options.prefix if options.prefix is not None else DEFAULT_MILESTONE_PREFIX
        )
        self.release_branch_number_regex = re.compile(
            rf"^{re.escape(self.prefix)}([1-9][0-9]*)$"
        )
        logger.debug(
            f"Release branch number pattern: '{self.release_branch_number_regex.pattern}'"
        )

    def try_parse_release_branch_number(
        self, value: str
    ) -> Optional[MilestoneReleaseBranchNumber]:
        match = self.release_branch_number_regex.fullmatch(value)
        if not match:
            return None
        return MilestoneReleaseBranchNumber(self.prefix, int(match.group(1)))

    def try_parse_version_source_from_tag(
        self, tag: str, commit: GitCommitInfo
    ) -> Optional[MilestoneTagVersionSource]:
        return MilestoneTagVersionSource.try_parse(tag, commit, self.prefix)

    def get_base_version(self) -> Version:
        return Version(self.options.base_number, 0, 0)

    def create_release_branch(
        self,
        name: str,
        fork_point: GitCommitInfo,
        number: ReleaseBranchNumber,
    ) -> MilestoneReleaseBranch:
        return MilestoneReleaseBranch(name, fork_point, number)

    def next_primary_version(self, version: Version) -> Version:
        return version.increment_major()

    def next_patch_version(self, version: Version) -> Version:
        return version.increment_minor()
