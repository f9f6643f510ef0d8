"""
Versioning strategy interface.

A strategy owns every rule that depends on how release branches are
numbered: parsing branch numbers and tags, the base version, and the
increments applied to a version source. Exactly one strategy is selected
when the calculator is constructed; the calculator never inspects the
strategy kind again.
"""

from abc import ABC, abstractmethod
from typing import Optional

from releaseflow.exceptions import InvariantError
from releaseflow.git.commit import GitCommitInfo

from .branch import ReleaseBranch, ReleaseBranchNumber
from .source import TagVersionSource
from .version import Version


class VersioningStrategy(ABC):
    """The rules of one release-numbering scheme."""

    #: Discriminator matching the ``kind`` of the strategy options
    kind: str = ""

    @abstractmethod
    def try_parse_release_branch_number(
        self, value: str
    ) -> Optional[ReleaseBranchNumber]:
        """Parse the part of a release branch name after the release prefix."""

    @abstractmethod
    def try_parse_version_source_from_tag(
        self, tag: str, commit: GitCommitInfo
    ) -> Optional[TagVersionSource]:
        """Parse a tag name into a version source anchored at ``commit``."""

    @abstractmethod
    def get_base_version(self) -> Version:
        """The configured floor for non-release builds."""

    @abstractmethod
    def create_release_branch(
        self, name: str, fork_point: GitCommitInfo, number: ReleaseBranchNumber
    ) -> ReleaseBranch:
        """Create the release branch variant belonging to this strategy."""

    @abstractmethod
    def next_primary_version(self, version: Version) -> Version:
        """The version opened up on trunk once a release branch exists."""

    @abstractmethod
    def next_patch_version(self, version: Version) -> Version:
        """The next version on a release branch that has already shipped."""


def create_strategy(options) -> VersioningStrategy:
    """
    Create the strategy selected by the strategy options.

    Args:
        options: MilestoneOptions or SemVerOptions

    Returns:
        The matching VersioningStrategy

    Raises:
        InvariantError: If the options kind has no strategy
    """
    # Import here to avoid circular dependency
    from .milestone import MilestoneVersioningStrategy
    from .semver import SemVerVersioningStrategy

    strategies = {
        MilestoneVersioningStrategy.kind: MilestoneVersioningStrategy,
        SemVerVersioningStrategy.kind: SemVerVersioningStrategy,
    }
    kind = getattr(options, "kind", None)
    if kind not in strategies:
        raise InvariantError(f"Unsupported strategy kind '{kind}'")
    return strategies[kind](options)
