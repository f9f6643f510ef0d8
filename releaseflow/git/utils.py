"""
Release branch discovery on top of the git primitives.

Release branches are read once per invocation and cached highest-first, so
that reachability questions can stop at the first branch that answers them.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from releaseflow.versioning.branch import Branch, ReleaseBranch
from releaseflow.versioning.source import TagVersionSource
from releaseflow.versioning.strategy import VersioningStrategy

from .commit import GitCommitInfo
from .primitives import GitPrimitives

if TYPE_CHECKING:
    from releaseflow.config import Options

logger = logging.getLogger(__name__)


class GitAbstractionUtils:
    """
    Strategy-aware queries over the repository's branches and tags.

    Args:
        strategy: The active versioning strategy
        options: Repository options (trunk name, release prefix, origin mode)
        git: Git primitives to query; defaults to the repository in the
            current directory
    """

    def __init__(
        self,
        strategy: VersioningStrategy,
        options: "Options",
        git: Optional[GitPrimitives] = None,
    ):
        self.strategy = strategy
        self.options = options
        self.git = (
            git
            if git is not None
            else GitPrimitives(use_origin_branches=options.use_origin_branches)
        )
        self._release_branches: Optional[List[ReleaseBranch]] = None

    def get_release_branches(self) -> List[ReleaseBranch]:
        """
        All release branches forked from trunk, highest number first.

        Branches whose number does not parse are skipped with a warning, and
        branches sharing no history with trunk are dropped.
        """
        if self._release_branches is not None:
            return self._release_branches

        prefix = self.options.full_release_branch_prefix
        trunk = self.options.full_trunk_branch_name

        release_branches = []
        for name in self.git.list_branches():
            if not name.startswith(prefix):
                continue

            segment = name[len(prefix) :]
            number = self.strategy.try_parse_release_branch_number(segment)
            if number is None:
                logger.warning(f"Ignoring release branch '{name}': invalid format")
                continue

            fork_point = self.git.get_fork_point(name, trunk)
            if fork_point is None:
                logger.debug(f"Ignoring release branch '{name}': not forked from {trunk}")
                continue

            release_branches.append(
                self.strategy.create_release_branch(name, fork_point, number)
            )

        release_branches.sort(key=lambda b: b.number, reverse=True)
        logger.debug(
            f"Found release branches: {', '.join(b.name for b in release_branches)}"
        )

        self._release_branches = release_branches
        return release_branches

    def get_release_branch(self, name: str) -> Optional[ReleaseBranch]:
        """Look up a discovered release branch by its full name."""
        for branch in self.get_release_branches():
            if branch.name == name:
                return branch
        return None

    def try_get_highest_reachable_release_branch(
        self, ref: str
    ) -> Optional[ReleaseBranch]:
        """
        The highest release branch whose fork point is an ancestor of ``ref``.

        Args:
            ref: Commit hash or other ref to search from

        Returns:
            The release branch, or None when no release branch is reachable
        """
        for branch in self.get_release_branches():
            if self.git.is_ancestor(branch.initial_commit.sha, ref):
                logger.debug(f"Highest release branch reachable from {ref}: {branch.name}")
                return branch
        return None

    def get_highest_tagged_version(self, branch: Branch) -> Optional[TagVersionSource]:
        """
        The highest release tag between the branch's fork point and its head.

        Tags the strategy cannot parse are ignored.
        """
        highest: Optional[TagVersionSource] = None
        for commit in self.git.get_tagged_commits_on_branch(branch):
            for tag in commit.tags:
                source = self.strategy.try_parse_version_source_from_tag(tag, commit)
                if source is None:
                    continue
                if highest is None or source.version > highest.version:
                    highest = source
        return highest

    def get_merge_parent(self, commit: GitCommitInfo, parent: int = 1) -> GitCommitInfo:
        """Resolve a parent of a merge commit."""
        return self.git.get_commit(commit.sha, parent)
