"""
Build version calculation.

The ref being built is classified by an ordered chain of matchers, each of
which either declines or returns a BuildContext:

    1. release branch commit   refs/heads/<release prefix><number>   beta
    2. trunk commit            refs/heads/<trunk>                    alpha
    3. pull request            refs/pull/<n>/merge                   pr.<n>
    4. release tag             refs/tags/v<version>                  (none)
    5. working branch          anything else                         <branch>

The first matcher that accepts the ref wins. The context's version source is
then incremented according to the build type, and the number of commits
between the version source and the built commit is added.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from releaseflow.config import Options
from releaseflow.constants import ALPHA_LABEL, BETA_LABEL, HEADS_REF_PREFIX, BuildType
from releaseflow.exceptions import (
    InvariantError,
    ReleaseBranchFormatError,
    ReleaseTagFormatError,
    UnsupportedRefError,
)
from releaseflow.git.commit import GitCommitInfo
from releaseflow.git.primitives import GitPrimitives
from releaseflow.git.utils import GitAbstractionUtils
from releaseflow.info import BuildVersionInfo
from releaseflow.versioning import (
    Branch,
    ReleaseBranchNumber,
    TagVersionSource,
    Version,
    VersionSource,
    create_strategy,
)

logger = logging.getLogger(__name__)

PULL_REQUEST_REF_REGEX = re.compile(r"^refs/pull/(?P<number>\d+)/merge$")
RELEASE_TAG_REF_REGEX = re.compile(r"^refs/(?:heads/)?tags/(?P<version>v.*)$")
REF_KIND_PREFIX_REGEX = re.compile(r"^refs/[^/]+/")


class InitialCommitVersionSource(VersionSource):
    """The root commit of the repository, version 0.0.0."""

    @property
    def version(self) -> Version:
        return Version(0, 0, 0)

    def __str__(self) -> str:
        return f"initial repository commit, version = {self.version}"


class ReleaseBranchVersionSource(VersionSource):
    """
    A release branch with no release tag yet.

    The anchor commit is the fork point of the branch from trunk.
    """

    def __init__(self, fork_commit: GitCommitInfo, branch_name: str, version: Version):
        super().__init__(fork_commit)
        self.branch_name = branch_name
        self._version = version

    @property
    def version(self) -> Version:
        return self._version

    def __str__(self) -> str:
        return f"branch '{self.branch_name}', version = {self._version}"


@dataclass(frozen=True)
class BuildContext:
    """Why a ref is being built, and where its version comes from."""

    build_type: BuildType
    version_source: VersionSource
    pre_release_label: Optional[str]
    short_source_branch_name: str
    is_release_branch_target: bool


def sanitize_pre_release_label(label: str) -> str:
    """
    Turn a branch name into a valid semver pre-release identifier series.

    Characters outside ``[0-9A-Za-z-.]`` become hyphens, empty identifiers
    are dropped and numeric identifiers lose their leading zeros, e.g.
    ``feature.012..my-feature.001`` gives ``feature.12.my-feature.1``.
    """
    label = re.sub(r"[^0-9A-Za-z\-.]", "-", label)
    identifiers = []
    for identifier in label.split("."):
        if not identifier:
            continue
        if re.fullmatch(r"[0-9]+", identifier):
            identifier = str(int(identifier))
        identifiers.append(identifier)
    return ".".join(identifiers)


def _short_branch_name(ref: str) -> str:
    if ref.startswith(HEADS_REF_PREFIX):
        return ref[len(HEADS_REF_PREFIX) :]
    return ref


BuildContextMatcher = Callable[
    [str, GitCommitInfo, Optional[str]], Optional[BuildContext]
]


class BuildVersionCalculator:
    """
    Calculates the version of a build from the state of the repository.

    Args:
        options: Repository and invocation options
        git: Git primitives to query; defaults to the repository in the
            current directory
        git_utils: Release branch discovery; built from ``git`` if omitted
    """

    def __init__(
        self,
        options: Options,
        git: Optional[GitPrimitives] = None,
        git_utils: Optional[GitAbstractionUtils] = None,
    ):
        self.options = options
        logger.info(f"Using {options.strategy.kind} strategy")
        logger.debug(f"Options: {options.model_dump_json(by_alias=True)}")

        self.strategy = create_strategy(options.strategy)
        self.git = (
            git
            if git is not None
            else GitPrimitives(use_origin_branches=options.use_origin_branches)
        )
        self.git_utils = (
            git_utils
            if git_utils is not None
            else GitAbstractionUtils(self.strategy, options, self.git)
        )

        self.matchers: List[BuildContextMatcher] = [
            self._try_match_release_branch,
            self._try_match_trunk_branch,
            self._try_match_pull_request,
            self._try_match_release_tag,
            self._try_match_working_branch,
        ]

    def get_build_version_info(
        self, source_ref: str, target_branch: Optional[str] = None
    ) -> BuildVersionInfo:
        """
        Compute the version of the build of ``source_ref``.

        Args:
            source_ref: Full ref being built, e.g. ``refs/heads/main``,
                ``refs/tags/v1.2.0`` or ``refs/pull/12/merge``
            target_branch: For pull request builds, the full ref of the merge
                target, e.g. ``refs/heads/release/1.1``

        Returns:
            The computed BuildVersionInfo

        Raises:
            InputError: If the ref is not supported or is malformed
        """
        current_commit = self.git.get_commit("HEAD")
        logger.debug(f"Current commit: {current_commit.sha}")

        context = None
        for matcher in self.matchers:
            context = matcher(source_ref, current_commit, target_branch)
            if context is not None:
                break

        if context is None:
            raise UnsupportedRefError(source_ref)

        version = self.get_next_version(
            context.build_type, context.version_source, context.is_release_branch_target
        )
        commits_since_version_source = self.git.count_commits(
            current_commit.sha, context.version_source.commit.sha
        )

        return BuildVersionInfo(
            major=version.major,
            minor=version.minor,
            patch=version.patch,
            pre_release_label=context.pre_release_label,
            sha=current_commit.sha,
            build_type=context.build_type,
            branch_name=context.short_source_branch_name,
            commit_date=current_commit.date,
            commits_since_version_source=commits_since_version_source,
            version_source_sha=context.version_source.commit.sha,
        )

    compute_build_version = get_build_version_info

    def _try_match_release_branch(
        self, source_ref: str, current_commit: GitCommitInfo, target_branch=None
    ) -> Optional[BuildContext]:
        short_name = _short_branch_name(source_ref)
        prefix = self.options.release_branch_prefix
        if not short_name.startswith(prefix):
            return None

        segment = short_name[len(prefix) :]
        number = self.strategy.try_parse_release_branch_number(segment)
        if number is None:
            raise ReleaseBranchFormatError(source_ref)

        logger.debug(f"Trigger is commit to release branch '{number}'")
        return BuildContext(
            build_type=BuildType.Beta,
            version_source=self._get_version_source_from_release_branch(
                segment, number
            ),
            pre_release_label=BETA_LABEL,
            short_source_branch_name=short_name,
            is_release_branch_target=True,
        )

    def _try_match_trunk_branch(
        self, source_ref: str, current_commit: GitCommitInfo, target_branch=None
    ) -> Optional[BuildContext]:
        short_name = _short_branch_name(source_ref)
        if short_name != self.options.trunk_branch_name:
            return None

        logger.debug(f"Trigger is commit to {self.options.trunk_branch_name}")
        return BuildContext(
            build_type=BuildType.Alpha,
            version_source=self._get_version_source_from_non_release_branch(
                current_commit.sha
            ),
            pre_release_label=ALPHA_LABEL,
            short_source_branch_name=short_name,
            is_release_branch_target=False,
        )

    def _try_match_pull_request(
        self,
        source_ref: str,
        current_commit: GitCommitInfo,
        target_branch: Optional[str] = None,
    ) -> Optional[BuildContext]:
        match = PULL_REQUEST_REF_REGEX.match(source_ref)
        if not match:
            return None

        pr_number = match.group("number")
        logger.debug(f"Trigger is pull request, PR# = '{pr_number}'")

        # The first parent of the merge commit is the tip of the target branch
        merge_parent = self.git_utils.get_merge_parent(current_commit, 1)
        logger.debug(f"Merge parent is '{merge_parent.sha}'")

        if target_branch is None:
            release_branch = self._try_get_release_branch_from_commit(merge_parent)
        else:
            release_branch = self._try_get_release_branch_from_target(target_branch)

        if release_branch is not None:
            segment, number = release_branch
            version_source = self._get_version_source_from_release_branch(
                segment, number
            )
        else:
            version_source = self._get_version_source_from_non_release_branch(
                merge_parent.sha
            )

        logger.debug(
            f"isReleaseBranchTarget: {release_branch is not None}, "
            f"version source = {version_source.commit.sha}"
        )
        return BuildContext(
            build_type=BuildType.PullRequest,
            version_source=version_source,
            pre_release_label=f"pr.{pr_number}",
            short_source_branch_name=f"pull/{pr_number}/merge",
            is_release_branch_target=release_branch is not None,
        )

    def _try_match_release_tag(
        self, source_ref: str, current_commit: GitCommitInfo, target_branch=None
    ) -> Optional[BuildContext]:
        match = RELEASE_TAG_REF_REGEX.match(source_ref)
        if not match:
            return None

        tag = match.group("version")
        logger.debug(f"Trigger is release tag, version = '{tag}'")
        version_source = self.strategy.try_parse_version_source_from_tag(
            tag, current_commit
        )
        if version_source is None:
            raise ReleaseTagFormatError(tag)

        return BuildContext(
            build_type=BuildType.Release,
            version_source=version_source,
            pre_release_label=None,
            short_source_branch_name=f"tags/{tag}",
            is_release_branch_target=True,
        )

    def _try_match_working_branch(
        self, source_ref: str, current_commit: GitCommitInfo, target_branch=None
    ) -> Optional[BuildContext]:
        short_name = _short_branch_name(source_ref)
        logger.debug(f"Trigger is other branch '{source_ref}'")

        label = short_name
        for prefix in self.options.working_branch_prefixes:
            if short_name.startswith(prefix):
                if self.options.strip_branch_prefix_from_label:
                    label = short_name[len(prefix) :]
                break
        else:
            if self.options.fail_on_unknown_prefix:
                logger.debug(f"Branch '{short_name}' has no known working branch prefix")
                return None

        return BuildContext(
            build_type=BuildType.WorkingBranch,
            version_source=self._get_version_source_from_non_release_branch(
                current_commit.sha
            ),
            pre_release_label=sanitize_pre_release_label(label),
            short_source_branch_name=short_name,
            is_release_branch_target=False,
        )

    def _try_get_release_branch_from_target(self, target_branch: str):
        short_target = REF_KIND_PREFIX_REGEX.sub("", target_branch)
        prefix = self.options.release_branch_prefix
        if not short_target.startswith(prefix):
            return None

        segment = short_target[len(prefix) :]
        number = self.strategy.try_parse_release_branch_number(segment)
        if number is None:
            raise ReleaseBranchFormatError(target_branch)
        return segment, number

    def _try_get_release_branch_from_commit(self, commit: GitCommitInfo):
        regex = re.compile(rf"^{re.escape(self.options.full_release_branch_prefix)}(.*)$")
        for branch_name in commit.branches:
            match = regex.match(branch_name)
            if not match:
                continue
            number = self.strategy.try_parse_release_branch_number(match.group(1))
            if number is not None:
                return match.group(1), number
        return None

    def _get_version_source_from_release_branch(
        self, segment: str, number: ReleaseBranchNumber
    ) -> VersionSource:
        name = f"{self.options.full_release_branch_prefix}{segment}"
        release_branch = self.git_utils.get_release_branch(name)
        if release_branch is None:
            raise InvariantError(f"Unable to find release branch '{name}' for {number}")

        version_source = self.git_utils.get_highest_tagged_version(release_branch)
        if version_source is None:
            logger.debug(f"No release version tags found on branch {release_branch.name}")
            return ReleaseBranchVersionSource(
                release_branch.initial_commit,
                release_branch.name,
                release_branch.number.version,
            )
        return version_source

    def _get_version_source_from_non_release_branch(self, sha: str) -> VersionSource:
        release_branch = self.git_utils.try_get_highest_reachable_release_branch(sha)
        if release_branch is not None:
            logger.debug(f"Highest reachable release branch is '{release_branch.name}'")
            return ReleaseBranchVersionSource(
                release_branch.initial_commit,
                release_branch.name,
                release_branch.number.version,
            )

        trunk_name = self.options.full_trunk_branch_name
        logger.debug(f"No reachable release branch found from {sha}, using {trunk_name}")
        trunk = Branch(name=trunk_name, initial_commit=self.git.get_initial_commit())
        version_source = self.git_utils.get_highest_tagged_version(trunk)
        if version_source is None:
            logger.debug(f"No release version tags found on branch {trunk.name}")
            return InitialCommitVersionSource(trunk.initial_commit)
        return version_source

    def get_next_version(
        self,
        build_type: BuildType,
        version_source: VersionSource,
        is_release_branch_target: bool,
    ) -> Version:
        """Apply the increment rule of ``build_type`` to the version source."""
        base_version = self.strategy.get_base_version()
        logger.debug(f"Base release number: '{base_version}'")

        if build_type == BuildType.Release:
            return version_source.version
        if build_type == BuildType.Beta:
            return self._increment_release_branch(version_source, base_version)
        if build_type in (BuildType.Alpha, BuildType.WorkingBranch):
            return self._increment_non_release_branch(version_source, base_version)
        if build_type == BuildType.PullRequest:
            if is_release_branch_target:
                return self._increment_release_branch(version_source, base_version)
            return self._increment_non_release_branch(version_source, base_version)
        raise InvariantError(f"Build type '{build_type}' not implemented")

    def _increment_release_branch(
        self, version_source: VersionSource, base_version: Version
    ) -> Version:
        logger.info(f"Using version source from {version_source}")

        # A tag means this version has already shipped from the branch
        if isinstance(version_source, TagVersionSource):
            version = self.strategy.next_patch_version(version_source.version)
        else:
            version = version_source.version

        # The base version never overrides a release branch
        if version_source.version < base_version:
            logger.warning(
                f"Release version {version} overrides higher base version {base_version}"
            )
        return version

    def _increment_non_release_branch(
        self, version_source: VersionSource, base_version: Version
    ) -> Version:
        if version_source.version < base_version:
            logger.warning(
                f"Version source from {version_source} is behind base version "
                f"{base_version}, using base version"
            )
            return base_version

        logger.info(f"Using version source from {version_source}")
        if isinstance(version_source, ReleaseBranchVersionSource):
            return self.strategy.next_primary_version(version_source.version)
        return version_source.version
