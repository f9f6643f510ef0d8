"""
Git-derived primitives needed for version calculation.

Ancestry, merge bases and the checked-out branch are answered by the
GitPython ``Repo`` API. Queries that need ref decorations run git directly
and parse its text output into GitCommitInfo records. Commit records are read
with the format

    <sha> <committer epoch seconds> (<decorations>)

e.g. ``01c3b44c08b3793dea4bedbdd802c9b2c24bd19f 1581090771 (HEAD -> main, tag: v1.0.0)``.
Decorations are separated by a comma followed by a space, which cannot occur
in branch or tag names, so it is safe to split on it. Their forms are:

    tag: mytag                 the commit is tagged with mytag
    HEAD -> feature/x          the commit is the tip of the checked-out branch
    HEAD                       detached HEAD
    main, origin/main          the commit is the tip of those branches
"""

import logging
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from git.exc import GitCommandError

from releaseflow.constants import ORIGIN_PREFIX, REMOTES_PREFIX
from releaseflow.exceptions import ExternalError, InvariantError

from .commit import GitCommitInfo
from .runner import GitRunner

if TYPE_CHECKING:
    from releaseflow.versioning.branch import Branch

logger = logging.getLogger(__name__)

COMMIT_FORMAT = "--format=%H %ct%d"

# Boundary commits (from --boundary) are marked with a leading '-'
COMMIT_LINE_REGEX = re.compile(
    r"^-?(?P<sha>[0-9a-f]{40})\s(?P<date>\d+)\s*(?:\((?P<decorations>.*)\))?$"
)


def parse_commit_line(line: str) -> Optional[GitCommitInfo]:
    """
    Parse one formatted log line into a GitCommitInfo.

    Args:
        line: A line produced with COMMIT_FORMAT

    Returns:
        The commit record, or None if the line is not a commit line
    """
    match = COMMIT_LINE_REGEX.match(line.strip())
    if match is None:
        return None

    tags: List[str] = []
    branches: List[str] = []
    is_head = False
    is_detached_head = False

    decorations = match.group("decorations")
    if decorations:
        for element in decorations.split(", "):
            if element.startswith("tag: "):
                tags.append(element[len("tag: ") :])
            elif element.startswith("HEAD -> "):
                is_head = True
                branches.append(element[len("HEAD -> ") :])
            elif element == "HEAD":
                is_head = True
                is_detached_head = True
            else:
                branches.append(element)

    return GitCommitInfo(
        sha=match.group("sha"),
        date=datetime.fromtimestamp(int(match.group("date")), tz=timezone.utc),
        tags=tags,
        branches=branches,
        is_head=is_head,
        is_detached_head=is_detached_head,
    )


def _external_error(what: str, error: GitCommandError) -> ExternalError:
    command = error.command
    if not isinstance(command, (list, tuple)):
        command = [command]
    return ExternalError(
        f"Error calling 'git {what}'", [str(part) for part in command], error.stderr
    )


class GitPrimitives:
    """
    The git queries consumed by the version calculation.

    Args:
        runner: Runner executing git in the repository
        use_origin_branches: Work with ``origin/*`` remote-tracking branches
            instead of local ones
    """

    def __init__(self, runner: Optional[GitRunner] = None, use_origin_branches=False):
        self.runner = runner if runner is not None else GitRunner()
        self.use_origin_branches = use_origin_branches

    def _run(self, args: List[str], what: str) -> str:
        res = self.runner.exec_command(args)
        if res.code:
            raise ExternalError(f"Error calling 'git {what}'", ["git", *args], res.stderr)
        return res.stdout

    def list_branches(self) -> List[str]:
        """
        List local and remote branch names.

        In origin mode only remote-tracking branches of ``origin`` are returned,
        as ``origin/<name>``. Symbolic HEAD pointers are never returned.
        """
        stdout = self._run(["branch", "--all", "--no-color"], "branch")

        branches = []
        for line in stdout.splitlines():
            branch = line.strip()
            # The current branch (or one checked out in another worktree) is marked
            if branch[:2] in ("* ", "+ "):
                branch = branch[2:]
            if not branch or branch.startswith("("):
                continue
            if " -> " in branch:
                continue
            if self.use_origin_branches:
                if not branch.startswith(f"{REMOTES_PREFIX}{ORIGIN_PREFIX}"):
                    continue
                branch = branch[len(REMOTES_PREFIX) :]
            branches.append(branch)

        return branches

    def get_commit(self, ref: str, parent: int = 0) -> GitCommitInfo:
        """
        Get the commit information about a ref.

        Args:
            ref: Commit hash or other ref
            parent: When positive, resolve the N-th parent of ``ref`` instead

        Returns:
            The commit record
        """
        if parent > 0:
            ref = f"{ref}^{parent}"
        logger.debug(f"Getting commit for ref '{ref}'")

        stdout = self._run(["show", "--no-patch", "--no-notes", COMMIT_FORMAT, ref], "show")
        info = parse_commit_line(stdout.strip())
        if info is None:
            raise InvariantError(f"Unable to get commit information for {ref}")
        return info

    def get_commit_range(self, rev_range: str, tagged_only=False) -> List[GitCommitInfo]:
        """
        Get commit information about a range of commits, boundary included.

        Args:
            rev_range: A git range specification, e.g. ``abc123..main``
            tagged_only: Only list commits decorated with a ref or tag
        """
        args = ["log", "--no-patch", "--boundary", COMMIT_FORMAT]
        if tagged_only:
            args.append("--simplify-by-decoration")
        args.append(rev_range)
        stdout = self._run(args, "log")

        commits = []
        for line in stdout.splitlines():
            info = parse_commit_line(line)
            if info is not None:
                commits.append(info)
        return commits

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """Return whether ``ancestor`` is an ancestor of (or equal to) ``descendant``."""
        try:
            return self.runner.repo.is_ancestor(ancestor, descendant)
        except GitCommandError as e:
            raise _external_error("merge-base", e) from e

    def count_commits(self, start_ref: str, end_ref: str) -> int:
        """Count the commits reachable from ``start_ref`` but not from ``end_ref``."""
        stdout = self._run(["rev-list", "--count", start_ref, f"^{end_ref}"], "rev-list")
        try:
            return int(stdout.strip())
        except ValueError:
            raise InvariantError(
                f"Error parsing response from 'git rev-list': {stdout}"
            ) from None

    def get_fork_point(self, ref: str, parent: str) -> Optional[GitCommitInfo]:
        """
        Get the commit on ``parent`` from which ``ref`` was branched.

        Returns:
            The merge base, or None when the two refs share no history
        """
        try:
            merge_bases = self.runner.repo.merge_base(parent, ref)
        except GitCommandError as e:
            raise _external_error("merge-base", e) from e

        if not merge_bases:
            logger.debug(f"No common ancestor between '{ref}' and '{parent}'")
            return None
        # Decorations are only available from the formatted log output
        return self.get_commit(merge_bases[0].hexsha)

    def get_initial_commit(self) -> GitCommitInfo:
        """Get the root commit of the repository (the oldest one, if several)."""
        stdout = self._run(["rev-list", "--max-parents=0", "HEAD"], "rev-list")
        roots = stdout.split()
        if not roots:
            raise InvariantError("Repository has no root commit")
        return self.get_commit(roots[-1])

    def get_tagged_commits_on_branch(self, branch: "Branch") -> List[GitCommitInfo]:
        """List the tagged commits from the branch's fork point to its head."""
        rev_range = f"{branch.initial_commit.sha}..{branch.name}"
        return [c for c in self.get_commit_range(rev_range, tagged_only=True) if c.tags]

    def get_current_branch_name(self) -> Optional[str]:
        """
        Get the full ref of the checked-out branch, e.g. ``refs/heads/main``.

        Returns:
            The ref, or None on a detached HEAD
        """
        head = self.runner.repo.head
        if head.is_detached:
            return None
        return head.reference.path
