"""
Versioning Module for releaseflow.

This module holds every rule that depends on how a repository numbers its
releases. The build calculator and the git abstractions never parse a branch
name or a tag themselves: they hand the text to the active strategy and work
with the values it returns.

ARCHITECTURAL LAYERS:
====================

1. **Core Version Logic** (version.py):
   - Version: immutable major.minor.patch with total ordering and increments

2. **Release Branches** (branch.py):
   - ReleaseBranchNumber: parsed release branch identifier, comparable only
     within one strategy
   - Branch / ReleaseBranch: a branch name plus its fork point from trunk

3. **Version Sources** (source.py):
   - VersionSource: a commit plus the rule deriving a Version from it
   - TagVersionSource: version sources read from release tags

4. **Strategies** (strategy.py, milestone.py, semver.py):
   - VersioningStrategy: parsing, base version and increment rules
   - MilestoneVersioningStrategy: ``release/R2`` branches, ``v2.1`` tags,
     primary increment bumps major
   - SemVerVersioningStrategy: ``release/1.2`` branches, ``v1.2.3`` tags,
     primary increment bumps minor
   - create_strategy: selects the strategy once, from the configured kind

The two strategies are mutually exclusive. Their parsing, comparison and
increment rules differ everywhere, so a repository uses exactly one of them
and the choice is made when the calculator is constructed.
"""

from .branch import Branch, ReleaseBranch, ReleaseBranchNumber
from .milestone import (
    MilestoneReleaseBranch,
    MilestoneReleaseBranchNumber,
    MilestoneTagVersionSource,
    MilestoneVersioningStrategy,
)
from .semver import (
    SemVerReleaseBranch,
    SemVerReleaseBranchNumber,
    SemVerTagVersionSource,
    SemVerVersioningStrategy,
)
from .source import TagVersionSource, VersionSource
from .strategy import VersioningStrategy, create_strategy
from .version import Version

__all__ = [
    # Core version type
    "Version",
    # Branches
    "Branch",
    "ReleaseBranch",
    "ReleaseBranchNumber",
    # Version sources
    "VersionSource",
    "TagVersionSource",
    # Strategies
    "VersioningStrategy",
    "create_strategy",
    "MilestoneVersioningStrategy",
    "MilestoneReleaseBranch",
    "MilestoneReleaseBranchNumber",
    "MilestoneTagVersionSource",
    "SemVerVersioningStrategy",
    "SemVerReleaseBranch",
    "SemVerReleaseBranchNumber",
    "SemVerTagVersionSource",
]
