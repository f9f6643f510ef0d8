from enum import Enum


class BuildType(str, Enum):
    """Why a ref is being built. Values appear verbatim in the output."""

    Alpha = "alpha"
    Beta = "beta"
    WorkingBranch = "working-branch"
    PullRequest = "pull-request"
    Release = "release"


# Prefixes stripped from refs before matching
HEADS_REF_PREFIX = "refs/heads/"
ORIGIN_PREFIX = "origin/"
REMOTES_PREFIX = "remotes/"

# Pre-release labels of the fixed build types
ALPHA_LABEL = "alpha"
BETA_LABEL = "beta"
