"""
releaseflow: build version numbers for release-flow branching.

The version of a CI build is derived from the repository alone: the branch or
tag being built, the release branches forked from trunk and the release tags
on them.
"""

__version__ = "0.1.0"

from releaseflow.config import (  # noqa: E402
    CONFIG_FILE_NAME,
    ConfigurationReader,
    MilestoneOptions,
    Options,
    RepoOptions,
    SemVerOptions,
)
from releaseflow.calculator import BuildVersionCalculator  # noqa: E402
from releaseflow.constants import BuildType  # noqa: E402
from releaseflow.exceptions import (  # noqa: E402
    ConfigurationError,
    ExternalError,
    InputError,
    InvariantError,
    ReleaseFlowError,
)
from releaseflow.info import BuildVersionInfo  # noqa: E402

__all__ = [
    "__version__",
    "CONFIG_FILE_NAME",
    "BuildType",
    "BuildVersionCalculator",
    "BuildVersionInfo",
    "ConfigurationReader",
    "ConfigurationError",
    "ExternalError",
    "InputError",
    "InvariantError",
    "MilestoneOptions",
    "Options",
    "ReleaseFlowError",
    "RepoOptions",
    "SemVerOptions",
]
