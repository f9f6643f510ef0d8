"""Repository options and the reader for the ``rfconfig.yml`` configuration file."""

import logging
from pathlib import Path
from typing import List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from releaseflow.constants import ORIGIN_PREFIX
from releaseflow.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "rfconfig.yml"


class _OptionsModel(BaseModel):
    # YAML keys are camelCase, Python attributes snake_case
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class MilestoneOptions(_OptionsModel):
    """Options of the Milestone versioning strategy."""

    kind: Literal["Milestone"] = "Milestone"
    prefix: Optional[str] = Field(
        "R", description="Prefix of the milestone number, e.g. 'R' in release/R2"
    )
    base_number: int = Field(
        0,
        ge=0,
        description="Milestone to start counting from when no release exists yet",
    )


class SemVerOptions(_OptionsModel):
    """Options of the SemVer versioning strategy."""

    kind: Literal["SemVer"] = "SemVer"
    base_number: str = Field(
        "0.0", description="'major.minor' to start counting from"
    )


StrategyOptions = Union[MilestoneOptions, SemVerOptions]


class RepoOptions(_OptionsModel):
    """Options specified at repository level, in the configuration file."""

    trunk_branch_name: str = Field("master", description="Name of the trunk branch")
    release_branch_prefix: str = Field(
        "release/", description="Prefix identifying release branches"
    )
    working_branch_prefixes: List[str] = Field(
        default_factory=lambda: ["feature/", "bugfix/", "hotfix/", "merge/"],
        description="Known working branch prefixes, first match wins",
    )
    strip_branch_prefix_from_label: bool = Field(
        True, description="Remove the matched working branch prefix from the label"
    )
    fail_on_unknown_prefix: bool = Field(
        True, description="Reject working branches with no known prefix"
    )
    strategy: StrategyOptions = Field(
        default_factory=SemVerOptions, discriminator="kind"
    )


class Options(RepoOptions):
    """
    Repository options plus the options of one invocation.

    ``use_origin_branches`` makes the calculation look at ``origin/<name>``
    remote-tracking branches instead of local ones. Some CI servers only set
    up the branch being built locally when cloning.
    """

    use_origin_branches: bool = False

    @classmethod
    def from_repo_options(
        cls, repo_options: RepoOptions, use_origin_branches: bool = False
    ) -> "Options":
        return cls(
            **dict(repo_options),
            use_origin_branches=use_origin_branches,
        )

    @property
    def full_trunk_branch_name(self) -> str:
        if self.use_origin_branches:
            return f"{ORIGIN_PREFIX}{self.trunk_branch_name}"
        return self.trunk_branch_name

    @property
    def full_release_branch_prefix(self) -> str:
        if self.use_origin_branches:
            return f"{ORIGIN_PREFIX}{self.release_branch_prefix}"
        return self.release_branch_prefix


class ConfigurationReader:
    """Reads RepoOptions from YAML, filling in defaults for unspecified keys."""

    def get_options_from_file(self, file_path: Union[str, Path]) -> RepoOptions:
        logger.debug(f"Reading configuration from {file_path}")
        with open(file_path, "r") as f:
            return self.get_options(f.read())

    def get_options(self, yaml_text: str) -> RepoOptions:
        """
        Parse and validate a configuration document.

        Args:
            yaml_text: The YAML document

        Returns:
            The repository options

        Raises:
            ConfigurationError: If the document is not a valid configuration
        """
        try:
            data = yaml.safe_load(yaml_text)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid configuration file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError("Invalid configuration file")

        strategy = data.get("strategy")
        if not isinstance(strategy, dict) or not isinstance(strategy.get("kind"), str):
            raise ConfigurationError(
                "Versioning strategy not specified in configuration"
            )

        kind = strategy["kind"]
        if kind == "Milestone":
            expected_type = int
        elif kind == "SemVer":
            expected_type = str
        else:
            raise ConfigurationError(f"Unsupported strategy kind '{kind}'")

        if "baseNumber" in strategy:
            base_number = strategy["baseNumber"]
            # bool is a subclass of int
            if not isinstance(base_number, expected_type) or isinstance(
                base_number, bool
            ):
                raise ConfigurationError(
                    "Invalid data type for baseNumber in configuration"
                )

        try:
            return RepoOptions.model_validate(data)
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in error["loc"]) for error in e.errors()
            )
            raise ConfigurationError(
                f"Invalid configuration file: invalid value for {fields}"
            ) from e
