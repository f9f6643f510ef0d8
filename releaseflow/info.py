"""The computed build version, as handed to the output formats."""

import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from releaseflow.constants import BuildType

SHA_REGEX = re.compile(r"^[0-9a-f]{40}$")


class BuildVersionInfo(BaseModel):
    """
    Version information about one build.

    Serialising with ``by_alias=True`` yields the camelCase keys consumed by
    CI pipelines, including the derived ``majorMinor``, ``majorMinorPatch``,
    ``shortSha`` and ``semVer`` values. ``commitDate`` is written in UTC with
    millisecond precision.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    major: int = Field(..., ge=0)
    minor: int = Field(..., ge=0)
    patch: int = Field(..., ge=0)
    pre_release_label: Optional[str] = Field(
        None, description="Pre-release label, None for release builds"
    )
    sha: str = Field(..., description="Hash of the commit being built")
    build_type: BuildType
    branch_name: str
    commit_date: datetime
    commits_since_version_source: int = Field(..., ge=0)
    version_source_sha: str = Field(
        ..., description="Hash of the commit the version is derived from"
    )

    @field_validator("sha", "version_source_sha")
    @classmethod
    def validate_sha(cls, v: str) -> str:
        if not SHA_REGEX.fullmatch(v):
            raise ValueError(f"Invalid Git hash '{v}'")
        return v

    @field_serializer("commit_date", when_used="json")
    def serialize_commit_date(self, value: datetime) -> str:
        # UTC with milliseconds, e.g. 2020-02-07T15:52:51.000Z
        value = value.astimezone(timezone.utc)
        return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"

    @computed_field(alias="majorMinor")
    @property
    def major_minor(self) -> str:
        return f"{self.major}.{self.minor}"

    @computed_field(alias="majorMinorPatch")
    @property
    def major_minor_patch(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @computed_field(alias="shortSha")
    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @computed_field(alias="semVer")
    @property
    def sem_ver(self) -> str:
        if self.build_type == BuildType.Release:
            return self.major_minor_patch
        return (
            f"{self.major_minor_patch}-{self.pre_release_label}"
            f".{self.commits_since_version_source}"
        )
