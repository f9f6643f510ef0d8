"""Rendering of a BuildVersionInfo for CI pipelines."""

from enum import Enum
from typing import List

from releaseflow.info import BuildVersionInfo

AZURE_VARIABLE_PREFIX = "ReleaseFlowVersion"

# Azure Pipelines variable name -> camelCase output key
AZURE_VARIABLES = {
    "Major": "major",
    "Minor": "minor",
    "Patch": "patch",
    "MajorMinorPatch": "majorMinorPatch",
    "BranchName": "branchName",
    "BuildType": "buildType",
    "PreReleaseLabel": "preReleaseLabel",
    "Sha": "sha",
    "ShortSha": "shortSha",
    "CommitDate": "commitDate",
    "CommitsSinceVersionSource": "commitsSinceVersionSource",
}


class OutputFormat(str, Enum):
    json = "json"
    azure_pipelines = "azure-pipelines"


def format_json(info: BuildVersionInfo, pretty: bool = False) -> str:
    return info.model_dump_json(by_alias=True, indent=2 if pretty else None)


def format_azure_pipelines(info: BuildVersionInfo) -> List[str]:
    """
    Azure Pipelines logging commands publishing the version.

    Each field is set as a ``ReleaseFlowVersion.<Name>`` pipeline variable,
    then the build number is updated to the semantic version.
    """
    values = info.model_dump(mode="json", by_alias=True)

    lines = []
    for name, key in AZURE_VARIABLES.items():
        value = values[key]
        safe_value = "" if value is None else str(value)
        lines.append(
            f"##vso[task.setvariable variable={AZURE_VARIABLE_PREFIX}.{name};]{safe_value}"
        )

    lines.append(f"##vso[build.updatebuildnumber]{info.sem_ver}")
    return lines


def render(
    info: BuildVersionInfo, output_format: OutputFormat, pretty: bool = False
) -> str:
    if OutputFormat(output_format) == OutputFormat.azure_pipelines:
        return "\n".join(format_azure_pipelines(info))
    return format_json(info, pretty)
