import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from releaseflow.constants import BuildType
from releaseflow.info import BuildVersionInfo

SHA = "0123456789abcdef0123456789abcdef01234567"
SOURCE_SHA = "fedcba9876543210fedcba9876543210fedcba98"


def make_info(**overrides):
    fields = dict(
        major=1,
        minor=2,
        patch=3,
        pre_release_label="alpha",
        sha=SHA,
        build_type=BuildType.Alpha,
        branch_name="master",
        commit_date=datetime(2020, 2, 7, 15, 52, 51, tzinfo=timezone.utc),
        commits_since_version_source=4,
        version_source_sha=SOURCE_SHA,
    )
    fields.update(overrides)
    return BuildVersionInfo(**fields)


@pytest.mark.short
class TestBuildVersionInfo:
    def test_derived_fields(self):
        info = make_info()
        assert info.major_minor == "1.2"
        assert info.major_minor_patch == "1.2.3"
        assert info.short_sha == "0123456"
        assert info.sem_ver == "1.2.3-alpha.4"

    def test_release_sem_ver_has_no_suffix(self):
        info = make_info(
            build_type=BuildType.Release,
            pre_release_label=None,
            commits_since_version_source=0,
        )
        assert info.sem_ver == "1.2.3"

    @pytest.mark.parametrize(
        "sha",
        [
            "0123456",
            "0123456789ABCDEF0123456789ABCDEF01234567",
            "0123456789abcdef0123456789abcdef012345678",
            "g123456789abcdef0123456789abcdef01234567",
        ],
    )
    def test_invalid_sha(self, sha):
        with pytest.raises(ValidationError, match="Invalid Git hash"):
            make_info(sha=sha)

    def test_invalid_version_source_sha(self):
        with pytest.raises(ValidationError, match="Invalid Git hash"):
            make_info(version_source_sha="HEAD")

    def test_negative_components_rejected(self):
        with pytest.raises(ValidationError):
            make_info(minor=-1)
        with pytest.raises(ValidationError):
            make_info(commits_since_version_source=-1)

    def test_camel_case_json(self):
        data = json.loads(make_info().model_dump_json(by_alias=True))

        assert data == {
            "major": 1,
            "minor": 2,
            "patch": 3,
            "preReleaseLabel": "alpha",
            "sha": SHA,
            "buildType": "alpha",
            "branchName": "master",
            "commitDate": "2020-02-07T15:52:51.000Z",
            "commitsSinceVersionSource": 4,
            "versionSourceSha": SOURCE_SHA,
            "majorMinor": "1.2",
            "majorMinorPatch": "1.2.3",
            "shortSha": "0123456",
            "semVer": "1.2.3-alpha.4",
        }

    def test_commit_date_in_utc_with_milliseconds(self):
        cest = timezone(timedelta(hours=2))
        info = make_info(commit_date=datetime(2020, 2, 7, 17, 52, 51, 123456, cest))

        data = json.loads(info.model_dump_json(by_alias=True))

        assert data["commitDate"] == "2020-02-07T15:52:51.123Z"
        assert info.model_dump()["commit_date"] == info.commit_date

    def test_populate_by_alias(self):
        info = BuildVersionInfo.model_validate(
            json.loads(make_info().model_dump_json(by_alias=True))
        )
        assert info == make_info()

    def test_frozen(self):
        info = make_info()
        with pytest.raises(ValidationError):
            info.major = 2
