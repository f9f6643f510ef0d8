"""
Tests for release branch discovery.

All tests in this file are marked as 'short': they run against an in-memory
commit graph.
"""

from unittest.mock import patch

import pytest

from releaseflow.config import MilestoneOptions, Options
from releaseflow.git.utils import GitAbstractionUtils
from releaseflow.versioning import Branch, Version, create_strategy
from tests.git_graph import GitGraph, create_basic_graph


def make_utils(graph, options):
    return GitAbstractionUtils(create_strategy(options.strategy), options, graph)


@pytest.fixture
def semver_graph():
    graph = create_basic_graph(release_branch="release/1.0")
    graph.branch("release/1.10", "master")
    graph.commit("release/1.10", "Stabilise")
    graph.branch("release/1.2", "master")
    graph.commit("master", "Later work")
    graph.branch("release/2.0", "master")
    return graph


@pytest.mark.short
class TestGetReleaseBranches:
    def test_sorted_highest_first(self, semver_graph, semver_options):
        utils = make_utils(semver_graph, semver_options)
        names = [b.name for b in utils.get_release_branches()]
        assert names == ["release/2.0", "release/1.10", "release/1.2", "release/1.0"]

    def test_fork_points(self, semver_graph, semver_options):
        utils = make_utils(semver_graph, semver_options)
        branches = {b.name: b for b in utils.get_release_branches()}
        # release/1.0 forked before its first tagged commit
        release_1_0 = branches["release/1.0"]
        first_release_commit = semver_graph.commits[semver_graph.tags["v1.0.0"]]
        assert release_1_0.initial_commit.sha == first_release_commit.parents[0]
        # Branches created at the trunk tip fork at that tip
        assert branches["release/2.0"].initial_commit.sha == semver_graph.branches["master"]

    def test_invalid_names_are_skipped_with_warning(self, semver_options, capture_logs):
        graph = create_basic_graph(release_branch="release/1.0")
        graph.branch("release/next", "master")
        graph.branch("release/01.0", "master")

        utils = make_utils(graph, semver_options)

        assert [b.name for b in utils.get_release_branches()] == ["release/1.0"]
        logs = capture_logs.getvalue()
        assert "Ignoring release branch 'release/next': invalid format" in logs
        assert "Ignoring release branch 'release/01.0': invalid format" in logs

    def test_branches_without_fork_point_are_dropped(self, semver_options):
        graph = create_basic_graph(release_branch="release/1.0")
        graph.commit("release/9.0", "Unrelated history", parents=[])

        utils = make_utils(graph, semver_options)
        assert [b.name for b in utils.get_release_branches()] == ["release/1.0"]

    def test_other_prefixes_are_ignored(self, semver_options):
        graph = create_basic_graph(release_branch="release/1.0")
        graph.branch("hotfix/1.1", "master")
        graph.branch("releases/1.2", "master")

        utils = make_utils(graph, semver_options)
        assert [b.name for b in utils.get_release_branches()] == ["release/1.0"]

    def test_result_is_cached(self, semver_graph, semver_options):
        utils = make_utils(semver_graph, semver_options)
        with patch.object(
            semver_graph, "list_branches", wraps=semver_graph.list_branches
        ) as list_branches:
            first = utils.get_release_branches()
            second = utils.get_release_branches()

        assert first is second
        list_branches.assert_called_once()

    def test_origin_branches(self):
        graph = create_basic_graph(release_branch="release/R1", use_origin_branches=True)
        graph.branch("release/R2", "master")
        options = Options(strategy=MilestoneOptions(), use_origin_branches=True)

        utils = make_utils(graph, options)

        names = [b.name for b in utils.get_release_branches()]
        assert names == ["origin/release/R2", "origin/release/R1"]
        assert utils.get_release_branch("origin/release/R1") is not None
        assert utils.get_release_branch("release/R1") is None

    def test_custom_prefix_and_trunk(self):
        graph = create_basic_graph(release_branch="rel-R4", trunk="main")
        options = Options(
            trunk_branch_name="main",
            release_branch_prefix="rel-",
            strategy=MilestoneOptions(),
        )
        utils = make_utils(graph, options)
        [branch] = utils.get_release_branches()
        assert branch.name == "rel-R4"
        assert branch.number.milestone == 4


@pytest.mark.short
class TestReachability:
    def test_highest_reachable_from_trunk_tip(self, semver_graph, semver_options):
        utils = make_utils(semver_graph, semver_options)
        branch = utils.try_get_highest_reachable_release_branch(
            semver_graph.branches["master"]
        )
        assert branch.name == "release/2.0"

    def test_highest_reachable_from_older_commit(self, semver_graph, semver_options):
        utils = make_utils(semver_graph, semver_options)
        # The commit before "Later work" only reaches branches forked at or before it
        older = semver_graph.get_commit("master", 1).sha

        branch = utils.try_get_highest_reachable_release_branch(older)

        assert branch.name == "release/1.10"

    def test_stops_at_first_reachable_branch(self, semver_graph, semver_options):
        utils = make_utils(semver_graph, semver_options)
        utils.get_release_branches()
        with patch.object(
            semver_graph, "is_ancestor", wraps=semver_graph.is_ancestor
        ) as is_ancestor:
            utils.try_get_highest_reachable_release_branch("master")

        is_ancestor.assert_called_once()

    def test_nothing_reachable(self, semver_options):
        graph = GitGraph()
        root = graph.commit("master", "Initial")
        graph.commit("master", "Second")
        graph.branch("release/1.0", "master")

        utils = make_utils(graph, semver_options)

        assert utils.try_get_highest_reachable_release_branch(root) is None

    def test_no_release_branches(self, semver_options):
        utils = make_utils(create_basic_graph(release_branch=None), semver_options)
        assert utils.get_release_branches() == []
        assert utils.try_get_highest_reachable_release_branch("master") is None


@pytest.mark.short
class TestHighestTaggedVersion:
    def test_highest_tag_on_release_branch(self, semver_options):
        graph = create_basic_graph(
            release_branch="release/1.0", release_tags=("v1.0.0", "v1.0.1")
        )
        utils = make_utils(graph, semver_options)
        branch = utils.get_release_branch("release/1.0")

        source = utils.get_highest_tagged_version(branch)

        assert source.version == Version(1, 0, 1)
        assert source.commit.sha == graph.tags["v1.0.1"]

    def test_highest_tag_wins_over_most_recent(self, semver_options):
        graph = create_basic_graph(
            release_branch="release/1.0", release_tags=("v1.0.3", "v1.0.2")
        )
        utils = make_utils(graph, semver_options)

        source = utils.get_highest_tagged_version(utils.get_release_branch("release/1.0"))

        assert source.version == Version(1, 0, 3)

    def test_unparseable_tags_are_ignored(self, semver_options):
        graph = create_basic_graph(release_branch="release/1.0", release_tags=("v1.0.0",))
        tagged = graph.tags["v1.0.0"]
        graph.tag("v9.9", tagged)
        graph.tag("nightly", graph.commit("release/1.0", "Nightly"))

        utils = make_utils(graph, semver_options)
        source = utils.get_highest_tagged_version(utils.get_release_branch("release/1.0"))

        assert source.version == Version(1, 0, 0)

    def test_no_tags(self, semver_options):
        graph = create_basic_graph(release_branch="release/1.0", release_tags=())
        graph.commit("release/1.0", "Stabilise")
        utils = make_utils(graph, semver_options)

        assert utils.get_highest_tagged_version(utils.get_release_branch("release/1.0")) is None

    def test_tags_on_trunk(self):
        graph = create_basic_graph(release_branch=None)
        graph.tag("v3.1", graph.get_commit("master", 1).sha)
        graph.tag("v3.0", graph.get_initial_commit().sha)
        options = Options(strategy=MilestoneOptions())
        utils = make_utils(graph, options)

        trunk = Branch("master", graph.get_initial_commit())
        source = utils.get_highest_tagged_version(trunk)

        assert source.version == Version(3, 1, 0)

    def test_merge_parent(self, semver_options):
        graph = create_basic_graph(release_branch=None)
        utils = make_utils(graph, semver_options)
        merge = graph.get_commit("master", 1)

        assert utils.get_merge_parent(merge, 1).sha == merge_parent_sha(graph, merge.sha, 0)
        assert utils.get_merge_parent(merge, 2).sha == merge_parent_sha(graph, merge.sha, 1)


def merge_parent_sha(graph, sha, index):
    return graph.commits[sha].parents[index]
