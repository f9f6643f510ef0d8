"""
Tests for the Version class.

All tests in this file are marked as 'short' since they don't require
external dependencies or a git repository.
"""

import pytest

from releaseflow.versioning import Version


@pytest.mark.short
class TestVersion:
    """Test the Version class."""

    def test_version_creation(self):
        v = Version(1, 2, 3)
        assert v.major == 1
        assert v.minor == 2
        assert v.patch == 3
        assert str(v) == "1.2.3"
        assert repr(v) == "Version(1, 2, 3)"

    def test_version_with_zeros(self):
        assert str(Version(0, 0, 0)) == "0.0.0"

    @pytest.mark.parametrize(
        "components", [(-1, 0, 0), (0, -2, 0), (1, 2, "3"), (1.5, 0, 0), (True, 0, 0)]
    )
    def test_version_creation_invalid(self, components):
        """Components must be non-negative integers."""
        with pytest.raises(ValueError, match="Expected a non-negative integer"):
            Version(*components)

    def test_version_equality(self):
        assert Version(1, 2, 3) == Version(1, 2, 3)
        assert Version(1, 2, 3) != Version(1, 2, 4)
        assert Version(1, 0, 0) != "1.0.0"
        assert hash(Version(1, 2, 3)) == hash(Version(1, 2, 3))

    def test_version_ordering_is_lexicographic(self):
        """Major decides before minor, and minor before patch."""
        ordered = [
            Version(0, 0, 0),
            Version(0, 0, 9),
            Version(0, 1, 0),
            Version(0, 10, 0),
            Version(1, 0, 0),
            Version(1, 0, 1),
            Version(2, 0, 0),
            Version(10, 0, 0),
        ]
        assert sorted(reversed(ordered)) == ordered
        for lower, higher in zip(ordered, ordered[1:]):
            assert lower < higher
            assert higher > lower
            assert lower <= higher
            assert higher >= lower
            assert lower.compare(higher) == -1
            assert higher.compare(lower) == 1

    def test_compare_equal(self):
        assert Version(3, 1, 4).compare(Version(3, 1, 4)) == 0

    def test_increment_major(self):
        assert Version(1, 2, 3).increment_major() == Version(2, 0, 0)

    def test_increment_minor(self):
        assert Version(1, 2, 3).increment_minor() == Version(1, 3, 0)

    def test_increment_patch(self):
        assert Version(1, 2, 3).increment_patch() == Version(1, 2, 4)

    def test_increment_returns_new_instance(self):
        v = Version(1, 2, 3)
        v.increment_major()
        assert v == Version(1, 2, 3)
