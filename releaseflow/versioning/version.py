"""
Version value type used throughout the versioning strategies.

This module provides a three-part release version (major.minor.patch),
using the standard packaging.version library for ordering.
"""

from packaging.version import Version as PackagingVersion


class Version:
    """
    An immutable major.minor.patch release version.

    Ordering is delegated to packaging.version.Version, which compares the
    release segment component by component.
    """

    __slots__ = ("_version",)

    def __init__(self, major: int, minor: int, patch: int):
        """
        Initialize a Version from its components.

        Args:
            major: Major component
            minor: Minor component
            patch: Patch component

        Raises:
            ValueError: If any component is negative or not an integer
        """
        for name, value in (("major", major), ("minor", minor), ("patch", patch)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(
                    f"Invalid {name} version component: {value!r}. "
                    "Expected a non-negative integer"
                )

        self._version = PackagingVersion(f"{major}.{minor}.{patch}")

    @property
    def major(self) -> int:
        """Major version component."""
        return self._version.major

    @property
    def minor(self) -> int:
        """Minor version component."""
        return self._version.minor

    @property
    def patch(self) -> int:
        """Patch version component."""
        return self._version.micro

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def __repr__(self) -> str:
        return f"Version({self.major}, {self.minor}, {self.patch})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version):
            return False
        return self._version == other._version

    def __lt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version < other._version

    def __le__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version <= other._version

    def __gt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version > other._version

    def __ge__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version >= other._version

    def __hash__(self) -> int:
        return hash(self._version)

    def compare(self, other: "Version") -> int:
        """
        Compare with another version.

        Returns:
            -1 if self < other
             0 if self == other
             1 if self > other
        """
        if self < other:
            return -1
        elif self > other:
            return 1
        else:
            return 0

    def increment_major(self) -> "Version":
        """Return a new Version with incremented major version."""
        return Version(self.major + 1, 0, 0)

    def increment_minor(self) -> "Version":
        """Return a new Version with incremented minor version."""
        return Version(self.major, self.minor + 1, 0)

    def increment_patch(self) -> "Version":
        """Return a new Version with incremented patch version."""
        return Version(self.major, self.minor, self.patch + 1)
