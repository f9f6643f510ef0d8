from dataclasses import dataclass, field
from datetime import datetime
from typing import List


@dataclass(frozen=True)
class GitCommitInfo:
    """A commit as reported by git, with the refs decorating it."""

    sha: str
    date: datetime
    tags: List[str] = field(default_factory=list)
    branches: List[str] = field(default_factory=list)
    is_head: bool = False
    is_detached_head: bool = False

    @property
    def short_sha(self) -> str:
        return self.sha[:7]
