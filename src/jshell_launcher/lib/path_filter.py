"""Classpath filtering.

Removes classpath candidates that jshell cannot load: paths that do not
exist and files that are not jar archives.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".jar"


class RejectionReason(Enum):
    """Why a classpath candidate was removed."""
    NOT_FOUND = "not_found"
    UNSUPPORTED_KIND = "unsupported_kind"


@dataclass(frozen=True)
class PathRejection:
    """A removed candidate and the reason it was removed."""
    path: str
    reason: RejectionReason


@dataclass
class FilteredClasspath:
    """Classpath entries that survived filtering, in input order."""

    paths: List[str] = field(default_factory=list)
    rejections: List[PathRejection] = field(default_factory=list, compare=False)

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def join(self, separator: str = os.pathsep) -> str:
        """Join entries with every entry preceded by the separator.

        An empty classpath joins to an empty string.
        """
        return "".join(separator + path for path in self.paths)


class PathFilter:
    """Filter classpath candidates against the filesystem."""

    def __init__(self, archive_suffix: str = ARCHIVE_SUFFIX):
        self.archive_suffix = archive_suffix

    def _check(self, candidate: str) -> RejectionReason | None:
        try:
            mode = os.stat(candidate).st_mode
        except (OSError, ValueError):
            return RejectionReason.NOT_FOUND

        if stat.S_ISDIR(mode):
            return None
        if candidate.endswith(self.archive_suffix):
            return None
        return RejectionReason.UNSUPPORTED_KIND

    def filter(self, candidates: Iterable[str]) -> FilteredClasspath:
        """Filter classpath candidates.

        Args:
            candidates: Ordered candidate paths

        Returns:
            Accepted paths in input order, plus a record of every rejection
        """
        result = FilteredClasspath()

        for candidate in candidates:
            reason = self._check(candidate)
            if reason is None:
                result.paths.append(candidate)
                continue

            result.rejections.append(PathRejection(candidate, reason))
            if reason is RejectionReason.NOT_FOUND:
                logger.warning(
                    f"Removing: {candidate} from the classpath.{os.linesep}"
                    f"If this is unexpected, make sure the project was built beforehand "
                    f"by running the build step that produces it (usually `install`, "
                    f"`test-compile` or `compile`). For example:{os.linesep}"
                    f"mvn test-compile"
                )
            else:
                logger.debug(
                    f"Removing: {candidate} from the classpath because it is unsupported in jshell."
                )

        return result


def filter_classpath(candidates: Iterable[str]) -> FilteredClasspath:
    """Filter candidates with the default jar-only filter."""
    return PathFilter().filter(candidates)
