"""Classpath source types."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple


class ClasspathScope(Enum):
    """Origin of a classpath source, in assembly order."""
    TEST = "test"
    RUNTIME = "runtime"
    USER = "user"
    PLUGIN = "plugin"


@dataclass(frozen=True)
class ClasspathSource:
    """Ordered classpath entries resolved by the host build for one scope."""
    scope: ClasspathScope
    paths: Tuple[str, ...] = ()

    @classmethod
    def of(cls, scope: ClasspathScope, paths: Iterable[str]) -> ClasspathSource:
        return cls(scope, tuple(str(p) for p in paths))


def split_classpath(value: str, separator: str = os.pathsep) -> List[str]:
    """Split a separator-joined classpath string, dropping empty segments."""
    return [entry for entry in value.split(separator) if entry]
