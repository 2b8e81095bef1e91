"""Request path to path-configuration matching.

Supported templates:

- literal paths: ``/orders``
- parameter segments: ``/orders/{id}/items/{item}`` (one segment each)
- trailing wildcard: ``/static/*`` (the prefix itself and anything below it)

An exact literal match always wins. Among templates, the one with the most
literal segments wins; a parameter template beats a wildcard with the same
number of literal segments. Remaining ties go to the first registered.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Protocol

from aumos_policy_enforcer.enforcement.path_config import PathConfig

logger = logging.getLogger(__name__)

_WILDCARD_SUFFIX = "/*"


def normalize_path(path: str) -> str:
    """Return *path* with a leading slash and no trailing slash."""
    path = path.split("?", 1)[0].strip()
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def is_template(path: str) -> bool:
    """True if *path* contains parameter segments or a wildcard."""
    return "{" in path or path.endswith("*")


def _is_parameter(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


@lru_cache(maxsize=1024)
def _segments(path: str) -> tuple[str, ...]:
    return tuple(part for part in path.split("/") if part)


class PathMatcherProtocol(Protocol):
    def match(
        self, path: str, paths: Mapping[str, PathConfig]
    ) -> PathConfig | None: ...


class PathMatcher:
    """Finds the best-matching :class:`PathConfig` for a request path."""

    def match(self, path: str, paths: Mapping[str, PathConfig]) -> PathConfig | None:
        """Return the most specific configuration matching *path*, or None.

        Parameters
        ----------
        path:
            Request path relative to the application root.
        paths:
            Registry snapshot keyed by normalized path template.
        """
        path = normalize_path(path)

        exact = paths.get(path)
        if exact is not None:
            return exact

        best: PathConfig | None = None
        best_score: tuple[int, int] = (-1, -1)
        for template, config in paths.items():
            score = self._score(template, path)
            if score is not None and score > best_score:
                best, best_score = config, score

        if best is None:
            logger.debug("No path configuration matches [%s]", path)
        return best

    def _score(self, template: str, path: str) -> tuple[int, int] | None:
        """Return a specificity score if *template* matches *path*."""
        if template.endswith(_WILDCARD_SUFFIX):
            prefix = template[: -len(_WILDCARD_SUFFIX)]
            if prefix and path != prefix and not path.startswith(prefix + "/"):
                return None
            return (len(_segments(prefix)), 0)

        if "{" not in template:
            return None

        template_parts = _segments(template)
        path_parts = _segments(path)
        if len(template_parts) != len(path_parts):
            return None

        literals = 0
        for expected, actual in zip(template_parts, path_parts):
            if _is_parameter(expected):
                continue
            if expected != actual:
                return None
            literals += 1
        return (literals, 1)
