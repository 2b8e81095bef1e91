"""Thread-safe registry of protected path configurations.

The registry holds an immutable snapshot of ``{normalized path: PathConfig}``.
Lookups read the current snapshot without locking; ``register``,
``register_instance`` and ``remove`` build a new snapshot under a
``threading.Lock`` and swap it in. A removal therefore never disturbs a
lookup that is already in progress on another thread.

Example
-------
::

    registry = PathRegistry([PathConfig(path="/orders/{id}", resource_id="orders")])
    config = registry.lookup("/orders/42")
    assert config is not None and config.path == "/orders/{id}"
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from aumos_policy_enforcer.enforcement.path_config import PathConfig
from aumos_policy_enforcer.registry.path_matcher import (
    PathMatcher,
    PathMatcherProtocol,
    normalize_path,
)

logger = logging.getLogger(__name__)


class PathRegistry:
    """Copy-on-write mapping of path templates to :class:`PathConfig`.

    Parameters
    ----------
    configs:
        Initial configurations. Duplicate paths raise ``ValueError``.
    matcher:
        Path matcher used by :meth:`lookup`. Defaults to :class:`PathMatcher`.
    """

    def __init__(
        self,
        configs: Iterable[PathConfig] | None = None,
        matcher: PathMatcherProtocol | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._matcher: PathMatcherProtocol = matcher or PathMatcher()
        self._paths: Mapping[str, PathConfig] = MappingProxyType({})
        for config in configs or []:
            self.register(config)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> Mapping[str, PathConfig]:
        """Return the current read-only mapping."""
        return self._paths

    def lookup(self, path: str) -> PathConfig | None:
        """Return the best-matching configuration for *path*, or None."""
        return self._matcher.match(path, self._paths)

    def get(self, path: str) -> PathConfig | None:
        """Return the configuration registered exactly under *path*."""
        return self._paths.get(normalize_path(path))

    def parent_of(self, config: PathConfig) -> PathConfig | None:
        """Return the configuration currently registered for *config*'s parent.

        ``None`` for non-instances, or when the parent path has been removed.
        """
        if config.parent_path is None:
            return None
        return self.get(config.parent_path)

    def __contains__(self, config: object) -> bool:
        if not isinstance(config, PathConfig):
            return False
        return self._paths.get(normalize_path(config.path)) is config

    def __iter__(self) -> Iterator[PathConfig]:
        return iter(list(self._paths.values()))

    def __len__(self) -> int:
        return len(self._paths)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def register(self, config: PathConfig, replace: bool = False) -> PathConfig:
        """Add *config* under its normalized path.

        Raises
        ------
        ValueError
            If another configuration is already registered under the same
            path and *replace* is False.
        """
        key = normalize_path(config.path)
        with self._lock:
            existing = self._paths.get(key)
            if existing is not None and existing is not config and not replace:
                raise ValueError(
                    f"A path configuration is already registered for {key!r} "
                    f"(resource {existing.id!r})."
                )
            updated = dict(self._paths)
            updated[key] = config
            self._paths = MappingProxyType(updated)
        logger.debug("Registered path configuration %r", config)
        return config

    def register_instance(
        self,
        parent: PathConfig,
        path: str,
        resource_id: str | None = None,
    ) -> PathConfig:
        """Register an instance of *parent* for the concrete *path*.

        If an instance is already registered for *path* it is returned
        unchanged. A non-instance configuration registered under the same
        path is never overwritten; it is returned instead.
        """
        key = normalize_path(path)
        with self._lock:
            existing = self._paths.get(key)
            if existing is not None:
                return existing
            instance = PathConfig.instance_of(parent, key, resource_id=resource_id)
            updated = dict(self._paths)
            updated[key] = instance
            self._paths = MappingProxyType(updated)
        logger.debug("Registered instance %r of %r", instance, parent)
        return instance

    def remove(self, config: PathConfig) -> bool:
        """Remove *config* if it is still the registered object for its path.

        Returns
        -------
        bool
            True if this call removed it; False if it was already gone or
            replaced by another configuration.
        """
        key = normalize_path(config.path)
        with self._lock:
            if self._paths.get(key) is not config:
                return False
            updated = dict(self._paths)
            del updated[key]
            self._paths = MappingProxyType(updated)
        logger.debug("Removed path configuration %r", config)
        return True
