"""Append-only JSONL audit trail of enforcement decisions.

Each ``authorize()`` call can be recorded as one newline-delimited JSON
record carrying a UTC ISO-8601 timestamp, a session identifier, the request
method and path, the matched path template and the decision outcome. The
read side filters those records by outcome, path and reason.

Thread-safety is achieved with a threading.Lock so the logger is safe to
call from request-handling thread pools.

Example
-------
::

    audit = DecisionAuditLogger(Path("/tmp/enforcer_audit.jsonl"))
    enforcer = PolicyEnforcer(registry, audit_logger=audit)
    enforcer.authorize(facade)
    denied = audit.decisions(granted=False)
    by_reason = audit.summary()
"""
from __future__ import annotations

import json
import logging
import threading
import uuid
from collections import Counter, deque
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from aumos_policy_enforcer.enforcement.decision import AuthorizationDecision
    from aumos_policy_enforcer.http.facade import HttpRequest

logger = logging.getLogger(__name__)

DECISION_EVENT = "authorization_decision"


class DecisionAuditLogger:
    """Append-only JSONL audit logger for authorization decisions.

    Parameters
    ----------
    log_path:
        Path to the ``.jsonl`` audit file.  Parent directories are created
        automatically on first write.
    session_id:
        Optional session identifier stamped on every record.  A random UUID
        is generated if not supplied.
    """

    def __init__(
        self,
        log_path: Path,
        session_id: str | None = None,
    ) -> None:
        self._log_path = Path(log_path)
        self._session_id: str = session_id or str(uuid.uuid4())
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def log(self, entry: dict[str, object]) -> None:
        """Append an arbitrary event record.

        ``timestamp`` and ``session_id`` are added automatically.
        """
        record: dict[str, object] = {
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "session_id": self._session_id,
            **entry,
        }
        self._write(record)

    def record_decision(
        self,
        request: "HttpRequest",
        decision: "AuthorizationDecision",
    ) -> None:
        """Append one ``authorization_decision`` record."""
        path_config = decision.path_config
        self.log(
            {
                "event": DECISION_EVENT,
                "method": request.method,
                "path": request.path,
                "matched_path": path_config.path if path_config is not None else None,
                "resource_id": path_config.id if path_config is not None else None,
                "granted": decision.granted,
                "reason": decision.reason,
                "permission_count": len(decision.permissions),
            }
        )

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def read_all(self) -> list[dict[str, object]]:
        """Return all records in chronological order (empty if no file)."""
        return list(self._iter_records())

    def query(self, filters: Mapping[str, object]) -> list[dict[str, object]]:
        """Return records whose top-level fields equal every filter value."""
        return [r for r in self._iter_records() if _matches(r, filters)]

    def decisions(
        self,
        granted: bool | None = None,
        path: str | None = None,
        reason: str | None = None,
    ) -> list[dict[str, object]]:
        """Return ``authorization_decision`` records, optionally filtered.

        Parameters
        ----------
        granted:
            Keep only granted (``True``) or denied (``False``) decisions.
        path:
            Keep only decisions for this request path.
        reason:
            Keep only decisions with this reason string.
        """
        filters: dict[str, object] = {"event": DECISION_EVENT}
        for key, value in (("granted", granted), ("path", path), ("reason", reason)):
            if value is not None:
                filters[key] = value
        return self.query(filters)

    def summary(self) -> Counter[str]:
        """Count decision records per reason."""
        return Counter(
            str(record.get("reason") or "-")
            for record in self._iter_records()
            if record.get("event") == DECISION_EVENT
        )

    def count(self, granted: bool | None = None) -> int:
        """Count records; with *granted*, only decisions with that outcome."""
        if granted is None:
            return sum(1 for _ in self._iter_records())
        return len(self.decisions(granted=granted))

    def last_n(self, n: int) -> list[dict[str, object]]:
        """Return the ``n`` most recent records."""
        if n <= 0:
            return []
        return list(deque(self._iter_records(), maxlen=n))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write(self, record: dict[str, object]) -> None:
        with self._lock:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(record, default=str) + "\n")

    def _iter_records(self) -> Iterator[dict[str, object]]:
        if not self._log_path.exists():
            return
        with self._lock:
            with self._log_path.open("r", encoding="utf-8") as fh:
                lines = fh.readlines()
        for number, line in enumerate(lines, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Skipping malformed audit record at line %d", number)

    @property
    def log_path(self) -> Path:
        """The filesystem path of the audit log file."""
        return self._log_path

    @property
    def session_id(self) -> str:
        """The session identifier stamped on every record."""
        return self._session_id


def _matches(record: Mapping[str, object], filters: Mapping[str, object]) -> bool:
    return all(record.get(key) == value for key, value in filters.items())
