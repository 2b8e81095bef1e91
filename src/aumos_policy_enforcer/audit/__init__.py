"""Decision audit trail."""
from __future__ import annotations

from aumos_policy_enforcer.audit.logger import DECISION_EVENT, DecisionAuditLogger

__all__ = ["DECISION_EVENT", "DecisionAuditLogger"]
