"""Batch deploy: one audit record and one git commit for a set of changes.

Cycle: LoggingAudit -> Staging -> Committing -> PushAttempt. Anything that
fails up to and including the commit is a hard failure; a failed push only
adds a warning to an otherwise successful deploy.
"""
from __future__ import annotations

import json
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from django.utils import timezone

from .exceptions import DeployFailed, PersistenceError
from .publisher import PublishOutcome, Publisher
from .utils import dump_json, write_json_atomic

logger = logging.getLogger(__name__)

AUDIT_PREFIX = "deployment-"


@dataclass
class DeployReport:
    success: bool
    message: str
    deployment_id: str
    change_count: Optional[int] = None
    warning: Optional[str] = None

    def as_response(self) -> dict:
        data = {"success": self.success, "message": self.message, "deploymentId": self.deployment_id}
        if self.change_count is not None:
            data["changeCount"] = self.change_count
        if self.warning:
            data["warning"] = self.warning
        return data


def _iso(value) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value or None


def commit_message(changes: Sequence[dict]) -> str:
    summary = "; ".join(f"{c['category']}: {c['description']}" for c in changes)
    return f"Admin: Batch deployment - {summary}"


class BatchDeployer:
    def __init__(self, publisher: Publisher, log_dir):
        self.publisher = publisher
        self.log_dir = str(log_dir)

    def _new_deployment_id(self) -> str:
        stamp = timezone.now().strftime("%Y%m%d%H%M%S%f")
        return f"{AUDIT_PREFIX}{stamp}-{uuid.uuid4().hex[:6]}"

    def _audit_path(self, deployment_id):
        return os.path.join(self.log_dir, f"{deployment_id}.json")

    def write_audit_record(self, changes: Sequence[dict]) -> str:
        deployment_id = self._new_deployment_id()
        record = {
            "deploymentId": deployment_id,
            "timestamp": timezone.now().isoformat(),
            "changes": [
                {
                    "category": c["category"],
                    "description": c["description"],
                    "createdAt": _iso(c.get("createdAt")),
                }
                for c in changes
            ],
            "status": "deployed",
        }
        path = self._audit_path(deployment_id)
        try:
            os.makedirs(self.log_dir, exist_ok=True)
            # "x": un record di audit non viene mai sovrascritto
            with open(path, "x", encoding="utf-8") as f:
                f.write(dump_json(record))
        except OSError as e:
            logger.exception("[deploy] Could not write audit record %s", path)
            raise PersistenceError("Failed to write deployment log") from e
        logger.info("[deploy] audit record written: %s (%d changes)", path, len(changes))
        return deployment_id

    def deploy(self, changes: Sequence[dict]) -> DeployReport:
        if not changes:
            raise ValueError("changes must be a non-empty list")
        deployment_id = self.write_audit_record(changes)
        result = self.publisher.publish(commit_message(changes))

        if result.outcome is PublishOutcome.FAILED:
            logger.error("[deploy] %s failed: %s (%s)", deployment_id, result.message, result.error)
            self.mark_failed(deployment_id, result.error or result.message)
            raise DeployFailed(f"Batch deployment failed: {result.message}")
        if result.outcome is PublishOutcome.NOTHING_TO_COMMIT:
            logger.info("[deploy] %s: nothing to commit", deployment_id)
            return DeployReport(True, "No changes to deploy", deployment_id)
        if result.outcome is PublishOutcome.COMMITTED_NOT_PUSHED:
            return DeployReport(
                True,
                "Changes committed locally; push to remote failed",
                deployment_id,
                change_count=len(changes),
                warning=f"Push to remote failed, changes committed locally only: {result.error}",
            )
        logger.info("[deploy] %s committed and pushed (%d changes)", deployment_id, len(changes))
        return DeployReport(
            True,
            "Batch deployment completed successfully",
            deployment_id,
            change_count=len(changes),
        )

    def mark_failed(self, deployment_id, error):
        """Rewrite the audit record of a deploy whose commit never happened."""
        path = self._audit_path(deployment_id)
        try:
            with open(path, "r", encoding="utf-8") as f:
                record = json.load(f)
            record["status"] = "failed"
            record["error"] = error
            write_json_atomic(path, record)
        except (OSError, ValueError):
            logger.exception("[deploy] Could not mark audit record %s as failed", path)

    def last_deploy(self) -> Optional[str]:
        """Timestamp of the most recent audit record not marked failed, if any."""
        try:
            names = sorted(
                n for n in os.listdir(self.log_dir)
                if n.startswith(AUDIT_PREFIX) and n.endswith(".json")
            )
        except FileNotFoundError:
            return None
        for name in reversed(names):
            try:
                with open(os.path.join(self.log_dir, name), "r", encoding="utf-8") as f:
                    record = json.load(f)
            except (OSError, ValueError):
                logger.warning("[deploy] Unreadable audit record %s", name)
                continue
            if not isinstance(record, dict) or record.get("status") == "failed":
                continue
            return record.get("timestamp")
        return None
