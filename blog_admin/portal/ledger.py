"""Pending-change ledger owned by one admin UI session.

Edits are collected here instead of being published one by one. The ledger
keeps at most one change per category (a newer edit replaces the older one and
moves to the end), and publishes or reverts them all at once:

- ``deploy_all_changes`` applies every payload through its category endpoint,
  then posts the whole list to the batch deploy endpoint (audit + one commit);
- ``undo_all_changes`` re-applies the captured ``original_payload`` snapshots
  and makes no batch call, so an undo leaves no audit record.

On any failure the ledger is left untouched so the operator can retry.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .api_client import AdminApiClient, AdminApiError
from .changes import ChangeCategory, PendingChange

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]


def _log_notification(level: str, message: str) -> None:
    logger.log(logging.ERROR if level == "error" else logging.INFO, "[ledger] %s", message)


class PendingChangeLedger:
    def __init__(self, client: AdminApiClient, notify: Optional[Notifier] = None):
        self.client = client
        self.notify = notify or _log_notification
        # dict preserves insertion order; re-inserting a category moves it last
        self._changes: Dict[ChangeCategory, PendingChange] = {}
        self.is_deploying = False
        self.is_undoing = False

    @property
    def pending_changes(self) -> List[PendingChange]:
        return list(self._changes.values())

    def __len__(self):
        return len(self._changes)

    def add_pending_change(
        self,
        category,
        description: str,
        payload: Mapping[str, Any],
        original_payload: Optional[Mapping[str, Any]] = None,
    ) -> None:
        change = PendingChange(
            category=category,
            description=description,
            payload=payload,
            original_payload=original_payload,
        )
        self._changes.pop(change.category, None)
        self._changes[change.category] = change

    def remove_pending_change(self, change_id: str) -> None:
        for category, change in list(self._changes.items()):
            if change.id == change_id:
                del self._changes[category]
                return

    def clear_pending_changes(self) -> None:
        self._changes.clear()

    def _apply(self, category: ChangeCategory, payload: Mapping[str, Any]) -> None:
        if category is ChangeCategory.HOMEPAGE:
            self.client.save_homepage_config(dict(payload))
        elif category is ChangeCategory.SETTINGS:
            self.client.save_settings(dict(payload))
        # content: saved by the post editor itself, the entry only feeds the batch audit

    def _busy(self) -> bool:
        if self.is_deploying or self.is_undoing:
            self.notify("error", "A deploy or undo is already in progress")
            return True
        return False

    def deploy_all_changes(self) -> bool:
        if not self._changes:
            self.notify("info", "No pending changes to deploy")
            return False
        if self._busy():
            return False

        self.is_deploying = True
        try:
            changes = self.pending_changes
            for change in changes:
                self._apply(change.category, change.payload)
            result = self.client.deploy_batch([c.to_dict() for c in changes])
        except AdminApiError as e:
            logger.error("[ledger] Deployment error: %s", e)
            self.notify("error", "Deployment failed. Please try again.")
            return False
        finally:
            self.is_deploying = False

        self.clear_pending_changes()
        if result.get("warning"):
            self.notify("info", f"Changes deployed with a warning: {result['warning']}")
        else:
            self.notify("info", "All changes deployed successfully!")
        return True

    def undo_all_changes(self) -> bool:
        if not self._changes:
            self.notify("info", "No pending changes to undo")
            return False
        if self._busy():
            return False

        self.is_undoing = True
        try:
            for change in self.pending_changes:
                if change.can_undo:
                    self._apply(change.category, change.original_payload)
        except AdminApiError as e:
            logger.error("[ledger] Undo error: %s", e)
            self.notify("error", "Failed to undo changes. Please try again.")
            return False
        finally:
            self.is_undoing = False

        self.clear_pending_changes()
        self.notify("info", "All changes have been undone successfully!")
        return True
