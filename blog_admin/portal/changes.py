"""Pending change records shared by the ledger and the batch deploy endpoint.

A change is tagged by its category; the category decides which document its
payload (and the optional undo snapshot) must look like:

- ``homepage``: a homepage configuration document (sections only)
- ``settings``: a site settings document
- ``content``: a content edit record for one post
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional


class ChangeCategory(str, Enum):
    HOMEPAGE = "homepage"
    CONTENT = "content"
    SETTINGS = "settings"


HOMEPAGE_SECTIONS = ("hero", "featured", "recent", "layout")
SETTINGS_KEYS = ("siteName", "siteDescription", "autoPublish", "deploymentBranch", "maxPostsPerPage")
CONTENT_KEYS = ("slug", "title", "content")

_SETTINGS_TYPES = {
    "siteName": str,
    "siteDescription": str,
    "autoPublish": bool,
    "deploymentBranch": str,
    "maxPostsPerPage": int,
}


class InvalidChange(ValueError):
    """Raised when a change payload does not match its category schema."""


def validate_payload(category: ChangeCategory, payload: Any) -> None:
    if not isinstance(payload, Mapping):
        raise InvalidChange(f"{category.value} payload must be an object, got {type(payload).__name__}")
    if category is ChangeCategory.HOMEPAGE:
        unknown = set(payload) - set(HOMEPAGE_SECTIONS)
        if unknown:
            raise InvalidChange(f"unknown homepage sections: {', '.join(sorted(unknown))}")
        for name, section in payload.items():
            if not isinstance(section, Mapping):
                raise InvalidChange(f"homepage section '{name}' must be an object")
    elif category is ChangeCategory.SETTINGS:
        unknown = set(payload) - set(SETTINGS_KEYS)
        if unknown:
            raise InvalidChange(f"unknown settings keys: {', '.join(sorted(unknown))}")
        for key, expected in _SETTINGS_TYPES.items():
            if key in payload and not isinstance(payload[key], expected):
                raise InvalidChange(f"settings '{key}' has the wrong type")
        if "maxPostsPerPage" in payload and (
            isinstance(payload["maxPostsPerPage"], bool) or payload["maxPostsPerPage"] < 1
        ):
            raise InvalidChange("settings 'maxPostsPerPage' must be a positive integer")
    else:
        unknown = set(payload) - set(CONTENT_KEYS)
        if unknown:
            raise InvalidChange(f"unknown content keys: {', '.join(sorted(unknown))}")
        if not str(payload.get("slug") or "").strip():
            raise InvalidChange("content payload requires a slug")


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PendingChange:
    category: ChangeCategory
    description: str
    payload: Mapping[str, Any]
    original_payload: Optional[Mapping[str, Any]] = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)

    def __post_init__(self):
        # accetta anche la stringa ("homepage") oltre all'enum
        object.__setattr__(self, "category", ChangeCategory(self.category))
        validate_payload(self.category, self.payload)
        if self.original_payload is not None:
            validate_payload(self.category, self.original_payload)

    @property
    def can_undo(self) -> bool:
        return self.original_payload is not None

    def to_dict(self) -> dict:
        """Wire representation posted to the batch deploy endpoint."""
        data = {
            "id": self.id,
            "category": self.category.value,
            "description": self.description,
            "payload": dict(self.payload),
            "createdAt": self.created_at.isoformat(),
        }
        if self.original_payload is not None:
            data["originalPayload"] = dict(self.original_payload)
        return data
