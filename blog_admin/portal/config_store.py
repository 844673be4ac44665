from __future__ import annotations

import copy
import json
import logging
import os
from typing import Callable, Optional

from .exceptions import PersistenceError
from .utils import write_json_atomic

logger = logging.getLogger(__name__)

DEFAULT_HOMEPAGE_CONFIG = {
    "hero": {
        "title": "AI Powered Blog",
        "subtitle": "Discover the latest insights in technology, AI, and innovation",
        "backgroundImage": "",
        "showNewsletter": True,
        "ctaText": "Explore Articles",
        "ctaLink": "#featured",
    },
    "featured": {
        "enabled": True,
        "title": "Featured Articles",
        "subtitle": "Hand-picked stories worth your time",
        "maxPosts": 3,
        "layout": "grid",
        "posts": [],
    },
    "recent": {
        "enabled": True,
        "title": "Latest Posts",
        "maxPosts": 6,
        "showExcerpts": True,
    },
    "layout": {
        "template": "blog",
        "sidebar": True,
        "containerWidth": "normal",
    },
}

DEFAULT_SITE_SETTINGS = {
    "siteName": "AI Powered Blog",
    "siteDescription": "Automated blog powered by AI technology",
    "autoPublish": True,
    "deploymentBranch": "main",
    "maxPostsPerPage": 10,
}


class JsonConfigStore:
    """A JSON document on disk layered over a hard-coded default.

    Reads merge the persisted document over the default at the top level only:
    a persisted section replaces the default section wholesale. Writes persist
    the document verbatim and then hand it to the optional materializer.
    """

    def __init__(self, path, default: dict, *, materializer: Optional[Callable[[dict], object]] = None, label="config"):
        self.path = str(path)
        self.default = default
        self.materializer = materializer
        self.label = label

    def read(self) -> dict:
        config = copy.deepcopy(self.default)
        if not os.path.exists(self.path):
            return config
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                saved = json.load(f)
        except (OSError, ValueError) as e:
            # il default rende sempre una pagina usabile
            logger.warning("[config] Error reading %s from %s, using default: %s", self.label, self.path, e)
            return config
        if not isinstance(saved, dict):
            logger.warning("[config] %s in %s is not an object (%s), using default",
                           self.label, self.path, type(saved).__name__)
            return config
        config.update(saved)
        return config

    def write(self, document: dict) -> None:
        try:
            write_json_atomic(self.path, document)
        except OSError as e:
            logger.exception("[config] Error saving %s to %s", self.label, self.path)
            raise PersistenceError(f"Failed to save {self.label}") from e
        logger.info("[config] Saved %s to %s", self.label, self.path)
        if self.materializer is None:
            return
        try:
            self.materializer(document)
        except Exception:
            # la configurazione è già salvata: il materialize non deve farla fallire
            logger.exception("[config] Materialize failed after saving %s", self.label)
