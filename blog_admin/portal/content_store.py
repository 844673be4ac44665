import logging
import math
import os
import re

import yaml

from .exceptions import PostNotFound

logger = logging.getLogger(__name__)

# regex to detect YAML front-matter at start of body
FRONTMATTER_RE = re.compile(r"^\s*---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)
_DATED_STEM_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-(.+)$")

WORDS_PER_MINUTE = 200


def split_front_matter(text: str):
    """Return (front-matter dict, body). Unparseable front-matter yields {}."""
    if not text:
        return {}, text or ""
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        data = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning("[content] Invalid YAML front-matter: %s", e)
        data = {}
    if not isinstance(data, dict):
        data = {}
    return data, text[m.end():]


def reading_time(body: str) -> str:
    words = len(body.split())
    return f"{max(1, math.ceil(words / WORDS_PER_MINUTE))} min read"


class ContentStore:
    """Read-only view over the markdown posts of the static site."""

    def __init__(self, content_dir):
        self.content_dir = str(content_dir)

    def _files(self):
        try:
            names = sorted(os.listdir(self.content_dir))
        except FileNotFoundError:
            return []
        return [n for n in names if os.path.isfile(os.path.join(self.content_dir, n))]

    def _read(self, name, errors="strict"):
        with open(os.path.join(self.content_dir, name), "r", encoding="utf-8", errors=errors) as f:
            return f.read()

    def _read_or_skip(self, name):
        """Like _read, but a file that is not valid UTF-8 (or vanished) yields None."""
        try:
            return self._read(name)
        except (UnicodeDecodeError, OSError) as e:
            logger.warning("[content] Skipping unreadable file %s: %s", name, e)
            return None

    def find(self, slug: str) -> str:
        """Resolve `slug` to a file name in the content directory.

        Exact matches win (file stem, dated stem ``YYYY-MM-DD-<slug>``, or a
        front-matter ``slug``); otherwise the first file, by name, whose name
        contains the fragment.
        """
        files = self._files()
        for name in files:
            stem = os.path.splitext(name)[0]
            m = _DATED_STEM_RE.match(stem)
            if stem == slug or (m and m.group(1) == slug):
                return name
        for name in files:
            if not name.endswith(".md"):
                continue
            text = self._read_or_skip(name)
            if text is None:
                continue
            fm, _ = split_front_matter(text)
            if str(fm.get("slug") or "") == slug:
                return name
        candidates = [name for name in files if slug in name]
        if not candidates:
            raise PostNotFound()
        if len(candidates) > 1:
            logger.warning("[content] slug %r is ambiguous (%s); using %s", slug, ", ".join(candidates), candidates[0])
        return candidates[0]

    def read_body(self, slug: str) -> str:
        name = self.find(slug)
        try:
            text = self._read(name)
        except UnicodeDecodeError as e:
            logger.warning("[content] %s is not valid UTF-8 (%s); serving it with replacement characters", name, e)
            text = self._read(name, errors="replace")
        _, body = split_front_matter(text)
        return body

    def list_posts(self) -> list:
        posts = []
        for name in self._files():
            if not name.endswith(".md"):
                continue
            text = self._read_or_skip(name)
            if text is None:
                continue
            fm, body = split_front_matter(text)
            stem = name[: -len(".md")]
            posts.append({
                "slug": stem,
                "title": fm.get("title") or stem,
                "excerpt": fm.get("excerpt") or "",
                "date": str(fm.get("date") or ""),
                "author": fm.get("author") or "",
                "tags": fm.get("tags") or [],
                "image": fm.get("image") or None,
                "featured": bool(fm.get("featured", False)),
                "readingTime": reading_time(body),
            })
        posts.sort(key=lambda p: p["date"], reverse=True)
        return posts
