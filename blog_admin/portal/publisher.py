"""Materialize the homepage data file and publish the site repo with git.

Publishing is best-effort: every git step reports through a ``PublishResult``
instead of raising, so callers decide whether a failure matters to them.
"""
from __future__ import annotations

import logging
import os
import shlex
import subprocess
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .utils import write_json_atomic

logger = logging.getLogger(__name__)

MATERIALIZE_COMMIT_MESSAGE = "Homepage configuration updated via admin portal"
GIT_LOG_FORMAT = "%H|%s|%an|%cr"

# un solo add/commit/push alla volta per processo (index.lock)
_PUBLISH_LOCK = threading.Lock()


class PublishOutcome(str, Enum):
    COMMITTED = "committed"
    COMMITTED_NOT_PUSHED = "committed_not_pushed"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    FAILED = "failed"


@dataclass
class PublishResult:
    outcome: PublishOutcome
    message: str
    error: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.outcome in (PublishOutcome.COMMITTED, PublishOutcome.COMMITTED_NOT_PUSHED)

    @property
    def failed(self) -> bool:
        return self.outcome is PublishOutcome.FAILED


def _git(cwd, *args, check=True, quiet=False):
    cmd = ["git", *args]
    env = os.environ.copy()
    display = " ".join(shlex.quote(a) for a in cmd)
    if not quiet:
        logger.debug("[git] cwd=%s cmd=%s", cwd, display)
    r = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=False, env=env)
    if not quiet:
        if (r.stdout or "").strip():
            logger.debug("[git] stdout: %s", r.stdout.strip())
        if (r.stderr or "").strip():
            logger.debug("[git] stderr: %s", r.stderr.strip())
    if check and r.returncode != 0:
        raise subprocess.CalledProcessError(r.returncode, cmd, output=r.stdout, stderr=r.stderr)
    return r


def _describe(exc) -> str:
    if isinstance(exc, subprocess.CalledProcessError):
        detail = (exc.stderr or exc.output or "").strip()
        return detail or f"exit status {exc.returncode}"
    return str(exc)


def _nothing_to_commit(exc) -> bool:
    out = f"{exc.output or ''}\n{exc.stderr or ''}".lower()
    return "nothing to commit" in out or "nothing added to commit" in out


class Publisher:
    """Git publisher bound to one working copy of the static site.

    ``repo_root`` is injected by the caller; nothing here depends on the
    process working directory.
    """

    def __init__(self, repo_root, *, data_file=None, remote="", branch="", background=True):
        self.repo_root = str(repo_root)
        self.data_file = str(data_file) if data_file else None
        self.remote = remote or ""
        self.branch = branch or ""
        self.background = background

    def _push_args(self):
        args = ["push"]
        if self.remote:
            args.append(self.remote)
            if self.branch:
                args.append(self.branch)
        return args

    def publish(self, message: str) -> PublishResult:
        """Stage everything, commit once with `message`, then try to push.

        Publishes are serialized: a background materialize and a batch deploy
        on the same repo never run git concurrently.
        """
        with _PUBLISH_LOCK:
            return self._publish(message)

    def _publish(self, message: str) -> PublishResult:
        root = self.repo_root
        try:
            _git(root, "add", "-A")
        except (subprocess.CalledProcessError, OSError) as e:
            logger.error("[publish] git add failed in %s: %s", root, _describe(e))
            return PublishResult(PublishOutcome.FAILED, "Staging changes failed", error=_describe(e))

        try:
            diff = _git(root, "diff", "--cached", "--quiet", check=False, quiet=True)
        except OSError as e:
            logger.error("[publish] git diff failed in %s: %s", root, e)
            return PublishResult(PublishOutcome.FAILED, "Inspecting staged changes failed", error=str(e))
        if diff.returncode == 0:
            logger.info("[publish] Nessun delta dopo add: skip commit")
            return PublishResult(PublishOutcome.NOTHING_TO_COMMIT, "No changes to commit")
        if diff.returncode != 1:
            detail = (diff.stderr or "").strip() or f"exit status {diff.returncode}"
            logger.error("[publish] git diff --cached failed in %s: %s", root, detail)
            return PublishResult(PublishOutcome.FAILED, "Inspecting staged changes failed", error=detail)

        try:
            _git(root, "commit", "-m", message)
        except subprocess.CalledProcessError as e:
            if _nothing_to_commit(e):
                logger.info("[publish] Commit found nothing to commit: skip push")
                return PublishResult(PublishOutcome.NOTHING_TO_COMMIT, "No changes to commit")
            logger.error("[publish] git commit failed in %s: %s", root, _describe(e))
            return PublishResult(PublishOutcome.FAILED, "Commit failed", error=_describe(e))
        except OSError as e:
            logger.error("[publish] git commit failed in %s: %s", root, _describe(e))
            return PublishResult(PublishOutcome.FAILED, "Commit failed", error=_describe(e))

        try:
            _git(root, *self._push_args())
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning("[publish] Could not push to remote repository: %s", _describe(e))
            return PublishResult(
                PublishOutcome.COMMITTED_NOT_PUSHED,
                "Committed locally, push to remote failed",
                error=_describe(e),
            )
        logger.info("[publish] Successfully pushed to remote repository: %r", message)
        return PublishResult(PublishOutcome.COMMITTED, "Committed and pushed")

    def publish_in_background(self, message: str) -> threading.Thread:
        def _runner(msg=message):
            try:
                result = self.publish(msg)
            except Exception:
                logger.exception("[publish] Background publish crashed for %s", self.repo_root)
                return
            if result.failed:
                logger.warning("[publish] Background publish failed: %s (%s)", result.message, result.error)
            else:
                logger.info("[publish] Background publish finished: %s", result.outcome.value)

        t = threading.Thread(target=_runner, daemon=True)
        t.start()
        return t

    def write_data_file(self, document) -> bool:
        if not self.data_file:
            logger.warning("[materialize] No render data file configured; skipping")
            return False
        try:
            write_json_atomic(self.data_file, document)
        except OSError:
            logger.exception("[materialize] Error updating homepage data file %s", self.data_file)
            return False
        logger.info("[materialize] Homepage data file updated: %s", self.data_file)
        return True

    def materialize(self, document) -> Optional[PublishResult]:
        """Write the render-facing copy of `document` and publish it.

        Never raises: the caller's primary save has already succeeded. Returns
        the publish result when running synchronously, None otherwise.
        """
        if not self.write_data_file(document):
            return None
        if self.background:
            self.publish_in_background(MATERIALIZE_COMMIT_MESSAGE)
            return None
        return self.publish(MATERIALIZE_COMMIT_MESSAGE)

    # --- read-only repository inspection ---

    def repository_status(self) -> dict:
        status = {"branch": self.branch or "main", "lastCommit": "", "uncommittedChanges": False}
        root = self.repo_root
        try:
            status["branch"] = _git(root, "branch", "--show-current", quiet=True).stdout.strip() or status["branch"]
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning("[git] Error getting git branch: %s", _describe(e))
        try:
            status["lastCommit"] = _git(root, "log", "-1", "--oneline", quiet=True).stdout.strip()
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning("[git] Error getting last commit: %s", _describe(e))
        try:
            porcelain = _git(root, "status", "--porcelain", quiet=True).stdout
            status["uncommittedChanges"] = bool((porcelain or "").strip())
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning("[git] Error getting git status: %s", _describe(e))
        return status

    def recent_commits(self, limit: int = 10) -> list:
        r = _git(self.repo_root, "log", f"-{limit}", f"--format={GIT_LOG_FORMAT}", quiet=True)
        logs = []
        for line in (r.stdout or "").strip().splitlines():
            parts = line.split("|", 3)
            commit_hash = parts[0][:8] if parts else ""
            if not commit_hash:
                continue
            logs.append({
                "hash": commit_hash,
                "message": (parts[1] if len(parts) > 1 else "") or "No message",
                "author": (parts[2] if len(parts) > 2 else "") or "Unknown",
                "date": (parts[3] if len(parts) > 3 else "") or "Unknown time",
            })
        return logs
