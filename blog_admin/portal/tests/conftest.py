from unittest.mock import MagicMock, patch

import pytest


class FakeGit:
    """Stand-in for subprocess.run that records git invocations.

    By default every command succeeds and `git diff --cached --quiet` reports
    staged changes (exit 1). Override per subcommand with `returncodes`,
    `stdout` and `stderr`, or make a subcommand raise with `raises`.
    """

    def __init__(self):
        self.calls = []
        self.returncodes = {"diff": 1}
        self.stdout = {}
        self.stderr = {}
        self.raises = {}

    def __call__(self, cmd, cwd=None, capture_output=True, text=True, check=False, env=None):
        args = list(cmd[1:])
        self.calls.append(args)
        sub = args[0]
        if sub in self.raises:
            raise self.raises[sub]
        m = MagicMock()
        m.returncode = self.returncodes.get(sub, 0)
        m.stdout = self.stdout.get(sub, "")
        m.stderr = self.stderr.get(sub, "")
        return m

    def ran(self, sub):
        return any(c[0] == sub for c in self.calls)

    def call(self, sub):
        return next(c for c in self.calls if c[0] == sub)


@pytest.fixture
def fake_git():
    git = FakeGit()
    with patch("portal.publisher.subprocess.run", side_effect=git):
        yield git


@pytest.fixture
def site_repo(tmp_path, settings):
    """Point every store and the publisher at a throwaway site repo."""
    repo = tmp_path / "site"
    (repo / "src" / "content").mkdir(parents=True)
    settings.SITE_REPO_ROOT = str(repo)
    settings.SITE_GIT_REMOTE = ""
    settings.SITE_GIT_BRANCH = ""
    settings.HOMEPAGE_CONFIG_FILE = ".homepage-config.json"
    settings.HOMEPAGE_DATA_FILE = "src/data/homepage-config.json"
    settings.ADMIN_SETTINGS_FILE = ".admin-settings.json"
    settings.CONTENT_DIR = "src/content"
    settings.DEPLOY_LOG_DIR = "logs"
    settings.PUBLISH_IN_BACKGROUND = False
    return repo


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient

    return APIClient()
