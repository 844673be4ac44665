"""Wire stores and publisher from Django settings.

Settings are read on every call so a view always sees the current
SITE_REPO_ROOT (and tests can point it at a temporary repo).
"""
from django.conf import settings

from .config_store import DEFAULT_HOMEPAGE_CONFIG, DEFAULT_SITE_SETTINGS, JsonConfigStore
from .content_store import ContentStore
from .deploy import BatchDeployer
from .publisher import Publisher
from .utils import resolve_in_repo


def _repo_path(relpath):
    return resolve_in_repo(settings.SITE_REPO_ROOT, relpath)


def get_publisher(*, background=None) -> Publisher:
    if background is None:
        background = settings.PUBLISH_IN_BACKGROUND
    return Publisher(
        settings.SITE_REPO_ROOT,
        data_file=_repo_path(settings.HOMEPAGE_DATA_FILE),
        remote=settings.SITE_GIT_REMOTE,
        branch=settings.SITE_GIT_BRANCH,
        background=background,
    )


def get_homepage_store(publisher=None) -> JsonConfigStore:
    publisher = publisher or get_publisher()
    return JsonConfigStore(
        _repo_path(settings.HOMEPAGE_CONFIG_FILE),
        DEFAULT_HOMEPAGE_CONFIG,
        materializer=publisher.materialize,
        label="configuration",
    )


def get_settings_store() -> JsonConfigStore:
    return JsonConfigStore(
        _repo_path(settings.ADMIN_SETTINGS_FILE),
        DEFAULT_SITE_SETTINGS,
        label="settings",
    )


def get_content_store() -> ContentStore:
    return ContentStore(_repo_path(settings.CONTENT_DIR))


def get_batch_deployer() -> BatchDeployer:
    return BatchDeployer(get_publisher(), _repo_path(settings.DEPLOY_LOG_DIR))
