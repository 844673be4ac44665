import importlib

from django.urls import resolve


def test_settings_package_is_importable():
    """
    Garantisce che i settings siano importabili nel contesto test.
    """
    mod = importlib.import_module("settings.dev")
    assert mod.DEBUG is True
    assert "portal.apps.PortalConfig" in mod.INSTALLED_APPS


def test_django_check_passes():
    from django.core.management import call_command

    call_command("check")


def test_admin_routes_resolve():
    assert resolve("/api/admin/homepage/config").url_name == "homepage-config"
    assert resolve("/api/admin/deploy/batch").url_name == "deploy-batch"
    assert resolve("/api/admin/posts/some-slug/content").kwargs == {"slug": "some-slug"}
