import json

from portal.config_store import DEFAULT_HOMEPAGE_CONFIG, DEFAULT_SITE_SETTINGS
from portal.publisher import MATERIALIZE_COMMIT_MESSAGE

CONFIG_URL = "/api/admin/homepage/config"
SETTINGS_URL = "/api/admin/settings"


def test_get_config_returns_default(api_client, site_repo):
    resp = api_client.get(CONFIG_URL)
    assert resp.status_code == 200
    assert resp.json() == {"config": DEFAULT_HOMEPAGE_CONFIG}


def test_get_config_merges_saved_sections(api_client, site_repo):
    (site_repo / ".homepage-config.json").write_text(json.dumps({"hero": {"title": "Mine"}}), encoding="utf-8")
    config = api_client.get(CONFIG_URL).json()["config"]
    assert config["hero"] == {"title": "Mine"}
    assert config["recent"] == DEFAULT_HOMEPAGE_CONFIG["recent"]


def test_post_config_saves_materializes_and_publishes(api_client, site_repo, fake_git):
    doc = dict(DEFAULT_HOMEPAGE_CONFIG, hero={"title": "Fresh"})
    resp = api_client.post(CONFIG_URL, {"config": doc}, format="json")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Homepage configuration saved successfully"}
    saved = json.loads((site_repo / ".homepage-config.json").read_text(encoding="utf-8"))
    rendered = json.loads((site_repo / "src" / "data" / "homepage-config.json").read_text(encoding="utf-8"))
    assert saved == rendered == doc
    assert fake_git.call("commit") == ["commit", "-m", MATERIALIZE_COMMIT_MESSAGE]


def test_post_config_succeeds_when_publish_fails(api_client, site_repo, fake_git):
    fake_git.returncodes["add"] = 128
    resp = api_client.post(CONFIG_URL, {"config": {"hero": {"title": "x"}}}, format="json")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert (site_repo / ".homepage-config.json").exists()


def test_post_config_rejects_unknown_section(api_client, site_repo, fake_git):
    resp = api_client.post(CONFIG_URL, {"config": {"footer": {}}}, format="json")
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert not (site_repo / ".homepage-config.json").exists()
    assert fake_git.calls == []


def test_post_config_requires_config_key(api_client, site_repo, fake_git):
    resp = api_client.post(CONFIG_URL, {"hero": {"title": "x"}}, format="json")
    assert resp.status_code == 400


def test_post_config_persistence_failure_is_500(api_client, site_repo, settings, fake_git):
    (site_repo / "ro").write_text("file", encoding="utf-8")
    settings.HOMEPAGE_CONFIG_FILE = "ro/homepage.json"
    resp = api_client.post(CONFIG_URL, {"config": {"hero": {}}}, format="json")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Failed to save configuration"}
    assert not (site_repo / "src" / "data" / "homepage-config.json").exists()
    assert fake_git.calls == []


def test_settings_round_trip_without_publish(api_client, site_repo, fake_git):
    assert api_client.get(SETTINGS_URL).json() == {"settings": DEFAULT_SITE_SETTINGS}
    resp = api_client.post(SETTINGS_URL, {"settings": {"siteName": "Renamed"}}, format="json")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Settings saved successfully"
    settings_doc = api_client.get(SETTINGS_URL).json()["settings"]
    assert settings_doc["siteName"] == "Renamed"
    assert settings_doc["maxPostsPerPage"] == DEFAULT_SITE_SETTINGS["maxPostsPerPage"]
    assert fake_git.calls == []


def test_settings_rejects_wrong_types(api_client, site_repo):
    resp = api_client.post(SETTINGS_URL, {"settings": {"maxPostsPerPage": 0}}, format="json")
    assert resp.status_code == 400
    resp = api_client.post(SETTINGS_URL, {"settings": {"autoPublish": "yes"}}, format="json")
    assert resp.status_code == 400


def test_post_content_found_and_missing(api_client, site_repo):
    (site_repo / "src" / "content" / "2024-02-01-python-tips.md").write_text(
        "---\ntitle: Tips\n---\nThe body\n", encoding="utf-8"
    )
    resp = api_client.get("/api/admin/posts/python-tips/content")
    assert resp.status_code == 200
    assert resp.json() == {"content": "The body\n"}

    resp = api_client.get("/api/admin/posts/rust/content")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Post not found"


def test_post_list(api_client, site_repo):
    (site_repo / "src" / "content" / "2024-02-01-python-tips.md").write_text(
        "---\ntitle: Tips\ndate: \"2024-02-01\"\n---\nThe body\n", encoding="utf-8"
    )
    posts = api_client.get("/api/admin/posts").json()["posts"]
    assert [(p["slug"], p["title"]) for p in posts] == [("2024-02-01-python-tips", "Tips")]
