import json
from unittest.mock import MagicMock

import pytest
import requests

from portal.api_client import AdminApiClient, AdminApiError
from portal.ledger import PendingChangeLedger


def fake_response(status_code=200, data=None):
    r = MagicMock()
    r.status_code = status_code
    r.ok = status_code < 400
    if data is None:
        r.json.side_effect = ValueError("no json")
    else:
        r.json.return_value = data
    return r


def test_posts_config_wrapped_in_config_key():
    session = MagicMock()
    session.request.return_value = fake_response(200, {"success": True, "message": "ok"})
    AdminApiClient("http://admin.local/", session=session).save_homepage_config({"hero": {}})
    session.request.assert_called_once_with(
        "POST", "http://admin.local/api/admin/homepage/config", json={"config": {"hero": {}}}, timeout=None
    )


def test_network_error_becomes_api_error():
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("refused")
    with pytest.raises(AdminApiError):
        AdminApiClient("http://admin.local", session=session).deploy_batch([])


def test_non_2xx_uses_server_message():
    session = MagicMock()
    session.request.return_value = fake_response(400, {"success": False, "message": "changes: This list may not be empty."})
    with pytest.raises(AdminApiError) as exc:
        AdminApiClient("http://admin.local", session=session).deploy_batch([])
    assert exc.value.status_code == 400
    assert "may not be empty" in str(exc.value)


def test_success_false_is_an_error():
    session = MagicMock()
    session.request.return_value = fake_response(200, {"success": False, "message": "nope"})
    with pytest.raises(AdminApiError):
        AdminApiClient("http://admin.local", session=session).save_settings({})


def test_html_error_page_is_an_error():
    session = MagicMock()
    session.request.return_value = fake_response(502)
    with pytest.raises(AdminApiError) as exc:
        AdminApiClient("http://admin.local", session=session).get_homepage_config()
    assert exc.value.status_code == 502


def test_ledger_end_to_end_against_endpoints(site_repo, fake_git):
    from rest_framework.test import RequestsClient

    client = AdminApiClient("http://testserver", session=RequestsClient())
    original = client.get_homepage_config()
    ledger = PendingChangeLedger(client)
    ledger.add_pending_change(
        "homepage", "New hero title", dict(original, hero={"title": "Launch"}), original_payload=original
    )
    ledger.add_pending_change("settings", "Rename site", {"siteName": "Launch Blog"})

    assert ledger.deploy_all_changes() is True
    assert len(ledger) == 0
    assert client.get_homepage_config()["hero"] == {"title": "Launch"}
    assert client.get_settings()["siteName"] == "Launch Blog"

    [log] = list((site_repo / "logs").glob("deployment-*.json"))
    record = json.loads(log.read_text(encoding="utf-8"))
    assert [c["description"] for c in record["changes"]] == ["New hero title", "Rename site"]
    commits = [c for c in fake_git.calls if c[0] == "commit"]
    # one commit from materialize, one for the batch
    assert commits[-1][2].startswith("Admin: Batch deployment - homepage: New hero title")


def test_manual_commit_posts_message():
    session = MagicMock()
    session.request.return_value = fake_response(200, {"success": True, "outcome": "committed"})
    result = AdminApiClient("http://admin.local", session=session).commit("Weekly refresh")
    session.request.assert_called_once_with(
        "POST", "http://admin.local/api/admin/deployment/commit", json={"message": "Weekly refresh"}, timeout=None
    )
    assert result["outcome"] == "committed"
