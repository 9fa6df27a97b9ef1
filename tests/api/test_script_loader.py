"""End-to-end tests for GET /script-loader/{script_id} over an in-memory database."""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from app.api.routes.script_loader import denied_response, script_id_from_path
from app.loader.errors import DENIAL_PREFIX, InternalError, StoreError
from app.models.execution_log import ExecutionLog
from app.models.script import Script
from app.models.whitelist_entry import WhitelistEntry
from app.services.execution_logs.service import ExecutionLogService
from app.services.script_loader.service import ScriptLoaderService
from app.services.scripts.service import ScriptService
from app.services.whitelist.service import WhitelistService


def _logs(db, script_id: str) -> list[ExecutionLog]:
    db.expire_all()
    return db.query(ExecutionLog).filter(ExecutionLog.script_id == script_id).all()


def _executions(db, script_id: str) -> int:
    db.expire_all()
    return db.get(Script, script_id).total_executions


def _assert_denied(resp, status_code: int, denial: str):
    assert resp.status_code == status_code
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == f"{DENIAL_PREFIX}{denial}"
    assert "\n" not in resp.text


class TestDeliveryScenarios:
    def test_standard_script_anonymous(self, client, db, make_script):
        make_script(id="c1", access_tier="standard", total_executions=4, script_content="print('hi')\nprint(2)")

        resp = client.get("/script-loader/c1")

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.headers["cache-control"] == "no-store, no-cache, must-revalidate"
        assert resp.headers["x-script-token"]
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "  print('hi')\n  print(2)" in resp.text
        assert 'local _scriptId = "c1"' in resp.text
        assert _executions(db, "c1") == 5
        logs = _logs(db, "c1")
        assert len(logs) == 1
        assert logs[0].whitelist_entry_id is None
        assert logs[0].roblox_player_id is None
        assert logs[0].success is True

    def test_premium_not_whitelisted(self, client, db, make_script):
        make_script(id="c2", access_tier="premium", total_executions=2)

        resp = client.get("/script-loader/c2", params={"player_id": "p42"})

        _assert_denied(resp, 403, "Not whitelisted")
        assert _logs(db, "c2") == []
        assert _executions(db, "c2") == 2

    def test_premium_expired_entry_is_deactivated(self, client, db, make_script, make_entry):
        make_script(id="c3", access_tier="premium")
        entry = make_entry(
            "c3",
            roblox_id="p42",
            duration_type="hourly",
            expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        )

        resp = client.get("/script-loader/c3", params={"player_id": "p42"})

        _assert_denied(resp, 403, "Not whitelisted")
        db.expire_all()
        assert db.get(WhitelistEntry, entry.id).is_active is False
        assert _logs(db, "c3") == []
        assert _executions(db, "c3") == 0

    def test_missing_script(self, client, db):
        resp = client.get("/script-loader/missing")

        _assert_denied(resp, 404, "Script not found")
        assert db.query(ExecutionLog).count() == 0

    def test_empty_script_id(self, client):
        _assert_denied(client.get("/script-loader/"), 400, "Invalid request")
        _assert_denied(client.get("/script-loader"), 400, "Invalid request")

    def test_sentinel_script_id(self, client):
        _assert_denied(client.get("/script-loader/script-loader"), 400, "Invalid request")


class TestPremiumAccess:
    def test_requires_identity(self, client, db, make_script):
        make_script(id="p1", access_tier="premium")

        _assert_denied(client.get("/script-loader/p1"), 403, "Player identification required")
        assert _logs(db, "p1") == []

    def test_whitelisted_player(self, client, db, make_script, make_entry):
        make_script(id="p2", access_tier="premium")
        entry = make_entry(
            "p2",
            roblox_id="p42",
            duration_type="daily",
            expires_at=datetime.now(timezone.utc) + timedelta(hours=5),
        )

        resp = client.get("/script-loader/p2", headers={"x-roblox-player-id": "p42"})

        assert resp.status_code == 200
        logs = _logs(db, "p2")
        assert len(logs) == 1
        assert logs[0].whitelist_entry_id == entry.id
        assert logs[0].roblox_player_id == "p42"
        assert _executions(db, "p2") == 1

    def test_discord_identity_matches(self, client, db, make_script, make_entry):
        make_script(id="p3", access_tier="premium")
        make_entry("p3", discord_id="d-9")

        assert client.get("/script-loader/p3", params={"player_id": "d-9"}).status_code == 200

    def test_inactive_script_is_not_found(self, client, make_script):
        make_script(id="p4", is_active=False)

        _assert_denied(client.get("/script-loader/p4"), 404, "Script not found")


class TestPlayerIdPrecedence:
    def test_primary_header_wins(self, client, db, make_script, make_entry):
        make_script(id="h1", access_tier="premium")
        make_entry("h1", roblox_id="header-id")

        resp = client.get(
            "/script-loader/h1",
            headers={"x-roblox-player-id": "header-id", "Roblox-Id": "alt-id"},
            params={"player_id": "query-id"},
        )

        assert resp.status_code == 200
        assert _logs(db, "h1")[0].roblox_player_id == "header-id"

    def test_alternate_header_before_query(self, client, db, make_script, make_entry):
        make_script(id="h2", access_tier="premium")
        make_entry("h2", roblox_id="alt-id")

        resp = client.get("/script-loader/h2", headers={"Roblox-Id": "alt-id"}, params={"player_id": "query-id"})

        assert resp.status_code == 200
        assert _logs(db, "h2")[0].roblox_player_id == "alt-id"

    def test_empty_header_falls_through(self, client, db, make_script):
        make_script(id="h3", access_tier="standard")

        resp = client.get("/script-loader/h3", headers={"x-roblox-player-id": ""}, params={"player_id": "q1"})

        assert resp.status_code == 200
        assert _logs(db, "h3")[0].roblox_player_id == "q1"


class TestStoreFailures:
    def test_script_lookup_failure(self, client, db, make_script):
        make_script(id="s1")
        with patch.object(ScriptService, "get_active", side_effect=StoreError("scripts.get_active")):
            resp = client.get("/script-loader/s1")

        _assert_denied(resp, 500, "Database error")
        assert _logs(db, "s1") == []

    def test_whitelist_lookup_failure(self, client, db, make_script):
        make_script(id="s2", access_tier="premium")
        with patch.object(WhitelistService, "find_active_match", side_effect=StoreError("whitelist.find_active_match")):
            resp = client.get("/script-loader/s2", params={"player_id": "p42"})

        _assert_denied(resp, 500, "Database error")
        assert _logs(db, "s2") == []
        assert _executions(db, "s2") == 0

    def test_deactivate_failure_still_denies(self, client, db, make_script, make_entry):
        make_script(id="s3", access_tier="premium")
        entry = make_entry(
            "s3",
            roblox_id="p42",
            duration_type="hourly",
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=5),
        )
        with patch.object(WhitelistService, "deactivate", side_effect=StoreError("whitelist.deactivate")):
            resp = client.get("/script-loader/s3", params={"player_id": "p42"})

        _assert_denied(resp, 403, "Not whitelisted")
        db.expire_all()
        assert db.get(WhitelistEntry, entry.id).is_active is True

    def test_log_failure_is_server_error(self, client, db, make_script):
        make_script(id="s4")
        with patch.object(ExecutionLogService, "record", side_effect=StoreError("execution_logs.record")):
            resp = client.get("/script-loader/s4")

        _assert_denied(resp, 500, "Database error")
        assert _executions(db, "s4") == 0

    def test_counter_failure_rolls_back_log(self, client, db, make_script):
        make_script(id="s6", total_executions=3)
        with patch.object(
            ScriptService, "increment_executions", side_effect=StoreError("scripts.increment_executions")
        ):
            resp = client.get("/script-loader/s6")

        _assert_denied(resp, 500, "Database error")
        assert _logs(db, "s6") == []
        assert _executions(db, "s6") == 3

    def test_commit_failure_leaves_no_log(self, client, db, make_script):
        make_script(id="s7")
        with patch.object(
            ScriptLoaderService, "_commit", side_effect=StoreError("script_loader.commit_delivery")
        ):
            resp = client.get("/script-loader/s7")

        _assert_denied(resp, 500, "Database error")
        assert _logs(db, "s7") == []
        assert _executions(db, "s7") == 0

    def test_unexpected_error(self, client, make_script):
        make_script(id="s5")
        with patch("app.services.script_loader.service.wrap_script", side_effect=RuntimeError("boom")), patch(
            "app.api.routes.script_loader.denied_response", wraps=denied_response
        ) as denied:
            resp = client.get("/script-loader/s5")

        _assert_denied(resp, 500, "Server error")
        assert isinstance(denied.call_args.args[0], InternalError)


class TestPreflight:
    def test_options_returns_empty_body(self, client):
        resp = client.options("/script-loader/c1")

        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "x-roblox-player-id" in resp.headers["access-control-allow-headers"]


class TestScriptPath:
    @pytest.mark.parametrize(
        "path, expected",
        [("c1", "c1"), ("a/b", "b"), ("a/b/", ""), ("", ""), ("x/ c2 ", "c2")],
    )
    def test_last_segment_is_script_id(self, path, expected):
        assert script_id_from_path(path) == expected

    def test_nested_path_uses_last_segment(self, client, db, make_script):
        make_script(id="b")

        resp = client.get("/script-loader/a/b")

        assert resp.status_code == 200
        assert 'local _scriptId = "b"' in resp.text
        assert _executions(db, "b") == 1

    def test_trailing_slash_is_invalid(self, client, make_script):
        make_script(id="b")

        _assert_denied(client.get("/script-loader/b/"), 400, "Invalid request")

    def test_nested_missing_script(self, client):
        _assert_denied(client.get("/script-loader/a/missing"), 404, "Script not found")

    def test_other_methods_are_served_like_get(self, client, db, make_script):
        make_script(id="m1")

        assert client.post("/script-loader/m1").status_code == 200
        _assert_denied(client.delete("/script-loader/missing"), 404, "Script not found")
        assert _executions(db, "m1") == 1
