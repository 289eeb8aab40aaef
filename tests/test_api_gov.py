from __future__ import annotations

import json
import logging

import pytest
from fastapi.testclient import TestClient

from govledger.api.app import create_app
from govledger.config import GovConfig
from govledger.ledger.governance import GovernanceLedger
from govledger.runtime import metrics


def _cfg(**overrides) -> GovConfig:
    base = dict(
        mode="dev",
        api_host="127.0.0.1",
        api_port=8080,
        log_level="INFO",
        account_id_kind="int",
        metrics_enabled=True,
    )
    base.update(overrides)
    return GovConfig(**base)


@pytest.fixture()
def client() -> TestClient:
    metrics.reset()
    app = create_app(cfg=_cfg())
    with TestClient(app) as c:
        yield c


def test_http_end_to_end(client: TestClient) -> None:
    r = client.post("/v1/gov/proposals", json={"account": 1, "description": "Increase validator rewards"})
    assert r.status_code == 200
    pid = r.json()["proposal_id"]
    assert pid == 0

    for account, choice in [(1, True), (2, True), (3, False)]:
        r = client.post(f"/v1/gov/proposals/{pid}/votes", json={"account": account, "choice": choice})
        assert r.status_code == 200
        assert r.json() == {"ok": True}

    r = client.get(f"/v1/gov/proposals/{pid}")
    assert r.status_code == 200
    prop = r.json()["proposal"]
    assert (prop["yes_votes"], prop["no_votes"], prop["status"]) == (2, 1, "active")

    r = client.get(f"/v1/gov/proposals/{pid}/details")
    assert r.json() == {"ok": True, "description": "Increase validator rewards", "creator": 1}

    r = client.post(f"/v1/gov/proposals/{pid}/finalize")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "status": "approved"}

    r = client.post(f"/v1/gov/proposals/{pid}/votes", json={"account": 4, "choice": True})
    assert r.status_code == 409
    assert r.json()["ok"] is False
    assert r.json()["error"]["code"] == "proposal_not_active"


def test_http_double_vote_and_double_finalize(client: TestClient) -> None:
    pid = client.post("/v1/gov/proposals", json={"account": 7, "description": "t"}).json()["proposal_id"]

    assert client.post(f"/v1/gov/proposals/{pid}/votes", json={"account": 8, "choice": False}).status_code == 200
    r = client.post(f"/v1/gov/proposals/{pid}/votes", json={"account": 8, "choice": True})
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "already_voted"

    assert client.post(f"/v1/gov/proposals/{pid}/finalize").json()["status"] == "rejected"
    r = client.post(f"/v1/gov/proposals/{pid}/finalize")
    assert r.status_code == 409
    assert r.json()["error"]["details"] == {"proposal_id": pid, "status": "rejected"}


def test_http_unknown_proposal(client: TestClient) -> None:
    r = client.post("/v1/gov/proposals/9999/votes", json={"account": 1, "choice": True})
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "proposal_not_found"

    assert client.post("/v1/gov/proposals/9999/finalize").status_code == 404
    assert client.get("/v1/gov/proposals/9999/details").status_code == 404
    assert client.get("/v1/gov/proposals/9999").status_code == 404


def test_http_bad_account_is_400(client: TestClient) -> None:
    r = client.post("/v1/gov/proposals", json={"account": "alice", "description": "x"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "bad_account"


def test_http_missing_fields_is_422(client: TestClient) -> None:
    r = client.post("/v1/gov/proposals", json={"account": 1})
    assert r.status_code == 422


def test_http_list_is_most_recent_first(client: TestClient) -> None:
    for i in range(3):
        client.post("/v1/gov/proposals", json={"account": 1, "description": f"p{i}"})

    r = client.get("/v1/gov/proposals", params={"limit": 2})
    items = r.json()["items"]
    assert [x["proposal_id"] for x in items] == [2, 1]


def test_http_string_account_ids() -> None:
    ledger: GovernanceLedger[str] = GovernanceLedger()
    app = create_app(ledger=ledger, cfg=_cfg(account_id_kind="str"))
    with TestClient(app) as c:
        r = c.post("/v1/gov/proposals", json={"account": " @alice ", "description": "x"})
        pid = r.json()["proposal_id"]
        c.post(f"/v1/gov/proposals/{pid}/votes", json={"account": "@bob", "choice": True})

    assert ledger.get_proposal_details(pid) == ("x", "@alice")
    assert ledger.get_vote("@bob", pid) is True


def test_http_metrics(client: TestClient) -> None:
    pid = client.post("/v1/gov/proposals", json={"account": 1, "description": "m"}).json()["proposal_id"]
    client.post(f"/v1/gov/proposals/{pid}/votes", json={"account": 2, "choice": True})
    client.post(f"/v1/gov/proposals/{pid}/votes", json={"account": 2, "choice": True})
    client.post(f"/v1/gov/proposals/{pid}/finalize")

    r = client.get("/v1/metrics")
    assert r.status_code == 200
    body = r.text
    assert "govledger_gov_proposals_created 1" in body
    assert "govledger_gov_votes_cast 1" in body
    assert "govledger_gov_errors_conflict 1" in body
    assert "govledger_gov_proposals_approved 1" in body
    assert "govledger_gov_proposals_active 0" in body


def test_http_metrics_disabled() -> None:
    app = create_app(cfg=_cfg(metrics_enabled=False))
    with TestClient(app) as c:
        assert c.get("/v1/metrics").status_code == 404
        assert c.get("/v1/health").json() == {"ok": True}


def test_http_logs_transitions(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="govledger.gov")

    pid = client.post("/v1/gov/proposals", json={"account": 1, "description": "log"}).json()["proposal_id"]
    client.post(f"/v1/gov/proposals/{pid}/finalize")
    client.post(f"/v1/gov/proposals/{pid}/finalize")

    msgs = [r.getMessage() for r in caplog.records if r.name == "govledger.gov"]
    assert any('"event":"gov_proposal_created"' in m for m in msgs)
    assert any('"event":"gov_proposal_finalized"' in m for m in msgs)
    assert any('"event":"gov_op_rejected"' in m for m in msgs)


def test_request_id_header_is_echoed(client: TestClient) -> None:
    r = client.get("/v1/health", headers={"x-request-id": "req-123"})
    assert r.headers.get("x-request-id") == "req-123"


def test_docs_disabled_in_prod() -> None:
    app = create_app(cfg=_cfg(mode="prod"))
    with TestClient(app) as c:
        assert c.get("/docs").status_code == 404
        assert c.get("/openapi.json").status_code == 404


def test_http_active_gauge_reads_injected_ledger() -> None:
    ledger: GovernanceLedger[int] = GovernanceLedger()
    for i in range(3):
        ledger.create_proposal(1, f"pre-{i}")

    app = create_app(ledger=ledger, cfg=_cfg())
    with TestClient(app) as c:
        assert c.post("/v1/gov/proposals/0/finalize").status_code == 200
        assert "govledger_gov_proposals_active 2\n" in c.get("/v1/metrics").text

        # changes made on the ledger directly are visible too
        ledger.finalize_proposal(1)
        ledger.create_proposal(2, "direct")
        ledger.create_proposal(2, "direct-2")
        assert "govledger_gov_proposals_active 3\n" in c.get("/v1/metrics").text


def test_http_errors_counted_by_code(client: TestClient) -> None:
    pid = client.post("/v1/gov/proposals", json={"account": 1, "description": "e"}).json()["proposal_id"]
    client.post(f"/v1/gov/proposals/{pid}/finalize")
    client.post(f"/v1/gov/proposals/{pid}/finalize")

    assert "govledger_gov_errors_not_active 1\n" in client.get("/v1/metrics").text


def _http_events(caplog: pytest.LogCaptureFixture) -> list:
    out = []
    for rec in caplog.records:
        if rec.name != "govledger.http":
            continue
        obj = json.loads(rec.getMessage())
        if obj.get("event") == "http_request":
            out.append(obj)
    return out


def test_request_log_one_event_per_request(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.delenv("GOVLEDGER_LOG_REQUESTS", raising=False)
    caplog.set_level(logging.INFO, logger="govledger.http")

    app = create_app(cfg=_cfg())
    with TestClient(app) as c:
        c.post("/v1/gov/proposals", json={"account": 1, "description": "x"})
        c.get("/v1/gov/proposals/9999")

    events = _http_events(caplog)
    assert len(events) == 2
    assert (events[0]["method"], events[0]["path"], events[0]["status"]) == ("POST", "/v1/gov/proposals", 200)
    assert (events[1]["method"], events[1]["path"], events[1]["status"]) == ("GET", "/v1/gov/proposals/9999", 404)
    assert events[0]["request_id"]


def test_request_log_disabled_by_env(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("GOVLEDGER_LOG_REQUESTS", "0")
    caplog.set_level(logging.INFO, logger="govledger.http")

    app = create_app(cfg=_cfg())
    with TestClient(app) as c:
        assert c.get("/v1/health").status_code == 200

    assert _http_events(caplog) == []
