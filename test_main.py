"""
Commander Backend — API Tests
=============================
Run:  pytest test_main.py -v

Routes are exercised through TestClient with an in-memory store injected in
place of the process-wide backend.
"""
import json
import logging
import time
from unittest.mock import MagicMock, patch

import jwt
import pytest
from fastapi.testclient import TestClient

from commander.core.config import settings
from commander.core.dependencies import get_store
from commander.core.logging import JSONFormatter, request_id_var
from commander.stores import MemoryProfessionalStore, ProfessionalStore
from main import app

client = TestClient(app)

COMMANDER_ID = "PRO-memory-commander-1"
EMT_ID = "PRO-emt-1"
OTHER_ID = "PRO-emt-2"


def _token(professional_id, role, **extra):
    claims = {"professional_id": professional_id, "role": role, **extra}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _auth(professional_id=COMMANDER_ID, role="Commander", **extra):
    return {"Authorization": f"Bearer {_token(professional_id, role, **extra)}"}


def _professional(pid, name, email, role="EMT"):
    return {
        "professional_id": pid, "name": name, "email": email,
        "phone_number": "555-0000", "role": role, "group_id": "GRP-1",
        "current_event_id": None, "current_camp_id": None,
        "created_at": "2026-01-01T00:00:00+00:00", "updated_at": "2026-01-01T00:00:00+00:00",
    }



def _put_professional(store, record, password_hash):
    """Write a row straight into the in-memory tables, next to the seeded commander."""
    store._professionals[record["email"].lower()] = dict(record)
    store._passwords[record["professional_id"]] = password_hash


@pytest.fixture
def store():
    s = MemoryProfessionalStore(bcrypt_rounds=4)
    _put_professional(s, _professional(EMT_ID, "Zed Medic", "zed@test.com"), "hash-zed")
    _put_professional(s, _professional(OTHER_ID, "Alice Responder", "alice@test.com"), "hash-alice")
    app.dependency_overrides[get_store] = lambda: s
    yield s
    app.dependency_overrides.clear()


@pytest.fixture
def broken_store():
    s = MagicMock(spec=ProfessionalStore)
    s.backend = "mock"
    s.list_professionals.side_effect = RuntimeError("connection reset")
    s.find_professional_by_id.side_effect = RuntimeError("connection reset")
    s.update_professional.side_effect = RuntimeError("connection reset")
    s.verify_connection.side_effect = RuntimeError("connection reset")
    app.dependency_overrides[get_store] = lambda: s
    yield s
    app.dependency_overrides.clear()


# ═══════════════════════════════════════════════════════════════════════════
# HEALTH & METRICS
# ═══════════════════════════════════════════════════════════════════════════
class TestHealth:
    def test_health_ok(self):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["service"] == settings.SERVICE_NAME

    def test_readiness_ok(self, store):
        r = client.get("/health/ready")
        assert r.status_code == 200
        assert r.json()["backend"] == "memory"

    def test_readiness_fails_when_store_down(self, broken_store):
        r = client.get("/health/ready")
        assert r.status_code == 503
        assert r.json()["success"] is False

    def test_metrics_endpoint(self, store):
        client.get("/professionals", headers=_auth())
        r = client.get("/metrics")
        assert r.status_code == 200
        assert "commander_requests_total" in r.text

    def test_request_id_propagated(self):
        r = client.get("/health", headers={"X-Request-ID": "my-req-42"})
        assert r.headers["X-Request-ID"] == "my-req-42"


class TestRequestLogging:
    def test_formatter_reads_request_id_from_context(self):
        record = logging.LogRecord("commander.test", logging.INFO, __file__, 1, "hello", None, None)
        token = request_id_var.set("req-ctx-1")
        try:
            line = json.loads(JSONFormatter().format(record))
        finally:
            request_id_var.reset(token)
        assert line["request_id"] == "req-ctx-1"
        assert "request_id" not in json.loads(JSONFormatter().format(record))

    def test_error_log_carries_request_id(self, broken_store):
        lines = []
        handler = logging.Handler()
        handler.setFormatter(JSONFormatter())
        handler.emit = lambda record: lines.append(json.loads(handler.format(record)))
        errors_logger = logging.getLogger("commander.core.errors")
        errors_logger.addHandler(handler)
        try:
            r = client.get("/professionals", headers={**_auth(), "X-Request-ID": "req-500"})
        finally:
            errors_logger.removeHandler(handler)
        assert r.status_code == 500
        assert lines and lines[-1]["request_id"] == "req-500"
        assert request_id_var.get() is None


# ═══════════════════════════════════════════════════════════════════════════
# BEARER IDENTITY
# ═══════════════════════════════════════════════════════════════════════════
class TestAuth:
    def test_missing_token_401(self, store):
        r = client.get("/professionals")
        assert r.status_code == 401
        assert r.json() == {"success": False, "message": "No token provided"}

    def test_invalid_token_401(self, store):
        r = client.get("/professionals", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401
        assert r.json()["message"] == "Invalid token"

    def test_wrong_secret_401(self, store):
        bad = jwt.encode({"professional_id": EMT_ID, "role": "EMT"}, "x" * 32, algorithm="HS256")
        r = client.get("/professionals", headers={"Authorization": f"Bearer {bad}"})
        assert r.status_code == 401

    def test_expired_token_401(self, store):
        r = client.get("/professionals", headers=_auth(exp=int(time.time()) - 60))
        assert r.status_code == 401
        assert r.json()["message"] == "Token expired"

    def test_camel_case_id_claim_accepted(self, store):
        token = jwt.encode({"professionalId": EMT_ID, "role": "EMT"}, settings.JWT_SECRET,
                           algorithm=settings.JWT_ALGORITHM)
        r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 200
        assert r.json()["professional"]["professional_id"] == EMT_ID

    def test_me_not_found(self, store):
        r = client.get("/auth/me", headers=_auth("PRO-ghost", "EMT"))
        assert r.status_code == 404


# ═══════════════════════════════════════════════════════════════════════════
# GET /professionals
# ═══════════════════════════════════════════════════════════════════════════
class TestListProfessionals:
    def test_sorted_by_name_without_password(self, store):
        r = client.get("/professionals", headers=_auth())
        assert r.status_code == 200
        d = r.json()
        assert d["success"] is True
        assert [p["name"] for p in d["professionals"]] == \
            ["Alice Responder", "Commander (Local)", "Zed Medic"]
        assert all("password_hash" not in p for p in d["professionals"])

    def test_backend_failure_500_hides_detail(self, broken_store):
        r = client.get("/professionals", headers=_auth())
        assert r.status_code == 500
        assert r.json() == {"success": False, "message": "Failed to retrieve professionals"}

    def test_backend_failure_500_shows_detail_in_development(self, broken_store):
        with patch.object(settings, "APP_ENV", "development"):
            r = client.get("/professionals", headers=_auth())
        assert r.status_code == 500
        assert r.json()["error"] == "connection reset"


# ═══════════════════════════════════════════════════════════════════════════
# GET /professionals/{id} and /tasks
# ═══════════════════════════════════════════════════════════════════════════
class TestGetProfessional:
    def test_found(self, store):
        r = client.get(f"/professionals/{EMT_ID}", headers=_auth(EMT_ID, "EMT"))
        assert r.status_code == 200
        p = r.json()["professional"]
        assert p["email"] == "zed@test.com"
        assert "password_hash" not in p

    def test_not_found(self, store):
        r = client.get("/professionals/PRO-404", headers=_auth())
        assert r.status_code == 404
        assert r.json() == {"success": False, "message": "Professional not found"}

    def test_failure_500(self, broken_store):
        r = client.get(f"/professionals/{EMT_ID}", headers=_auth())
        assert r.status_code == 500
        assert r.json()["message"] == "Failed to retrieve professional"

    def test_task_summary_missing_outside_relational_backend(self, store):
        r = client.get(f"/professionals/{EMT_ID}/tasks", headers=_auth())
        assert r.status_code == 404

    def test_task_summary_found(self):
        s = MagicMock(spec=ProfessionalStore)
        s.get_task_summary.return_value = {"professional_id": EMT_ID, "total_tasks": 3}
        app.dependency_overrides[get_store] = lambda: s
        try:
            r = client.get(f"/professionals/{EMT_ID}/tasks", headers=_auth())
        finally:
            app.dependency_overrides.clear()
        assert r.status_code == 200
        assert r.json() == {"success": True,
                            "taskSummary": {"professional_id": EMT_ID, "total_tasks": 3}}
        s.get_task_summary.assert_called_once_with(EMT_ID)


# ═══════════════════════════════════════════════════════════════════════════
# PUT /professionals/{id}
# ═══════════════════════════════════════════════════════════════════════════
class TestUpdateProfessional:
    def test_self_update_with_camel_case(self, store):
        r = client.put(f"/professionals/{EMT_ID}", headers=_auth(EMT_ID, "EMT"),
                       json={"phoneNumber": "555-9999", "currentCampId": "CMP-2"})
        assert r.status_code == 200
        d = r.json()
        assert d["success"] is True
        assert d["message"] == "Professional updated successfully"
        assert d["professional"]["phone_number"] == "555-9999"
        assert d["professional"]["current_camp_id"] == "CMP-2"
        assert d["professional"]["name"] == "Zed Medic"
        assert "password_hash" not in d["professional"]

    def test_non_commander_cannot_update_others(self, store):
        r = client.put(f"/professionals/{OTHER_ID}", headers=_auth(EMT_ID, "EMT"),
                       json={"role": "Commander"})
        assert r.status_code == 403
        assert r.json()["success"] is False
        assert store.find_professional_by_id(OTHER_ID)["role"] == "EMT"

    def test_commander_updates_anyone(self, store):
        r = client.put(f"/professionals/{OTHER_ID}", headers=_auth(),
                       json={"role": "Medical Officer", "group_id": "GRP-7"})
        assert r.status_code == 200
        assert r.json()["professional"]["role"] == "Medical Officer"
        assert r.json()["professional"]["group_id"] == "GRP-7"

    def test_nulls_leave_fields_unchanged(self, store):
        r = client.put(f"/professionals/{EMT_ID}", headers=_auth(EMT_ID, "EMT"),
                       json={"name": None, "phone_number": None, "groupId": None})
        assert r.status_code == 200
        p = r.json()["professional"]
        assert p["name"] == "Zed Medic"
        assert p["phone_number"] == "555-0000"
        assert p["group_id"] == "GRP-1"

    def test_unknown_id_404(self, store):
        r = client.put("/professionals/PRO-404", headers=_auth(), json={"name": "X"})
        assert r.status_code == 404

    def test_wrongly_typed_field_422_envelope(self, store):
        r = client.put(f"/professionals/{EMT_ID}", headers=_auth(EMT_ID, "EMT"),
                       json={"name": 123})
        assert r.status_code == 422
        assert r.json() == {"success": False, "message": "Invalid request body"}
        assert store.find_professional_by_id(EMT_ID)["name"] == "Zed Medic"

    def test_malformed_json_422_envelope(self, store):
        r = client.put(f"/professionals/{EMT_ID}", content="{not json",
                       headers={**_auth(EMT_ID, "EMT"), "Content-Type": "application/json"})
        assert r.status_code == 422
        assert r.json() == {"success": False, "message": "Invalid request body"}

    def test_validation_detail_only_in_development(self, store):
        with patch.object(settings, "APP_ENV", "development"):
            r = client.put(f"/professionals/{EMT_ID}", headers=_auth(EMT_ID, "EMT"),
                           json={"name": 123})
        assert r.status_code == 422
        assert r.json()["success"] is False
        assert r.json()["error"][0]["loc"] == ["body", "name"]

    def test_failure_500(self, broken_store):
        r = client.put(f"/professionals/{EMT_ID}", headers=_auth(), json={"name": "X"})
        assert r.status_code == 500
        assert r.json()["message"] == "Failed to update professional"


# ═══════════════════════════════════════════════════════════════════════════
# DRILLS / CASUALTIES / RESOURCES
# ═══════════════════════════════════════════════════════════════════════════
class TestCommanderViews:
    def test_no_active_drill_404(self, store):
        r = client.get("/drills/active", headers=_auth())
        assert r.status_code == 404
        assert r.json()["message"] == "No active drill found"

    def test_start_drill_requires_name_and_date(self, store):
        r = client.post("/drills", headers=_auth(), json={"drillName": "Bus crash"})
        assert r.status_code == 400
        assert r.json()["message"] == "Drill name and date are required"

    def test_start_and_read_drill(self, store):
        r = client.post("/drills", headers=_auth(), json={
            "drillName": "Bus crash", "date": "2026-10-20", "location": "Depot",
            "roleAssignments": {"triage": EMT_ID},
        })
        assert r.status_code == 201
        drill = r.json()
        assert drill["drill_name"] == "Bus crash"
        assert drill["is_active"] is True
        assert drill["id"].startswith("DRL-")
        assert drill["role_assignments"] == {"triage": EMT_ID}

        r = client.get("/drills/active", headers=_auth(EMT_ID, "EMT"))
        assert r.status_code == 200
        assert r.json() == drill

    def test_casualty_statistics(self, store):
        r = client.get("/casualties/statistics", headers=_auth())
        assert r.status_code == 200
        data = r.json()["data"]
        assert set(data) == {"red", "yellow", "green", "black"}
        assert data["red"] == {"color": "red", "in_treatment": 0, "transported": 0, "total": 0}

    def test_resource_requests(self, store):
        r = client.get("/resources", headers=_auth())
        assert r.status_code == 200
        assert r.json() == {"success": True, "data": []}
