"""
Integration tests for the waitlist flow.

Tests the full submission flow through the application with the
in-memory signup store: validation, deduplication, updates and the
response envelope.
"""

import logging
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from src.adapters.repository.memory import InMemorySignupRepository
from src.api.dependencies import get_app_settings
from src.api.main import app
from src.config.settings import Settings, get_settings
from src.domain.exceptions import StorageError

pytestmark = pytest.mark.integration


class TestSubmissionScenarios:
    """End-to-end submission scenarios."""

    def test_valid_submission_creates_one_record(
        self, client: TestClient, repository: InMemorySignupRepository
    ) -> None:
        response = client.post("/waitlist", json={"email": "a@b.co", "consent": True})

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert len(repository) == 1
        signup = repository.find_by_email("a@b.co")
        assert signup.consent is True
        assert signup.submitted_at is not None

    def test_invalid_email_is_rejected(
        self, client: TestClient, repository: InMemorySignupRepository
    ) -> None:
        response = client.post("/waitlist", json={"email": "not-an-email", "consent": True})

        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "Invalid email"}
        assert len(repository) == 0

    @pytest.mark.parametrize(
        ("payload", "error"),
        [
            ({"email": "a\u0000b@c.co", "consent": True}, "Invalid email"),
            ({"email": "a@b.co", "consent": True, "name": "Jane\u0000"}, "Invalid request body"),
        ],
    )
    def test_control_characters_are_rejected_before_storage(
        self, client: TestClient, repository: InMemorySignupRepository, payload: dict, error: str
    ) -> None:
        response = client.post("/waitlist", json=payload)

        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": error}
        assert len(repository) == 0

    def test_rejection_log_omits_submitted_values(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO):
            client.post("/waitlist", json={"email": "jane.doe@nowhere", "consent": True})
            client.post(
                "/waitlist",
                json={"email": "a@b.co", "consent": True, "useCase": "jane-doe-private"},
            )

        assert "InvalidEmail" in caplog.text
        assert "InvalidUseCase" in caplog.text
        assert "jane" not in caplog.text

    def test_refused_consent_creates_no_record(
        self, client: TestClient, repository: InMemorySignupRepository
    ) -> None:
        response = client.post("/waitlist", json={"email": "a@b.co", "consent": False})

        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert body["error"]
        assert len(repository) == 0

    def test_store_unreachable_returns_503_without_record(self, client: TestClient) -> None:
        failing = MagicMock()
        failing.find_by_email.side_effect = StorageError("connection refused")
        failing.insert_if_absent.side_effect = StorageError("connection refused")
        app.state.repository = failing

        response = client.post("/waitlist", json={"email": "a@b.co", "consent": True})

        assert response.status_code == 503
        assert response.json() == {"ok": False, "error": "Service temporarily unavailable"}
        assert failing.find_by_email.call_count == 3
        failing.insert_if_absent.assert_not_called()
        assert "connection refused" not in response.text

    def test_retry_policy_follows_settings_dependency(self, client: TestClient) -> None:
        failing = MagicMock()
        failing.find_by_email.side_effect = StorageError("connection refused")
        app.state.repository = failing
        app.dependency_overrides[get_app_settings] = lambda: Settings(
            _env_file=None, max_attempts=1
        )

        response = client.post("/waitlist", json={"email": "a@b.co", "consent": True})

        assert response.status_code == 503
        assert failing.find_by_email.call_count == 1

    def test_storage_failure_is_logged(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        failing = MagicMock()
        failing.find_by_email.side_effect = StorageError("connection refused")
        app.state.repository = failing

        with caplog.at_level(logging.WARNING):
            client.post("/waitlist", json={"email": "a@b.co", "consent": True})

        assert any(r.levelno == logging.ERROR for r in caplog.records)


class TestDeduplication:
    """Idempotence, case-insensitivity and update semantics."""

    def test_identical_resubmission_is_idempotent(
        self, client: TestClient, repository: InMemorySignupRepository
    ) -> None:
        body = {"email": "a@b.co", "consent": True, "name": "Jane"}

        first = client.post("/waitlist", json=body)
        second = client.post("/waitlist", json=body)

        assert first.json() == second.json() == {"ok": True}
        assert len(repository) == 1

    def test_email_case_resolves_to_same_record(
        self, client: TestClient, repository: InMemorySignupRepository
    ) -> None:
        client.post("/waitlist", json={"email": "Jane@Example.com", "consent": True})
        client.post("/waitlist", json={"email": "jane@example.com", "consent": True})
        client.post("/waitlist", json={"email": "  JANE@EXAMPLE.COM ", "consent": True})

        assert len(repository) == 1
        assert repository.find_by_email("jane@example.com") is not None

    def test_new_name_updates_existing_record(
        self, client: TestClient, repository: InMemorySignupRepository
    ) -> None:
        client.post("/waitlist", json={"email": "a@b.co", "consent": True, "name": "Jane"})
        original = repository.find_by_email("a@b.co")

        response = client.post(
            "/waitlist",
            json={"email": "a@b.co", "consent": True, "name": "Jane Doe", "useCase": "industry"},
        )

        updated = repository.find_by_email("a@b.co")
        assert response.json() == {"ok": True}
        assert updated.name == "Jane Doe"
        assert updated.use_case.value == "industry"
        assert updated.id == original.id
        assert updated.submitted_at == original.submitted_at

    def test_rejected_resubmission_does_not_modify_record(
        self, client: TestClient, repository: InMemorySignupRepository
    ) -> None:
        client.post("/waitlist", json={"email": "a@b.co", "consent": True, "name": "Jane"})

        response = client.post(
            "/waitlist", json={"email": "a@b.co", "consent": False, "name": "Mallory"}
        )

        assert response.status_code == 400
        assert repository.find_by_email("a@b.co").name == "Jane"


class TestHealthChecks:
    """Tests for GET /waitlist and /health."""

    def test_waitlist_get_skips_store(self, client: TestClient) -> None:
        store = MagicMock()
        app.state.repository = store

        response = client.get("/waitlist")

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert store.mock_calls == []

    def test_health_reports_healthy(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_health_reports_unhealthy_store(self, client: TestClient) -> None:
        store = MagicMock()
        store.ping.side_effect = StorageError("connection refused")
        app.state.repository = store

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json() == {"status": "unhealthy"}


class TestLifespan:
    """Application startup with the in-memory backend."""

    def test_memory_backend_serves_requests(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORE_BACKEND", "memory")
        get_settings.cache_clear()
        try:
            with TestClient(app) as client:
                assert isinstance(app.state.repository, InMemorySignupRepository)
                response = client.post("/waitlist", json={"email": "a@b.co", "consent": True})
                assert response.json() == {"ok": True}
                assert len(app.state.repository) == 1
        finally:
            get_settings.cache_clear()
