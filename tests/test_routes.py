"""
AboApp Backend — API Endpoint Tests
=====================================

What:  HTTP behaviour of the routers through the full app (middleware,
       exception handlers) with HTTPX's ASGITransport.
How:   The `test_client` fixture points the session dependency at the
       in-memory database and signs in as `user`; collaborators are patched
       on the route modules.

What we test:
    ✅ Create → listing round trip, 201 status, error body format
    ✅ Oversized prices → 400, field shape errors → 422
    ✅ Reactivate / delete return the refreshed listing
    ✅ Missing bearer token → 401
    ✅ Sign-in endpoints map provider errors to 400 / 502
    ✅ /api/reminder-run only answers GET
"""

from datetime import date
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from aboapp.exceptions import AuthenticationError, AuthProviderError
from aboapp.schemas.reminder import ReminderRunResponse, SendOutcome
from aboapp.services.auth_base import AuthSession, AuthUser


class TestSubscriptionEndpoints:

    @pytest.mark.asyncio
    async def test_create_then_list(self, test_client):
        response = await test_client.post("/api/subscriptions", json={
            "name": "Spotify",
            "provider": "Spotify",
            "price": "10.99",
            "next_renewal_date": "2025-06-15",
        })

        assert response.status_code == 201
        body = response.json()
        assert [s["name"] for s in body["active"]] == ["Spotify"]
        assert body["active"][0]["icon_key"] == "spotify"
        assert body["total_active"] == "10.99"

        listing = await test_client.get("/api/subscriptions")
        assert listing.status_code == 200
        assert listing.json()["active"][0]["price_cents"] == 1099

    @pytest.mark.asyncio
    async def test_validation_error_body(self, test_client):
        response = await test_client.post("/api/subscriptions", json={
            "name": "Spotify",
            "price": "10.99",
            "is_active": True,
        })

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "next_renewal_date"
        assert response.headers["X-Request-ID"] == body["request_id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price", ["1e100", "99999999999"])
    async def test_oversized_price_is_400(self, test_client, price):
        response = await test_client.post("/api/subscriptions", json={
            "name": "Spotify",
            "price": price,
            "next_renewal_date": "2025-06-15",
        })

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "price"

        listing = await test_client.get("/api/subscriptions")
        assert listing.json()["active"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [{"name": "   "}, {"currency": "EURO"}, {"next_renewal_date": "15.06.2025"}],
    )
    async def test_field_shape_errors_are_422(self, test_client, overrides):
        payload = {"name": "Spotify", "price": "10.99", "next_renewal_date": "2025-06-15"}
        payload.update(overrides)

        response = await test_client.post("/api/subscriptions", json=payload)

        assert response.status_code == 422
        assert "detail" in response.json()

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/subscriptions", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_generated_when_absent(self, test_client):
        first = await test_client.get("/api/subscriptions")
        second = await test_client.get("/api/subscriptions")

        rid = first.headers["X-Request-ID"]
        assert len(rid) == 8
        int(rid, 16)
        assert second.headers["X-Request-ID"] != rid

    @pytest.mark.asyncio
    async def test_reactivate_and_delete(self, test_client):
        created = await test_client.post("/api/subscriptions", json={
            "name": "Netflix",
            "price": "12.99",
            "is_active": False,
        })
        sub_id = created.json()["paused"][0]["id"]

        without_date = await test_client.post(f"/api/subscriptions/{sub_id}/reactivate")
        assert without_date.status_code == 400

        reactivated = await test_client.post(
            f"/api/subscriptions/{sub_id}/reactivate",
            json={"next_renewal_date": "2025-07-01"},
        )
        assert reactivated.status_code == 200
        assert reactivated.json()["active"][0]["next_renewal_date"] == "2025-07-01"
        assert reactivated.json()["paused"] == []

        deleted = await test_client.delete(f"/api/subscriptions/{sub_id}")
        assert deleted.status_code == 200
        assert deleted.json()["active"] == []

        missing = await test_client.delete(f"/api/subscriptions/{sub_id}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_cost_summary(self, test_client):
        await test_client.post("/api/subscriptions", json={
            "name": "Netflix",
            "price": "9.99",
            "next_renewal_date": "2025-06-15",
        })

        june = await test_client.get("/api/costs", params={"month": "2025-06-01"})
        july = await test_client.get("/api/costs", params={"month": "2025-07-01"})

        assert june.status_code == 200
        assert june.json()["selected_cost"] == "9.99"
        assert july.json()["selected_cost"] == "0.00"
        assert len(june.json()["month_options"]) == 12
        assert len(june.json()["chart"]) == 6


class TestBearerAuthentication:

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, test_client):
        from aboapp.main import app
        from aboapp.routes.deps import get_current_user

        app.dependency_overrides.pop(get_current_user)

        response = await test_client.get("/api/subscriptions")

        assert response.status_code == 401
        assert response.json()["error"] == "not_authenticated"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_token_resolved_through_provider(self, test_client):
        from aboapp.main import app
        from aboapp.routes.deps import get_current_user

        app.dependency_overrides.pop(get_current_user)
        user_id = uuid4()

        with patch("aboapp.routes.deps.auth_service") as mock_auth:
            mock_auth.get_user = AsyncMock(return_value=AuthUser(user_id=user_id, email="anna@example.com"))
            response = await test_client.get(
                "/api/auth/me", headers={"Authorization": "Bearer jwt-access"}
            )

        assert response.status_code == 200
        assert response.json() == {"user_id": str(user_id), "email": "anna@example.com"}
        mock_auth.get_user.assert_awaited_once_with("jwt-access")

    @pytest.mark.asyncio
    async def test_expired_token_is_401(self, test_client):
        from aboapp.main import app
        from aboapp.routes.deps import get_current_user

        app.dependency_overrides.pop(get_current_user)

        with patch("aboapp.routes.deps.auth_service") as mock_auth:
            mock_auth.get_user = AsyncMock(side_effect=AuthenticationError(message="invalid JWT"))
            response = await test_client.get(
                "/api/subscriptions", headers={"Authorization": "Bearer expired"}
            )

        assert response.status_code == 401
        assert response.json()["message"] == "invalid JWT"


class TestSignInEndpoints:

    @pytest.mark.asyncio
    async def test_send_code(self, test_client):
        with patch("aboapp.routes.auth.auth_service") as mock_auth:
            mock_auth.send_code = AsyncMock(return_value=None)
            response = await test_client.post("/api/auth/code", json={"email": "anna@example.com"})

        assert response.status_code == 200
        mock_auth.send_code.assert_awaited_once_with("anna@example.com")

    @pytest.mark.asyncio
    async def test_send_code_rejects_malformed_email(self, test_client):
        response = await test_client.post("/api/auth/code", json={"email": "not-an-email"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_verify_returns_session(self, test_client):
        user_id = uuid4()
        session = AuthSession(
            access_token="jwt-access",
            refresh_token="refresh",
            expires_in=3600,
            user_id=user_id,
            email="anna@example.com",
        )
        with patch("aboapp.routes.auth.auth_service") as mock_auth:
            mock_auth.verify_code = AsyncMock(return_value=session)
            response = await test_client.post(
                "/api/auth/verify", json={"email": "anna@example.com", "code": "123456"}
            )

        assert response.status_code == 200
        assert response.json()["access_token"] == "jwt-access"
        assert response.json()["user_id"] == str(user_id)

    @pytest.mark.asyncio
    async def test_wrong_code_shows_provider_message(self, test_client):
        with patch("aboapp.routes.auth.auth_service") as mock_auth:
            mock_auth.verify_code = AsyncMock(side_effect=AuthProviderError(
                message="Token has expired or is invalid", status_code=403
            ))
            response = await test_client.post(
                "/api/auth/verify", json={"email": "anna@example.com", "code": "000000"}
            )

        assert response.status_code == 400
        assert response.json()["message"] == "Token has expired or is invalid"

    @pytest.mark.asyncio
    async def test_unreachable_provider_is_502(self, test_client):
        with patch("aboapp.routes.auth.auth_service") as mock_auth:
            mock_auth.send_code = AsyncMock(side_effect=AuthProviderError(message="not reachable"))
            response = await test_client.post("/api/auth/code", json={"email": "anna@example.com"})

        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_logout(self, test_client, user):
        with patch("aboapp.routes.auth.auth_service") as mock_auth:
            mock_auth.sign_out = AsyncMock(return_value=None)
            response = await test_client.post("/api/auth/logout")

        assert response.status_code == 200
        mock_auth.sign_out.assert_awaited_once_with(user.access_token)


class TestReminderEndpoint:

    @pytest.mark.asyncio
    async def test_get_runs_job(self, test_client):
        sub_id = uuid4()
        outcome = ReminderRunResponse(
            target=date(2025, 3, 4),
            count=1,
            sent=[SendOutcome(sub_id=sub_id, status=200)],
        )
        with patch("aboapp.routes.reminders.reminder_service") as mock_service:
            mock_service.run = AsyncMock(return_value=outcome)
            response = await test_client.get("/api/reminder-run")

        assert response.status_code == 200
        assert response.json() == {
            "ok": True,
            "target": "2025-03-04",
            "count": 1,
            "sent": [{"sub_id": str(sub_id), "status": 200, "error": None}],
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
    async def test_other_methods_not_allowed(self, test_client, method):
        response = await test_client.request(method, "/api/reminder-run")
        assert response.status_code == 405

    @pytest.mark.asyncio
    async def test_failure_returns_error_json(self, test_client):
        from aboapp.exceptions import StoreError

        with patch("aboapp.routes.reminders.reminder_service") as mock_service:
            mock_service.run = AsyncMock(side_effect=StoreError(message="relation does not exist"))
            response = await test_client.get("/api/reminder-run")

        assert response.status_code == 500
        assert response.json()["error"] == "store_error"
        assert response.json()["message"] == "relation does not exist"


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_components(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["database"] == "connected"
        assert body["auth_provider"] in {"configured", "missing"}
        assert body["status"] in {"healthy", "degraded"}
