"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from api.exception_handlers import setup_exception_handlers
from core.exceptions import AuthorizationError, PostNotFoundError


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


def _registered_handler(app: FastAPI, exc_class: type) -> object:
    for registered, handler in app.exception_handlers.items():
        if registered is exc_class:
            return handler
    raise AssertionError(f"No handler registered for {exc_class.__name__}")


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise PostNotFoundError("some-id")

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.get("/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "POST_NOT_FOUND"
        assert body["message"] == "Post not found"
        assert body["details"]["post_id"] == "some-id"

    @pytest.mark.asyncio
    async def test_ownership_error_is_401(self) -> None:
        app = _create_test_app()

        @app.delete("/raise-owner")
        async def _() -> None:
            raise AuthorizationError()

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.delete("/raise-owner")

        assert response.status_code == 401
        assert response.json()["message"] == "User not authorized"

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.get("/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_validation_error_returns_400_with_field_details(self) -> None:
        from pydantic import BaseModel, Field

        app = _create_test_app()

        class Body(BaseModel):
            text: str = Field(..., min_length=1)

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"text": ""})

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert isinstance(body["details"], list)
        assert body["details"][0]["field"] == "body.text"

    @pytest.mark.asyncio
    async def test_database_error_hides_internals(self) -> None:
        app = _create_test_app()
        handler = _registered_handler(app, SQLAlchemyError)

        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"
        exc = OperationalError("SELECT 1", {}, Exception("connection refused"))

        response = await handler(mock_request, exc)  # type: ignore[operator]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "DATABASE_ERROR"
        assert body["message"] == "Server Error"
        assert "connection refused" not in response.body.decode()
        assert body["details"]["request_id"] == "test-req-id"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()
        handler = _registered_handler(app, Exception)

        # Build a fake request with request.state.request_id
        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        exc = RuntimeError("Something went wrong")

        response = await handler(mock_request, exc)  # type: ignore[operator]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
