# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the Starlette problem+json exception handlers."""

import uuid

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient
from structlog.testing import capture_logs

from shielderrors.annotations import error_code
from shielderrors.handler import GlobalExceptionHandler
from shielderrors.problem_detail import create_generic_error
from shielderrors.web.adapters.starlette import (
    ProblemDetailsMiddleware,
    problem_response,
    register_exception_handlers,
)


@error_code(
    "USER_NOT_FOUND",
    status=404,
    doc="https://api.example.com/docs/errors#user-not-found",
    title="User Not Found",
)
class UserNotFoundError(Exception):
    pass


@error_code("DUPLICATE_EMAIL", status=409, title="Email Already Exists")
class DuplicateEmailError(Exception):
    pass


class CreateUserRequest(BaseModel):
    name: str
    email: str


async def get_user(request: Request) -> JSONResponse:
    raise UserNotFoundError(f"User with ID {request.path_params['user_id']} not found")


async def create_user(request: Request) -> JSONResponse:
    payload = CreateUserRequest.model_validate(await request.json())
    if payload.email == "john@example.com":
        raise DuplicateEmailError(f"User with email {payload.email} already exists")
    return JSONResponse(payload.model_dump(), status_code=201)


async def insert_user(request: Request) -> JSONResponse:
    raise IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint failed: users.email"))


async def crash(request: Request) -> JSONResponse:
    raise RuntimeError("Something unexpected happened in the system")


async def leak(request: Request) -> JSONResponse:
    raise UserNotFoundError("lookup failed for token=abc456")


@error_code("EMPTY_CART", status=400, title="Cart Is Empty")
class EmptyCartError(Exception):
    pass


async def checkout(request: Request) -> JSONResponse:
    raise EmptyCartError()


def make_test_app() -> Starlette:
    app = Starlette(
        routes=[
            Route("/users/{user_id}", get_user),
            Route("/users", create_user, methods=["POST"]),
            Route("/users/insert", insert_user, methods=["POST"]),
            Route("/crash", crash),
            Route("/leak", leak),
            Route("/checkout", checkout, methods=["POST"]),
        ]
    )
    register_exception_handlers(app)
    return app


class TestProblemResponse:
    def test_sets_status_and_media_type(self):
        response = problem_response(500, create_generic_error(trace_id="t-1"))
        assert response.status_code == 500
        assert response.media_type == "application/problem+json"
        assert response.headers["content-type"] == "application/problem+json"


class TestStarletteExceptionHandlers:
    def setup_method(self):
        self.client = TestClient(make_test_app())

    def test_annotated_exception(self):
        resp = self.client.get("/users/999")
        assert resp.status_code == 404
        assert resp.headers["content-type"] == "application/problem+json"
        body = resp.json()
        assert list(body) == ["type", "title", "status", "detail", "code", "traceId", "timestamp"]
        assert body["type"] == "https://api.example.com/docs/errors#user-not-found"
        assert body["title"] == "User Not Found"
        assert body["status"] == 404
        assert body["detail"] == "User with ID 999 not found"
        assert body["code"] == "USER_NOT_FOUND"
        uuid.UUID(body["traceId"])

    def test_annotated_without_doc_has_no_type(self):
        resp = self.client.post("/users", json={"name": "Test", "email": "john@example.com"})
        assert resp.status_code == 409
        body = resp.json()
        assert "type" not in body
        assert body["title"] == "Email Already Exists"
        assert body["code"] == "DUPLICATE_EMAIL"

    def test_validation_error(self):
        resp = self.client.post("/users", json={"name": "Test"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["detail"] == "Validation failed: email: Field required"

    def test_malformed_body(self):
        resp = self.client.post(
            "/users",
            content=b'{"invalid": json}',
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "MALFORMED_REQUEST"
        assert body["detail"] == "The request body is malformed or contains invalid JSON."

    def test_data_integrity_violation(self):
        resp = self.client.post("/users/insert")
        assert resp.status_code == 409
        body = resp.json()
        assert body["code"] == "DATA_INTEGRITY_VIOLATION"
        assert "users.email" not in resp.text

    def test_unhandled_exception(self):
        resp = self.client.get("/crash")
        assert resp.status_code == 500
        assert resp.headers["content-type"] == "application/problem+json"
        body = resp.json()
        assert body["code"] == "INTERNAL_SERVER_ERROR"
        assert "Something unexpected" not in resp.text
        assert "RuntimeError" not in resp.text

    def test_redacts_annotated_detail(self):
        resp = self.client.get("/leak")
        assert resp.json()["detail"] == "lookup failed for token=[REDACTED]"
        assert "abc456" not in resp.text

    def test_status_line_matches_body(self):
        for method, path in [("GET", "/users/1"), ("POST", "/users/insert"), ("GET", "/crash")]:
            resp = self.client.request(method, path)
            assert resp.status_code == resp.json()["status"]

    def test_success_is_untouched(self):
        resp = self.client.post("/users", json={"name": "Jane", "email": "jane@example.com"})
        assert resp.status_code == 201
        assert resp.json() == {"name": "Jane", "email": "jane@example.com"}


class TestRegisterExceptionHandlers:
    def test_returns_and_stores_handler(self):
        app = Starlette()
        handler = GlobalExceptionHandler()
        assert register_exception_handlers(app, handler) is handler
        assert app.state.shield_exception_handler is handler

    def test_creates_default_handler(self):
        app = Starlette()
        handler = register_exception_handlers(app)
        assert isinstance(handler, GlobalExceptionHandler)
        assert [m.cls for m in app.user_middleware] == [ProblemDetailsMiddleware]
        assert Exception not in app.exception_handlers


class TestErrorsStayInsideApp:
    def setup_method(self):
        self.client = TestClient(make_test_app())

    def test_annotated_exception_does_not_reach_server(self):
        with capture_logs() as logs:
            resp = self.client.get("/users/42")
        assert resp.status_code == 404
        assert resp.json()["code"] == "USER_NOT_FOUND"
        assert [entry["event"] for entry in logs] == ["annotated_exception"]
        assert logs[0]["trace_id"] == resp.json()["traceId"]

    def test_generic_exception_does_not_reach_server(self):
        with capture_logs() as logs:
            resp = self.client.get("/crash")
        assert resp.status_code == 500
        assert resp.json()["code"] == "INTERNAL_SERVER_ERROR"
        assert [entry["event"] for entry in logs] == ["unhandled_exception"]
        assert logs[0]["trace_id"] == resp.json()["traceId"]

    def test_framework_kind_logs_once(self):
        with capture_logs() as logs:
            resp = self.client.post("/users/insert")
        assert resp.status_code == 409
        assert [entry["event"] for entry in logs] == ["data_integrity_violation"]

    def test_annotated_exception_without_message_omits_detail(self):
        resp = self.client.post("/checkout")
        assert resp.status_code == 400
        body = resp.json()
        assert "detail" not in body
        assert body["title"] == "Cart Is Empty"

