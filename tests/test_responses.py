from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from utils.responses import register_exception_handlers


def _app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("unexpected")

    @app.get("/db-down")
    def db_down():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    return app


def test_unhandled_errors_use_envelope():
    client = TestClient(_app(), raise_server_exceptions=False)

    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}


def test_database_errors_use_envelope():
    client = TestClient(_app(), raise_server_exceptions=False)

    response = client.get("/db-down")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Database error"}
