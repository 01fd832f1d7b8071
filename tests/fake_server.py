"""In-memory stand-in for the storage server, used by the integration tests."""
import logging
import socket

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from rocksdb_client.auth import basic_auth_header

logger = logging.getLogger(__name__)

USERNAME = "username"
PASSWORD = "password"


def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class NameBody(BaseModel):
    name: str


class KeysBody(NameBody):
    keys: list[str]


class PutBody(KeysBody):
    values: list[str | None]


def ok(body=None):
    return {"code": 0, "message": "OK", "body": body}


def fail(code, message):
    return {"code": code, "message": message, "body": None}


def create_app(username=None, password=None):
    app = FastAPI()
    # db name -> {base64 key: base64 value or None}
    databases: dict[str, dict[str, str | None]] = {}
    app.state.databases = databases
    app.state.headers = []
    expected = basic_auth_header(username, password) if username is not None else None

    @app.middleware("http")
    async def authenticate(request: Request, call_next):
        app.state.headers.append(dict(request.headers))
        if expected is not None and request.headers.get("authorization") != expected:
            logger.info("Rejected unauthenticated request to %s", request.url.path)
            return JSONResponse(status_code=401, content=fail(401, "Unauthorized"))
        return await call_next(request)

    @app.post("/get")
    async def get(request: KeysBody):
        db = databases.get(request.name, {})
        return ok([db.get(key) for key in request.keys])

    @app.post("/put")
    async def put(request: PutBody):
        if len(request.keys) != len(request.values):
            return fail(1, "Number of keys and values does not match")
        db = databases.setdefault(request.name, {})
        for key, value in zip(request.keys, request.values):
            db[key] = value
        return ok()

    @app.post("/delete")
    async def delete(request: KeysBody):
        db = databases.get(request.name, {})
        for key in request.keys:
            db.pop(key, None)
        return ok()

    @app.post("/create")
    async def create(request: NameBody):
        if request.name in databases:
            return fail(1, f"Database already exists: {request.name}")
        databases[request.name] = {}
        return ok()

    @app.post("/drop")
    async def drop(request: NameBody):
        databases.pop(request.name, None)
        return ok()

    @app.post("/stats")
    async def stats(request: NameBody):
        if request.name not in databases:
            return fail(2, f"Database not found: {request.name}")
        return ok(f"rocksdb.estimate-num-keys: {len(databases[request.name])}")

    return app
