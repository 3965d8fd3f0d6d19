"""
Pytest configuration and fixtures for the admin console

The record store is replaced by an httpx MockTransport; nothing leaves the
process.
"""

import os

# Settings are read at import time
os.environ.setdefault("ADMIN_API_BASE", "http://store.test")
os.environ.setdefault("ADMIN_TIMEZONE", "America/Los_Angeles")

import json
import time
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs

import httpx
import jwt
import pytest

from services.record_gateway import RecordGateway, Session

STORE_URL = "http://store.test"

def make_token(exp_offset: Optional[int] = 3600) -> str:
    """Unsigned-by-the-store JWT with an optional exp relative to now"""
    claims: Dict[str, Any] = {"sub": "user_1"}
    if exp_offset is not None:
        claims["exp"] = int(time.time()) + exp_offset
    return jwt.encode(claims, "test-secret", algorithm="HS256")

class StoreStub:
    """
    Scriptable fake record store.

    Routes map "METHOD /path" to a handler returning an httpx.Response;
    every request is recorded for assertions.
    """

    def __init__(self):
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, payload: Any = None, handler=None) -> None:
        if handler is None:
            body = {} if payload is None else payload

            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, json=body)
        self.routes[f"{method} {path}"] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(f"{request.method} {request.url.path}")
        if handler is None:
            return httpx.Response(404, json={"message": f"No route {request.method} {request.url.path}"})
        return handler(request)

    def calls(self, method: Optional[str] = None) -> List[str]:
        return [
            f"{r.method} {r.url.path}"
            for r in self.requests
            if method is None or r.method == method
        ]

    def params(self, index: int = -1) -> Dict[str, str]:
        query = parse_qs(self.requests[index].url.query.decode())
        return {key: values[0] for key, values in query.items()}

def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content.decode())

def multipart_fields(request: httpx.Request) -> List[tuple]:
    """(name, value) pairs of the text parts of a multipart body, in order"""
    content_type = request.headers["content-type"]
    boundary = content_type.split("boundary=")[1].encode()
    fields = []
    for part in request.content.split(b"--" + boundary):
        part = part.strip(b"\r\n")
        if not part or part == b"--":
            continue
        head, _, value = part.partition(b"\r\n\r\n")
        disposition = head.decode()
        if "filename=" in disposition:
            continue
        name = disposition.split('name="')[1].split('"')[0]
        fields.append((name, value.decode()))
    return fields

def multipart_filenames(request: httpx.Request) -> List[str]:
    content = request.content.decode(errors="replace")
    return [chunk.split('"')[0] for chunk in content.split('filename="')[1:]]

@pytest.fixture
def store() -> StoreStub:
    return StoreStub()

@pytest.fixture
def gateway(store):
    """Gateway bound to a valid admin token and the fake store"""
    return RecordGateway(Session(base_url=STORE_URL, token=make_token()), transport=httpx.MockTransport(store))
