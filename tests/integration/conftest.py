"""Pytest fixtures for integration tests.

Provides devices (replica + orchestrator + service) talking to a real
document server app. HTTP is carried by an httpx MockTransport that hands
each request to the Flask test client, so no sockets are opened.
"""

from __future__ import annotations

from typing import Callable, Generator, List

import httpx
import pytest
from flask import Flask

from clinicsync.core.remote import RemoteStoreClient
from clinicsync.core.service import DataService
from clinicsync.core.store import ReplicaStore
from clinicsync.core.sync import SyncOrchestrator
from clinicsync.web import create_app

DOCUMENT_URL = "http://clinicsync.test/document"


def flask_transport(app: Flask) -> httpx.MockTransport:
    """Route httpx requests to a Flask app's test client."""
    client = app.test_client()

    def handler(request: httpx.Request) -> httpx.Response:
        response = client.open(
            request.url.raw_path.decode("ascii"),
            method=request.method,
            data=request.content,
            content_type=request.headers.get("Content-Type"),
        )
        return httpx.Response(
            response.status_code,
            content=response.get_data(),
            headers={"Content-Type": response.content_type},
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def server() -> Flask:
    """Create an in-memory document server."""
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def make_device(server: Flask) -> Generator[Callable[..., DataService], None, None]:
    """Factory for devices sharing the document server.

    Yields:
        Callable returning a new DataService; seed=True gives it default data.
    """
    services: List[DataService] = []

    def factory(seed: bool = False) -> DataService:
        store = ReplicaStore(":memory:", seed=seed)
        remote = RemoteStoreClient(DOCUMENT_URL, transport=flask_transport(server))
        service = DataService(store, SyncOrchestrator(store, remote))
        services.append(service)
        return service

    yield factory

    for service in services:
        service.close()
