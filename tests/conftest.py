"""Shared fixtures: an in-memory collection, a store over it, and an HTTP client."""

import os

# Keep a developer's .env from pointing tests at a real server
os.environ.setdefault("DATABASE_URL", "mongodb://localhost:27017/test")

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import ScheduleStore

from .fakes import FakeCollection


@pytest.fixture
def collection():
    return FakeCollection([
        {"name": "Ann", "tasks": {"1": ["stretch"], "3": ["brush teeth", "read"]}},
    ])


@pytest.fixture
def store(collection):
    return ScheduleStore(collection)


@pytest.fixture
def client(store):
    from main import create_app
    return TestClient(create_app(store=store, settings=Settings()))
