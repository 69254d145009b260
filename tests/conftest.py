import os

os.environ["ARENA_DATABASE_URL"] = "sqlite://"
os.environ["ARENA_SECRET_KEY"] = "test-secret"
os.environ["ARENA_ADMIN_USERNAME"] = "admin"
os.environ["ARENA_ADMIN_PASSWORD"] = "adminpass"
os.environ["ARENA_SEED_SAMPLE_PROBLEM"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from arena import models  # noqa: F401
from arena.db import engine
from arena.dependencies import get_executor
from arena.judge.piston import ExecutionResult
from arena.main import app

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "adminpass"

SUM_ANSWERS = {"1 2": "3", "5 7": "12"}

SUM_PROBLEM = {
    "title": "A + B",
    "description": "Print the sum of two integers.",
    "constraints": "|a|, |b| <= 10^9",
    "sample_input": "1 2",
    "sample_output": "3",
    "marks": 40,
    "test_cases": [
        {"input": "1 2", "expected_output": "3", "is_hidden": False},
        {"input": "5 7", "expected_output": "12\n", "is_hidden": True},
    ],
}


class FakeExecutor:
    """Stands in for PistonClient; programs are looked up by their source."""

    def __init__(self):
        self.calls = []
        self.programs = {
            "good": lambda stdin: ExecutionResult(output=SUM_ANSWERS[stdin]),
            "wrong": lambda stdin: ExecutionResult(output="0"),
            "crash": lambda stdin: ExecutionResult(error="Runtime Error:\nZeroDivisionError"),
        }

    async def execute(self, language, code, stdin):
        self.calls.append((language, code, stdin))
        return self.programs[code](stdin)


@pytest.fixture(autouse=True)
def reset_db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def session():
    with Session(engine) as session:
        yield session


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def client(executor):
    app.dependency_overrides[get_executor] = lambda: executor
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    def _login(username, password):
        response = client.post("/api/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.json()
    return _login


@pytest.fixture
def as_admin(login):
    return lambda: login(ADMIN_USERNAME, ADMIN_PASSWORD)


@pytest.fixture
def register(client):
    def _register(username, password="secret123"):
        response = client.post("/api/auth/register", json={"username": username, "password": password})
        assert response.status_code == 201, response.text
        return response.json()
    return _register


@pytest.fixture
def sum_problem(client, as_admin):
    as_admin()
    response = client.post("/api/problems", json=SUM_PROBLEM)
    assert response.status_code == 201, response.text
    client.post("/api/auth/logout")
    return response.json()
