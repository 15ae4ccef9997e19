import pytest
from fastapi.testclient import TestClient

from bank_api.config import Settings
from bank_api.main import create_app
from bank_api.memory import MemoryAccountStore


@pytest.fixture
def store():
    """메모리 저장소"""
    return MemoryAccountStore()


@pytest.fixture
def app(store):
    return create_app(Settings(storage="memory"), store=store)


@pytest.fixture
def client(app):
    """lifespan 까지 실행되는 테스트 클라이언트"""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def create_account(client):
    """계좌를 만들고 목록에서 찾아 반환"""
    def _create(first_name="A", last_name="B"):
        response = client.post("/accounts", json={"firstName": first_name, "lastName": last_name})
        assert response.status_code == 201
        return client.get("/accounts").json()["data"][-1]
    return _create
