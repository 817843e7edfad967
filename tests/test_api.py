import pytest
from fastapi.testclient import TestClient

from autoprofiler.core.errors import ModelInvocationError, OracleInvocationError
from autoprofiler.dependencies.profile import get_profile_service
from autoprofiler.main import app
from autoprofiler.services.profile_service import ProfileService

from fakes import (
    USERS_QUERY,
    USERS_TABLE,
    USERS_TABLE_INDEXED,
    FakeModel,
    FakeOracle,
    implementation_json,
    prompt_kind,
    strategies_json,
)


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def use_service(model, oracle=None):
    service = ProfileService(model=model, oracle=oracle or FakeOracle())
    app.dependency_overrides[get_profile_service] = lambda: service
    return service


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["docs"] == "/docs"
    assert "provider" in body
    assert "dialect" in body


def test_profile_returns_thought_result(client):
    use_service(FakeModel(responses=[
        "<think>filtering on age</think>" + strategies_json("Indexing"),
        implementation_json(USERS_QUERY, [USERS_TABLE_INDEXED]),
    ]))

    response = client.post("/profile", json={"query": USERS_QUERY, "tables": [USERS_TABLE]})

    assert response.status_code == 200
    assert response.json() == {
        "think": "filtering on age",
        "strategies": [{
            "name": "Indexing",
            "description": "Indexing description",
            "query": USERS_QUERY,
            "tables": [USERS_TABLE_INDEXED],
        }],
    }


def test_invalid_input_is_bad_request(client):
    model = FakeModel()
    use_service(model, FakeOracle(invalid={"SELEC 1;": "unparsable"}))

    response = client.post("/profile", json={"query": "SELEC 1;"})

    assert response.status_code == 400
    assert "unparsable" in response.json()["detail"]
    assert model.calls == 0


def test_schema_exhaustion_is_unprocessable(client):
    use_service(FakeModel(handler=lambda prompt: "no json"))

    response = client.post("/profile", json={"query": USERS_QUERY})

    assert response.status_code == 422
    assert "strategies" in response.json()["detail"]


def test_sql_exhaustion_is_unprocessable(client):
    oracle = FakeOracle(invalid={"SELEC 1;": "bad"})

    def handler(prompt):
        kind = prompt_kind(prompt)
        if kind == "strategy":
            return strategies_json("Alpha")
        if kind == "sql_repair":
            return "SELEC 1;"
        return implementation_json("SELEC 1;", [])

    use_service(FakeModel(handler=handler), oracle)

    response = client.post("/profile", json={"query": USERS_QUERY})

    assert response.status_code == 422


def test_model_failure_is_bad_gateway(client):
    def handler(prompt):
        raise ModelInvocationError("Model call failed after 3 attempts")

    use_service(FakeModel(handler=handler))

    response = client.post("/profile", json={"query": USERS_QUERY})

    assert response.status_code == 502
    assert "3 attempts" in response.json()["detail"]


def test_missing_query_is_rejected(client):
    use_service(FakeModel())

    response = client.post("/profile", json={"tables": []})

    assert response.status_code == 422


def test_linter_failure_is_bad_gateway(client):
    model = FakeModel()
    oracle = FakeOracle(broken={USERS_QUERY: OracleInvocationError("Could not run sqlfluff parse")})
    use_service(model, oracle)

    response = client.post("/profile", json={"query": USERS_QUERY})

    assert response.status_code == 502
    assert "sqlfluff" in response.json()["detail"]
    assert model.calls == 0
