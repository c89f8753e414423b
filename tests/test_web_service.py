import pytest
from starlette.testclient import TestClient

from taskdag.demos.web_service import (
    ApiResponse,
    build_processing_graph,
    create_app,
)


@pytest.fixture
def client():
    return TestClient(create_app())


def test_process_endpoint(client):
    response = client.post("/process", json={"data": "test data for processing"})
    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is True
    assert body["original_length"] == 24
    assert "PROCESSED" in body["result"]
    assert body["result"] == "PROCESSED: TEST DATA FOR PROCESSING"
    assert body["validation_status"] == "passed"
    assert body["message"] == "Processing completed successfully"


def test_process_endpoint_invalid_data(client):
    response = client.post("/process", json={"data": "short"})
    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert body["validation_status"] == "failed"
    assert body["message"] == "Processing completed but validation failed"
    assert body["original_length"] == 5


@pytest.mark.parametrize(
    ("data", "valid"),
    [("abcdefghij", True), ("abcdefghi", False), ("", False)],
)
def test_validation_boundary(client, data, valid):
    response = client.post("/process", json={"data": data})
    assert response.status_code == 200
    assert response.json()["valid"] is valid


def test_length_counts_utf8_bytes(client):
    response = client.post("/process", json={"data": "héllo"})
    assert response.json()["original_length"] == 6


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.text == "OK"


def test_malformed_json_is_rejected(client):
    response = client.post(
        "/process", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400


@pytest.mark.parametrize("payload", [{}, {"data": 5}, [1, 2]])
def test_missing_data_field_is_rejected(client, payload):
    response = client.post("/process", json=payload)
    assert response.status_code == 422


def test_process_route_rejects_get(client):
    assert client.get("/process").status_code == 405


def test_build_processing_graph_has_three_tasks():
    graph = build_processing_graph("some input data")
    assert len(graph) == 3


@pytest.mark.asyncio
async def test_graph_stores_final_response():
    graph = build_processing_graph("hello world")
    await graph.execute()
    context = graph.context()
    response = await context.get("final_response", ApiResponse)
    assert response == ApiResponse(
        result="PROCESSED: HELLO WORLD",
        valid=True,
        original_length=11,
        validation_status="passed",
        message="Processing completed successfully",
    )
    assert await context.get("processing_status", str) == "completed"
    assert await context.get("validation_timestamp", int) > 0


def test_api_response_to_dict():
    response = ApiResponse("r", False, 3, "failed", "m")
    assert response.to_dict() == {
        "result": "r",
        "valid": False,
        "original_length": 3,
        "validation_status": "failed",
        "message": "m",
    }