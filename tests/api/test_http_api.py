from pathlib import Path

import orjson
import pytest
from fastapi.testclient import TestClient

from sse_converter.api import create_app
from sse_converter.models.config import ConverterConfig, PresetConfig
from sse_converter.models.record import TimestampStrategy


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(ConverterConfig()), raise_server_exceptions=False)


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "sse-converter"


def test_tools_listing(client: TestClient) -> None:
    tools = client.get("/api/tools").json()["tools"]

    assert [t["name"] for t in tools] == [
        "convert_sse_data",
        "convert_sse_object",
        "generate_preset_data",
        "convert_batch",
    ]


def test_convert_sse_data(client: TestClient) -> None:
    raw = 'event:message\ndata:{"timestamp":"1753968218605"}\n\n'

    response = client.post(
        "/api/convert/sse-data",
        json={"rawData": raw, "baseTimestamp": "1753968218000"},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["count"] == 1
    assert body["format"] == "single"
    assert body["data"] == [{"timestamp": "1753968218605", "value": raw}]


def test_convert_sse_data_missing_raw_data(client: TestClient) -> None:
    response = client.post("/api/convert/sse-data", json={})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_convert_sse_data_unresolved_n8n_template(client: TestClient) -> None:
    response = client.post("/api/convert/sse-data", json={"rawData": "{{ $json.sseData }}"})

    assert response.status_code == 400
    assert response.json()["rawDataReceived"] == "{{ $json.sseData }}"


def test_convert_sse_data_unwraps_n8n_payloads(client: TestClient) -> None:
    as_list = client.post(
        "/api/convert/sse-data",
        json={"rawData": [{"sseData": "event:a\n\n"}], "baseTimestamp": "1"},
    )
    as_object = client.post(
        "/api/convert/sse-data",
        json={"rawData": {"sseData": "event:a\n\nevent:b\n\n"}, "baseTimestamp": "1"},
    )

    assert as_list.json()["count"] == 1
    assert as_object.json()["count"] == 2


def test_convert_sse_data_object_format(client: TestClient) -> None:
    ok = client.post(
        "/api/convert/sse-data",
        json={"rawData": '{"event":"x","data":"y","timestamp":"9"}', "format": "object"},
    )
    bad = client.post("/api/convert/sse-data", json={"rawData": "{nope", "format": "object"})

    assert ok.json()["data"] == [{"timestamp": "9", "value": "event:x\ndata:y\n\n"}]
    assert bad.status_code == 400
    assert bad.json()["success"] is False


def test_convert_sse_data_unknown_format(client: TestClient) -> None:
    response = client.post("/api/convert/sse-data", json={"rawData": "event:a", "format": "bogus"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_convert_sse_data_uses_configured_strategy() -> None:
    settings = ConverterConfig(timestamp_strategy=TimestampStrategy.SYNTHETIC)
    client = TestClient(create_app(settings))

    response = client.post(
        "/api/convert/sse-data",
        json={"rawData": 'event:a\ndata:{"timestamp":"5"}\n\nevent:b\n\n', "baseTimestamp": "1000"},
    )

    stamps = [int(r["timestamp"]) for r in response.json()["data"]]
    assert stamps[0] == 1000
    assert 1100 <= stamps[1] < 2100


def test_convert_sse_object(client: TestClient) -> None:
    response = client.post(
        "/api/convert/sse-object",
        json={"sseObject": {"event": "message", "content": "hi"}, "timestamp": "100"},
    )

    assert response.json()["data"] == {
        "timestamp": "100",
        "value": 'event:message\ndata:{"content":"hi"}\n\n',
    }


def test_convert_sse_object_missing(client: TestClient) -> None:
    response = client.post("/api/convert/sse-object", json={"timestamp": "1"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_generate_preset_data(client: TestClient) -> None:
    records = [{"timestamp": "1", "value": "event:a\n\n"}]

    response = client.post("/api/generate/preset-data", json={"sseDataArray": records})

    data = response.json()["data"]
    assert data["filename"] == "converted-data.json"
    assert data["itemCount"] == 1
    assert orjson.loads(data["content"]) == records


def test_generate_preset_data_requires_array(client: TestClient) -> None:
    response = client.post("/api/generate/preset-data", json={"sseDataArray": "nope"})

    assert response.status_code == 400


def test_batch_partial_failure(client: TestClient) -> None:
    items = ["event:a\ndata:1\n\n", {"event": "b"}, 5]

    response = client.post("/api/convert/batch", json={"items": items, "baseTimestamp": "1"})

    body = response.json()
    assert body["success"] is False
    assert body["totalItems"] == 3
    assert body["successCount"] + body["errorCount"] == body["totalItems"]
    assert body["errors"][0]["index"] == 2
    assert len(body["data"]) == 2


def test_batch_all_ok_has_no_errors_key(client: TestClient) -> None:
    body = client.post("/api/convert/batch", json={"items": ["event:a\n\n"]}).json()

    assert body["success"] is True
    assert "errors" not in body


def test_batch_requires_items(client: TestClient) -> None:
    response = client.post("/api/convert/batch", json={"items": "x"})

    assert response.status_code == 400


def test_unknown_route(client: TestClient) -> None:
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert "POST /api/convert/batch" in response.json()["availableEndpoints"]


def test_convert_sse_object_wide_integer(client: TestClient) -> None:
    response = client.post(
        "/api/convert/sse-object",
        json={"sseObject": {"content": 2**64}, "timestamp": "1"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["value"] == 'event:message\ndata:{"content":18446744073709551616}\n\n'


def test_convert_sse_object_empty_object(client: TestClient) -> None:
    response = client.post("/api/convert/sse-object", json={"sseObject": {}, "timestamp": "1"})

    assert response.status_code == 200
    assert response.json()["data"] == {"timestamp": "1", "value": "event:message\ndata:{}\n\n"}


def test_generate_preset_data_save(tmp_path: Path) -> None:
    client = TestClient(create_app(ConverterConfig(preset=PresetConfig(output_dir=str(tmp_path)))))
    records = [{"timestamp": "1", "value": "event:a\n\n"}]

    response = client.post(
        "/api/generate/preset-data",
        json={"sseDataArray": records, "filename": "chat.json", "save": True},
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["path"] == str(tmp_path / "chat.json")
    assert orjson.loads((tmp_path / "chat.json").read_bytes()) == records


def test_generate_preset_data_without_save_writes_nothing(tmp_path: Path) -> None:
    client = TestClient(create_app(ConverterConfig(preset=PresetConfig(output_dir=str(tmp_path)))))

    response = client.post("/api/generate/preset-data", json={"sseDataArray": []})

    assert "path" not in response.json()["data"]
    assert list(tmp_path.iterdir()) == []
