import json

import pytest
from fastapi.testclient import TestClient

from spriteatlas.core import PixelBuffer
from spriteatlas.web import server
from spriteatlas.web.image_tools import decode_data_url, encode_data_url
from spriteatlas.web.server import AtlasRequest, RemoveColorsRequest, create_app


@pytest.fixture
def client():
    return TestClient(create_app())


def test_remove_colors_request_parses_color_strings():
    req = RemoveColorsRequest.model_validate(
        {"image": "x", "colors": ["255,0,255", {"r": 1, "g": 2, "b": 3, "tolerance": 0}]}
    )
    assert [c.to_key().rgb for c in req.colors] == [(255, 0, 255), (1, 2, 3)]
    assert req.colors[0].tolerance == 30
    assert RemoveColorsRequest.model_validate({"image": "x", "colors": None}).colors == []


def test_atlas_request_accepts_camel_case_offsets():
    req = AtlasRequest.model_validate({"sprites": [{"name": "a", "image": "x", "offsetX": 3, "offset_y": -2}]})
    assert (req.sprites[0].offset_x, req.sprites[0].offset_y) == (3, -2)
    assert req.padding == 2


def test_data_url_round_trip(random_buffer):
    buffer = random_buffer(5, 4)
    url = encode_data_url(buffer)
    assert url.startswith("data:image/png;base64,")
    assert decode_data_url(url) == buffer
    assert decode_data_url(url.split(",", 1)[1]) == buffer


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_remove_colors_endpoint(client):
    image = encode_data_url(PixelBuffer.filled(2, 1, (255, 0, 255, 255)))
    response = client.post("/api/remove-colors", json={"image": image, "colors": ["255,0,255,0"]})
    assert response.status_code == 200
    assert decode_data_url(response.json()["image"]).pixel(0, 0)[3] == 0


def test_remove_colors_rejects_bad_color_string(client):
    image = encode_data_url(PixelBuffer.blank(1, 1))
    response = client.post("/api/remove-colors", json={"image": image, "colors": ["1,2"]})
    assert response.status_code == 422


def test_undecodable_image_is_bad_request(client):
    response = client.post("/api/remove-colors", json={"image": "data:image/png;base64,!!!", "colors": []})
    assert response.status_code == 400


def test_slice_endpoint_with_grid(client, sheet_buffer):
    image = encode_data_url(sheet_buffer(rows=2, columns=3))
    response = client.post("/api/slice", json={"image": image, "rows": 2, "columns": 3})
    body = response.json()
    assert response.status_code == 200
    assert (body["rows"], body["columns"]) == (2, 3)
    tiles = [decode_data_url(url) for url in body["images"]]
    assert [t.pixel(8, 8) for t in tiles][:2] == [(10, 10, 40, 255), (10, 30, 40, 255)]


def test_slice_endpoint_rejects_bad_cuts(client):
    image = encode_data_url(PixelBuffer.blank(10, 10))
    response = client.post("/api/slice", json={"image": image, "horizontal_cuts": [0, 5, 5], "vertical_cuts": [0, 10]})
    assert response.status_code == 400


def test_atlas_endpoint(client):
    sprites = [
        {"name": "hero_idle_0", "image": encode_data_url(PixelBuffer.filled(64, 48, (1, 2, 3, 255))), "offsetX": 4},
    ]
    response = client.post("/api/atlas", json={"sprites": sprites, "padding": 2})
    body = response.json()
    assert response.status_code == 200
    assert (body["width"], body["height"]) == (68, 52)
    document = json.loads(body["json"])
    assert document["frames"]["hero_idle_0"]["frame"] == {"x": 2, "y": 2, "w": 64, "h": 48}
    assert document["frames"]["hero_idle_0"]["offset"] == {"x": 4, "y": 0}
    assert decode_data_url(body["image_base64"]).size == (68, 52)


def test_atlas_endpoint_rejects_duplicates(client):
    image = encode_data_url(PixelBuffer.blank(2, 2))
    sprites = [{"name": "a", "image": image}, {"name": "a", "image": image}]
    assert client.post("/api/atlas", json={"sprites": sprites}).status_code == 400


def test_atlas_endpoint_rejects_empty_list(client):
    assert client.post("/api/atlas", json={"sprites": []}).status_code == 400


def test_atlas_overflow_is_unprocessable(client):
    sprites = [{"name": "dot", "image": encode_data_url(PixelBuffer.blank(1, 1))}]
    assert client.post("/api/atlas", json={"sprites": sprites, "padding": 2048}).status_code == 422


def test_payload_limit(client, monkeypatch):
    monkeypatch.setattr(server, "MAX_PAYLOAD_BYTES", 10)
    response = client.post("/api/remove-colors", json={"image": "abcdefghijkl", "colors": []})
    assert response.status_code == 413
