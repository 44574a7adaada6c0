import requests
from app.services import image_service as image_service_module
from app.services.image_service import FALLBACK_IMAGES, ImageService, hash_string


class _FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def json(self):
        return self._payload


def _photos(n=30):
    return {"results": [{"urls": {"regular": f"https://photos.test/{i}"}} for i in range(n)]}


def test_hash_string_is_stable_and_non_negative():
    assert hash_string("") == 0
    assert hash_string("a") == 97
    assert hash_string("p-1") == hash_string("p-1")
    # large inputs overflow 32 bits and must still be non-negative
    assert hash_string("x" * 500) >= 0


def test_hash_string_uses_utf16_code_units():
    # U+1F600 is the surrogate pair D83D DE00: 0xD83D * 31 + 0xDE00
    assert hash_string("\U0001F600") == 1772899
    assert hash_string("é") == 0xE9


def test_fallback_image_without_access_key(client):
    r = client.get("/properties/p-1/images")
    assert r.status_code == 200
    url = r.json()["imageUrl"]
    assert url in FALLBACK_IMAGES
    assert url == ImageService().get_fallback_image("p-1")


def test_multiple_images_are_exterior_then_interior(client):
    r = client.get("/properties/p-1/images", params={"count": "3"})
    assert r.status_code == 200
    urls = r.json()["imageUrls"]
    service = ImageService()
    assert urls == [
        service.get_fallback_image("p-1"),
        service.get_fallback_image("p-1-1"),
        service.get_fallback_image("p-1-2"),
    ]


def test_bad_count_means_single_image(client):
    r = client.get("/properties/p-1/images", params={"count": "many"})
    assert "imageUrl" in r.json()


def test_photo_search_result_is_cached(client, monkeypatch):
    calls = []

    def _fake_get(url, params=None, timeout=None):
        calls.append(params)
        return _FakeResponse(200, _photos())

    monkeypatch.setattr(image_service_module.settings, "UNSPLASH_ACCESS_KEY", "key")
    monkeypatch.setattr(image_service_module.requests, "get", _fake_get)

    first = client.get("/properties/p-1/images", params={"type": "interior"}).json()
    second = client.get("/properties/p-1/images", params={"type": "interior"}).json()

    expected = f"https://photos.test/{hash_string('p-1') % 30}"
    assert first["imageUrl"] == expected
    assert second["imageUrl"] == expected
    assert len(calls) == 1
    assert calls[0]["query"] == "house interior"


def test_photo_search_failure_uses_fallback(client, monkeypatch):
    calls = []

    def _failing_get(url, params=None, timeout=None):
        calls.append(params)
        raise requests.ConnectionError("network down")

    monkeypatch.setattr(image_service_module.settings, "UNSPLASH_ACCESS_KEY", "key")
    monkeypatch.setattr(image_service_module.requests, "get", _failing_get)

    r = client.get("/properties/p-9/images")
    assert r.status_code == 200
    assert r.json()["imageUrl"] == ImageService().get_fallback_image("p-9")
    # failures are not cached, so the next request tries again
    client.get("/properties/p-9/images")
    assert len(calls) == 2


def test_non_success_status_and_empty_results_use_fallback(monkeypatch):
    monkeypatch.setattr(image_service_module.settings, "UNSPLASH_ACCESS_KEY", "key")
    service = ImageService()

    monkeypatch.setattr(
        image_service_module.requests, "get", lambda *a, **k: _FakeResponse(403)
    )
    assert service.get_property_image("p-2") == service.get_fallback_image("p-2")

    monkeypatch.setattr(
        image_service_module.requests,
        "get",
        lambda *a, **k: _FakeResponse(200, {"results": []}),
    )
    assert service.get_property_image("p-3") == service.get_fallback_image("p-3")
