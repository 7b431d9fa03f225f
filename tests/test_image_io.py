import io

import pytest
import requests
from PIL import Image

from conftest import FakeResponse, image_bytes
from gmaps_image import image_io
from gmaps_image.errors import (DecodeError, PreconditionError,
                                RemoteResponseError)
from gmaps_image.staticmaps import StaticMapImage

@pytest.mark.parametrize("mime_type,image_format", [
    ("image/png", "PNG"),
    ("image/gif", "GIF"),
    ("image/jpeg", "JPEG"),
])
def test_get_image_dispatches_on_content_type(server, mime_type, image_format):
    content = image_bytes(image_format)
    server.response = FakeResponse(content, mime_type)

    builder = StaticMapImage("Prague")
    image = builder.get_image()

    assert image.format == image_format
    assert image.size == (4, 3)
    assert builder.get_image_bytes() == content
    assert server.urls == [builder.get_url(), builder.get_url()]

def test_content_type_parameters_are_ignored(server):
    server.response = FakeResponse(image_bytes("PNG"),
                                   "Image/PNG; charset=binary")
    assert StaticMapImage("Prague").get_image().format == "PNG"

def test_missing_location_does_not_fetch(server):
    with pytest.raises(PreconditionError) as excinfo:
        StaticMapImage().get_image_bytes()
    assert str(excinfo.value) == "missing location"
    assert server.urls == []

def test_unsupported_type_is_not_decoded(server, monkeypatch):
    opened = []
    monkeypatch.setattr(image_io.Image, "open",
                        lambda *args, **kwargs: opened.append(args))
    server.response = FakeResponse(b"BM" + b"\x00" * 64, "image/bmp")

    with pytest.raises(RemoteResponseError) as excinfo:
        StaticMapImage("Prague").get_image_bytes()
    assert str(excinfo.value) == "unsupported format: image/bmp"
    assert opened == []

@pytest.mark.parametrize("content,mime_type", [
    (b"Error: the provided API key is invalid.", "text/html"),
    (b"", "image/png"),
    (image_bytes("PNG"), ""),
])
def test_non_image_response(server, content, mime_type):
    server.response = FakeResponse(content, mime_type)
    with pytest.raises(RemoteResponseError) as excinfo:
        StaticMapImage("Prague").get_image()
    assert str(excinfo.value) == "not an image"

def test_corrupt_payload(server):
    server.response = FakeResponse(b"\x89PNG this is not really a png",
                                   "image/png")
    with pytest.raises(DecodeError) as excinfo:
        StaticMapImage("Prague").get_image_bytes()
    assert str(excinfo.value) == "decode failed"

def test_mismatched_payload(server):
    server.response = FakeResponse(image_bytes("GIF"), "image/png")
    with pytest.raises(DecodeError):
        StaticMapImage("Prague").get_image()

def test_oversized_payload(server, monkeypatch):
    # 100x100 is over twice the lowered pixel limit, so Pillow refuses it
    monkeypatch.setattr(image_io.Image, "MAX_IMAGE_PIXELS", 10)
    server.response = FakeResponse(image_bytes("GIF", size = (100, 100)),
                                   "image/gif")

    with pytest.raises(DecodeError) as excinfo:
        StaticMapImage("Prague").get_image()
    assert str(excinfo.value) == "decode failed"
    assert isinstance(excinfo.value.__cause__, Image.DecompressionBombError)

def test_http_errors_propagate(server):
    server.response = FakeResponse(b"Forbidden", "text/plain",
                                   status_code = 403)
    with pytest.raises(requests.HTTPError):
        StaticMapImage("Prague").get_image()

def test_fetch_passes_timeout(monkeypatch):
    calls = []

    def get(url, timeout = None):
        calls.append((url, timeout))
        return FakeResponse(b"data", "image/gif")

    monkeypatch.setattr(image_io.requests, "get", get)
    assert image_io.fetch("https://example.com/map") == (b"data", "image/gif")
    assert calls == [("https://example.com/map", image_io.TIMEOUT)]

def test_save_to_path(png_server, tmp_path):
    destination = tmp_path / "map.png"
    assert StaticMapImage("Prague").save(str(destination)) is True

    with Image.open(destination) as saved:
        assert saved.format == "PNG"
        assert saved.size == (4, 3)

def test_save_with_quality_and_format(png_server, tmp_path):
    destination = tmp_path / "map.out"
    StaticMapImage("Prague").save(destination, quality = 80,
                                  image_format = image_io.JPEG)

    with Image.open(destination) as saved:
        assert saved.format == "JPEG"

def test_save_infers_jpeg_from_extension(server, tmp_path):
    server.response = FakeResponse(image_bytes("PNG", mode = "RGBA"),
                                   "image/png")
    destination = tmp_path / "map.jpg"
    StaticMapImage("Prague").save(destination)

    with Image.open(destination) as saved:
        assert saved.format == "JPEG"
        assert saved.mode == "RGB"

def test_save_errors_propagate(png_server, tmp_path):
    with pytest.raises(OSError):
        StaticMapImage("Prague").save(str(tmp_path / "missing" / "map.png"))

def test_send(png_server):
    stream = io.BytesIO()
    body = StaticMapImage("Prague").send(stream = stream)

    assert body.startswith(b"\xff\xd8")
    assert stream.getvalue() == body
    assert image_io.content_type(image_io.JPEG) == "image/jpeg"

def test_send_png(png_server):
    body = StaticMapImage("Prague").send(image_io.PNG, quality = 9)
    assert body.startswith(b"\x89PNG")
    assert image_io.content_type(image_io.PNG) == "image/png"

def test_encode_gif():
    image = Image.new("RGB", (2, 2), "blue")
    body = image_io.encode(image, image_io.GIF, quality = 50)
    assert body.startswith(b"GIF8")
