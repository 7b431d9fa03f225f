import io

import pytest
import requests
from PIL import Image

from gmaps_image import image_io

class FakeResponse(object):
    """ Stands in for requests.Response """

    def __init__(self, content, content_type, status_code = 200):
        self.content = content
        self.headers = {"Content-Type": content_type}
        self.status_code = status_code

    def raise_for_status(self):
        if (self.status_code >= 400):
            raise requests.HTTPError("%d Client Error" % self.status_code)

def image_bytes(image_format, size = (4, 3), mode = "RGB"):
    buffer = io.BytesIO()
    Image.new(mode, size, "red").save(buffer, format = image_format)
    return buffer.getvalue()

@pytest.fixture
def server(monkeypatch):
    """ Replaces requests.get; set server.response before fetching. The
    requested URLs are recorded in server.urls """

    class Server(object):
        response = None
        urls = []

        def get(self, url, timeout = None):
            self.urls.append(url)
            return self.response

    fake = Server()
    fake.urls = []
    monkeypatch.setattr(image_io.requests, "get", fake.get)
    return fake

@pytest.fixture
def png_server(server):
    server.response = FakeResponse(image_bytes("PNG"), "image/png")
    return server
