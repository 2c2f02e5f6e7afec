"""
Pytest configuration for letterflow
"""

import base64
import io

import pytest
from PIL import Image

from letterflow import LetterOptions
from letterflow.document_builder import ImageLoader, PageGeometry, ReportLabWriter
from letterflow.exceptions import ImageLoadError


def make_png(width: int = 200, height: int = 100) -> bytes:
    """Encode a solid-colour PNG in memory."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (20, 40, 120)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def png_data_uri(png_bytes):
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def make_options(tmp_path, png_data_uri):
    """Factory for LetterOptions with a valid file name and signature."""

    def factory(**overrides):
        values = {
            "file_name": str(tmp_path / "letter"),
            "dept_signature": png_data_uri,
        }
        values.update(overrides)
        return LetterOptions(**values)

    return factory


@pytest.fixture
def options(make_options):
    return make_options()


@pytest.fixture
def writer():
    """Blank letter-size writer."""
    return ReportLabWriter(215.9, 279.4)


@pytest.fixture
def geometry():
    """Letter page with the default 38mm/13mm margins."""
    return PageGeometry.for_page_type("letter", 38.0, 13.0)


class FailingImageLoader(ImageLoader):
    """Image loader that never succeeds."""

    def load(self, source):
        raise ImageLoadError(source, "unreachable")


@pytest.fixture
def failing_loader():
    return FailingImageLoader(timeout=1)


class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, content: bytes = b"", status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class StubSession:
    """Records requested URLs and replies with canned responses."""

    def __init__(self, response: StubResponse):
        self.response = response
        self.requests = []

    def get(self, url, timeout=None):
        self.requests.append((url, timeout))
        return self.response


@pytest.fixture
def stub_session():
    """Factory for a StubSession replying with given bytes and status."""

    def factory(content: bytes = b"", status_code: int = 200):
        return StubSession(StubResponse(content, status_code))

    return factory
