import pytest

from ..config import config
from ..connection import use_transport
from .testing import RecordingTransport


@pytest.fixture
def transport():
    saved = config.model_dump()
    config.api_key = "secret"
    config.subdomain = "demo"
    recording = RecordingTransport()
    try:
        with use_transport(recording):
            yield recording
    finally:
        for name, value in saved.items():
            setattr(config, name, value)
