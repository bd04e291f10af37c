import pytest

from core.cursor_api import CursorAPI
from core.transport import Transport
from fakes import FakeClock, FakeOpener

API_KEY = "test-api-key"
BASE_URL = "https://api.cursor.com"


@pytest.fixture
def opener():
    return FakeOpener()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport(opener, clock):
    return Transport(API_KEY, BASE_URL, urlopen=opener, sleep=clock.sleep)


@pytest.fixture
def api(transport):
    return CursorAPI(transport)
