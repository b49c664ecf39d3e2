import pytest
from app import create_app
from config import Config
from rows import get_schema
from tests.helpers import InMemorySheets

@pytest.fixture()
def config():
    return Config(
        sheets_id="test-sheet",
        invite_base_url="https://wedding.test/",
        timezone="Asia/Almaty",
    )

@pytest.fixture()
def sheets():
    return InMemorySheets(get_schema("invite_admin"))

@pytest.fixture()
def app(config, sheets):
    flask_app = create_app(config, sheets=sheets)
    flask_app.config.update(TESTING=True)
    yield flask_app

@pytest.fixture()
def client(app):
    return app.test_client()
