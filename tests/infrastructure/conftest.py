import pytest

from fulfillment.infrastructure.bootstrap import Container
from fulfillment.infrastructure.config import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite:///{tmp_path / 'fulfillment.db'}", db_timeout=10.0)


@pytest.fixture
def container(settings):
    container = Container(settings)
    yield container
    container.dispose()
