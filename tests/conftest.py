from collections.abc import Generator
from unittest.mock import patch

import pytest

from gandalf.client import GandalfClient
from tests.stubs import StubRemote

pytest_plugins = ["gandalf.testing.conftest"]


@pytest.fixture
def remote() -> StubRemote:
    return StubRemote()


@pytest.fixture
def client(remote: StubRemote) -> Generator[GandalfClient, None, None]:
    """GandalfClient whose HTTP calls are answered by ``remote``."""
    client = GandalfClient(
        "https://git.example.com/rest",
        username="gandalf",
        password="secret",
        project="INFRA",
    )
    with patch.object(client.transport._client, "request", side_effect=remote):
        yield client
    client.close()
