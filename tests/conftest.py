import pytest

from rpc_cli_tools.cli_gen.files import set_copyright
from tests.helpers import ASSET_PATH


@pytest.fixture
def copyright_fixture():
    set_copyright()  # set to default
    yield
    set_copyright() # reset to default


@pytest.fixture
def assets_on_path(monkeypatch):
    """Make the `movies` client package in the assets importable."""
    monkeypatch.syspath_prepend(str(ASSET_PATH))
    yield
