import io
from pathlib import Path
from typing import Optional

from rpc_cli_tools.cli_gen.catalog import TypeCatalog
from rpc_cli_tools.cli_gen.catalog import open_catalog
from rpc_cli_tools.cli_gen.generator import Generator
from rpc_cli_tools.types import AuthMode

ASSET_PATH = Path(__file__).parent / "assets"


class StringIo(io.StringIO):
    """Convenience class to remove the \r characters from the return value -- make testing on Windoz easier."""

    def getvalue(self) -> str:
        return super().getvalue().replace("\r", "")


def asset_filename(filename: str) -> str:
    return str(ASSET_PATH / filename)


def open_test_catalog(filename: str) -> TypeCatalog:
    return open_catalog(asset_filename(filename))


def movie_generator(
    filename: str = "movies.yaml",
    package_name: str = "moviecli",
    auth: Optional[AuthMode] = None,
) -> Generator:
    catalog = open_test_catalog(filename)
    return Generator(catalog.config(package_name, auth=auth), catalog)
