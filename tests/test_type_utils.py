import pytest

from rpc_cli_tools.utils import is_void
from rpc_cli_tools.utils import open_description
from rpc_cli_tools.utils import parse_type_name
from rpc_cli_tools.utils import split_type_arguments
from tests.helpers import asset_filename


def test_open_description_yaml():
    data = open_description(asset_filename("movies.yaml"))
    assert data["client"]["name"] == "MovieClient"
    assert list(data["resources"].keys()) == ["MoviesResourceClient", "StudiosResourceClient"]


def test_open_description_missing():
    with pytest.raises(FileNotFoundError):
        open_description(asset_filename("does-not-exist.yaml"))


@pytest.mark.parametrize(
    ["text", "expected"],
    [
        pytest.param("str", ["str"], id="single"),
        pytest.param("str, int", ["str", "int"], id="pair"),
        pytest.param("str, list[int]", ["str", "list[int]"], id="nested"),
        pytest.param("dict[str, int], bool", ["dict[str, int]", "bool"], id="nested-comma"),
        pytest.param("", [], id="empty"),
    ]
)
def test_split_type_arguments(text, expected):
    assert expected == split_type_arguments(text)


@pytest.mark.parametrize(
    ["text", "base", "args"],
    [
        pytest.param("int", "int", [], id="simple"),
        pytest.param(" Movie ", "Movie", [], id="stripped"),
        pytest.param("list[str]", "list", ["str"], id="list"),
        pytest.param("dict[str, list[Movie]]", "dict", ["str", "list[Movie]"], id="dict"),
        pytest.param("int[]", "int[]", [], id="array"),
    ]
)
def test_parse_type_name(text, base, args):
    assert (base, args) == parse_type_name(text)


@pytest.mark.parametrize(
    ["value", "expected"],
    [
        pytest.param(None, True, id="none"),
        pytest.param("", True, id="empty"),
        pytest.param("void", True, id="void"),
        pytest.param("None", True, id="None"),
        pytest.param("Movie", False, id="type"),
        pytest.param("list[Movie]", False, id="collection"),
    ]
)
def test_is_void(value, expected):
    assert expected == is_void(value)
