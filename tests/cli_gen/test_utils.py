import pytest

from rpc_cli_tools.cli_gen.utils import capitalize
from rpc_cli_tools.cli_gen.utils import first_line
from rpc_cli_tools.cli_gen.utils import is_case_sensitive
from rpc_cli_tools.cli_gen.utils import maybe_quoted
from rpc_cli_tools.cli_gen.utils import quoted
from rpc_cli_tools.cli_gen.utils import replace_special
from rpc_cli_tools.cli_gen.utils import simple_escape
from rpc_cli_tools.cli_gen.utils import to_camel_case
from rpc_cli_tools.cli_gen.utils import to_dash_case
from rpc_cli_tools.cli_gen.utils import to_snake_case


@pytest.mark.parametrize(
    ["text", "expected"],
    [
        pytest.param("addMovie", "add_movie", id="camel"),
        pytest.param("MoviesResource", "movies_resource", id="pascal"),
        pytest.param("HTTPServer", "http_server", id="acronym"),
        pytest.param("address_street", "address_street", id="snake"),
        pytest.param("v2Movies", "v2_movies", id="digit"),
    ]
)
def test_to_snake_case(text, expected):
    assert expected == to_snake_case(text)


@pytest.mark.parametrize(
    ["text", "expected"],
    [
        pytest.param("add_movie", "addMovie", id="snake"),
        pytest.param("addMovie", "addMovie", id="camel"),
        pytest.param("movie", "movie", id="single"),
    ]
)
def test_to_camel_case(text, expected):
    assert expected == to_camel_case(text)


def test_to_dash_case():
    assert "add-movie" == to_dash_case("addMovie")
    assert "close-studio" == to_dash_case("close_studio")


def test_capitalize():
    assert "" == capitalize("")
    assert "AddMovie" == capitalize("addMovie")
    # unlike str.capitalize(), the rest is untouched
    assert "MovieID" == capitalize("movieID")


@pytest.mark.parametrize(
    ["item", "expected"],
    [
        pytest.param("abc", '"abc"', id="str"),
        pytest.param('say "hi"', r'"say \"hi\""', id="quotes"),
        pytest.param(3, "3", id="int"),
        pytest.param(None, "None", id="none"),
        pytest.param(True, "True", id="bool"),
    ]
)
def test_maybe_quoted(item, expected):
    assert expected == maybe_quoted(item)


def test_quoted():
    assert r'"back\\slash"' == quoted("back\\slash")


def test_replace_special():
    assert "a_b_c" == replace_special("a.b c")
    assert "abc" == replace_special("a-b-c", "")
    assert "abc" == replace_special("a-b-c", None)


@pytest.mark.parametrize(
    ["text", "expected"],
    [
        pytest.param("", "", id="empty"),
        pytest.param("Add a movie", "Add a movie", id="single"),
        pytest.param("\n  Add a movie  \nMore text", "Add a movie", id="multiline"),
    ]
)
def test_first_line(text, expected):
    assert expected == first_line(text)


@pytest.mark.parametrize(
    ["text", "expected"],
    [
        pytest.param("", "", id="empty"),
        pytest.param("Has new  \nlines.", "Has new", id="newline"),
        pytest.param("This has 'quotes'.", r"This has \'quotes\'.", id="single-quotes"),
        pytest.param('This has "quotes".', r'This has \"quotes\".', id="double-quotes"),
        pytest.param(r"Contains \] slash", r"Contains \\] slash", id="slash"),
    ]
)
def test_simple_escape(text, expected):
    assert expected == simple_escape(text)


@pytest.mark.parametrize(
    ["values", "expected"],
    [
        pytest.param(["action", "comedy"], False, id="lower"),
        pytest.param(["a", "A"], True, id="mixed"),
        pytest.param([1, 2], False, id="numbers"),
    ]
)
def test_is_case_sensitive(values, expected):
    assert expected == is_case_sensitive(values)
