import logging

import pytest

from rpc_cli_tools.cli_gen.catalog import TypeCatalog
from rpc_cli_tools.cli_gen.constants import GENERATOR_LOG_CLASS
from rpc_cli_tools.cli_gen.flattener import child_prefix
from rpc_cli_tools.cli_gen.flattener import flag_name
from rpc_cli_tools.cli_gen.flattener import flatten
from rpc_cli_tools.cli_gen.flattener import has_flags
from rpc_cli_tools.cli_gen.flattener import visible_fields
from rpc_cli_tools.cli_gen.generator import Generator
from rpc_cli_tools.cli_gen.model import GeneratorConfig
from rpc_cli_tools.types import OperationKind
from tests.helpers import movie_generator


def options(flags) -> list[str]:
    return [f.option for f in flags]


def inline_generator(types: dict) -> Generator:
    catalog = TypeCatalog({"types": types})
    return Generator(GeneratorConfig("xcli", "x.client", "XClient"), catalog)


@pytest.mark.parametrize(
    ["prefix", "name", "expected"],
    [
        pytest.param("", "title", "title", id="no-prefix"),
        pytest.param("address", "street", "addressStreet", id="prefix"),
        pytest.param("movie", "id", "movieId", id="short"),
    ]
)
def test_flag_name(prefix, name, expected):
    assert expected == flag_name(prefix, name)


def test_child_prefix():
    studio = movie_generator().classifier.classify("Studio")
    by_name = {f.name: f for f in studio.fields}
    assert "address" == child_prefix(by_name["address"])
    # collection elements are prefixed by the element type
    assert "movie" == child_prefix(by_name["movies"])


@pytest.mark.parametrize(
    ["kind", "expected"],
    [
        pytest.param(OperationKind.CREATE, ["name", "founded", "address", "movies"], id="create"),
        pytest.param(OperationKind.UPDATE, ["id", "name", "founded", "address"], id="update"),
    ]
)
def test_visible_fields(kind, expected):
    studio = movie_generator().classifier.classify("Studio")
    assert expected == [f.name for f in visible_fields(studio, kind)]


def test_flatten_create():
    uut = movie_generator()
    movie = uut.classifier.classify("Movie")
    flags = flatten(uut, movie, "", OperationKind.CREATE)
    assert ["--title", "--director", "--genre", "--year", "--rating"] == options(flags)
    assert [True, False, False, False, False] == [f.required for f in flags]
    assert [("title",), ("director",)] == [f.declaration_path for f in flags[:2]]
    assert not any(f.positional for f in flags)


def test_flatten_update_includes_identifier():
    uut = movie_generator()
    movie = uut.classifier.classify("Movie")
    flags = flatten(uut, movie, "", OperationKind.UPDATE)
    assert ["--id", "--title", "--director", "--genre", "--year", "--rating"] == options(flags)
    # identifiers are required for updates
    assert flags[0].required


def test_flatten_nested():
    uut = movie_generator()
    studio = uut.classifier.classify("Studio")
    flags = flatten(uut, studio, "", OperationKind.CREATE)
    assert [
        "--name",
        "--founded",
        "--address-street",
        "--address-city",
        "--movie-title",
        "--movie-director",
        "--movie-genre",
        "--movie-year",
        "--movie-rating",
    ] == options(flags)
    by_option = {f.option: f for f in flags}
    assert ("address", "street") == by_option["--address-street"].declaration_path
    assert ("movies", "title") == by_option["--movie-title"].declaration_path
    assert "movie_title" == by_option["--movie-title"].variable
    assert "date" == by_option["--founded"].source_type.name


def test_flatten_update_skips_create_only():
    uut = movie_generator()
    studio = uut.classifier.classify("Studio")
    flags = flatten(uut, studio, "", OperationKind.UPDATE)
    assert ["--id", "--name", "--founded", "--address-street", "--address-city"] == options(flags)


def test_flatten_prefix():
    uut = movie_generator()
    address = uut.classifier.classify("Address")
    flags = flatten(uut, address, "home", OperationKind.CREATE)
    assert ["--home-street", "--home-city"] == options(flags)


def test_flatten_deterministic():
    first = movie_generator()
    second = movie_generator()
    for name in ("Movie", "Studio", "ReviewModel"):
        for kind in OperationKind:
            lhs = flatten(first, first.classifier.classify(name), "", kind)
            rhs = flatten(second, second.classifier.classify(name), "", kind)
            assert lhs == rhs


def test_flatten_duplicates(caplog):
    uut = inline_generator({
        "Inner": {"fields": [{"name": "name", "type": "str"}]},
        "Outer": {"fields": [
            {"name": "innerName", "type": "str"},
            {"name": "inner", "type": "Inner"},
        ]},
    })
    outer = uut.classifier.classify("Outer")
    with caplog.at_level(logging.DEBUG, logger=GENERATOR_LOG_CLASS):
        flags = flatten(uut, outer, "", OperationKind.CREATE)

    # the first one wins
    assert ["--inner-name"] == options(flags)
    assert ("innerName",) == flags[0].declaration_path
    assert "Dropping duplicate flag --inner-name for inner.name" in caplog.text


def test_has_flags():
    uut = inline_generator({
        "Empty": {"fields": []},
        "Static": {"fields": [{"name": "version", "type": "int", "static": True}]},
        "Wrapper": {"fields": [{"name": "empty", "type": "Empty"}]},
        "Ident": {"fields": [{"name": "id", "type": "int", "identifier": True}]},
    })
    classify = uut.classifier.classify
    assert not has_flags(classify("Empty"), OperationKind.CREATE)
    assert not has_flags(classify("Static"), OperationKind.UPDATE)
    assert not has_flags(classify("Wrapper"), OperationKind.CREATE)
    assert not has_flags(classify("Ident"), OperationKind.CREATE)
    assert has_flags(classify("Ident"), OperationKind.UPDATE)
    assert [] == flatten(uut, classify("Wrapper"), "", OperationKind.CREATE)


def test_flatten_sibling_collections():
    uut = inline_generator({
        "Tag": {"fields": [{"name": "label", "type": "str"}]},
        "Post": {"fields": [
            {"name": "primary", "type": "list[Tag]"},
            {"name": "secondary", "type": "set[Tag]"},
        ]},
    })
    flags = flatten(uut, uut.classifier.classify("Post"), "", OperationKind.CREATE)
    # both collections are prefixed by the element type, so only the first is kept
    assert ["--tag-label"] == options(flags)
    assert ("primary", "label") == flags[0].declaration_path
