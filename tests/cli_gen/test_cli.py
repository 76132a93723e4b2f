import os
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import mock

import pytest
import typer

from rpc_cli_tools.cli_gen.cli import generate_check
from rpc_cli_tools.cli_gen.cli import generate_cli
from rpc_cli_tools.cli_gen.cli import generator_with_error_handling
from rpc_cli_tools.cli_gen.cli import open_catalog_with_error_handling
from rpc_cli_tools.cli_gen.cli import show_commands
from rpc_cli_tools.cli_gen.files import copyright
from rpc_cli_tools.types import AuthMode
from tests.cli_gen.helpers import to_ascii
from tests.cli_gen.helpers import unwrapped
from tests.helpers import StringIo
from tests.helpers import asset_filename


@pytest.mark.parametrize(
    ["filename", "message"],
    [
        pytest.param("does-not-exist.yaml", "failed to find", id="missing"),
        pytest.param("bad.yaml", "unable to parse", id="bad"),
    ]
)
def test_open_catalog_errors(filename, message):
    with mock.patch('sys.stdout', new_callable=StringIo) as mock_stdout:
        with pytest.raises(typer.Exit) as ex:
            open_catalog_with_error_handling(asset_filename(filename))
        assert ex.value.exit_code == 1
        output = unwrapped(mock_stdout.getvalue())
    assert "ERROR:" in output
    assert message in output


@pytest.mark.parametrize(
    ["filename", "message"],
    [
        pytest.param("missing_client.yaml", "client section is missing: name", id="client"),
        pytest.param("no_resources.yaml", "no resource clients found", id="resources"),
    ]
)
def test_generator_errors(filename, message):
    with mock.patch('sys.stdout', new_callable=StringIo) as mock_stdout:
        with pytest.raises(typer.Exit):
            generator_with_error_handling(asset_filename(filename), "cli")
        output = unwrapped(mock_stdout.getvalue())
    assert message in output


def test_generator_errors_long_path(tmp_path):
    directory = tmp_path / ("nested-" * 12)
    directory.mkdir()
    filename = directory / "missing_client.yaml"
    filename.write_text(Path(asset_filename("missing_client.yaml")).read_text())
    with mock.patch('sys.stdout', new_callable=StringIo) as mock_stdout:
        with pytest.raises(typer.Exit):
            generator_with_error_handling(filename.as_posix(), "cli")
        output = unwrapped(mock_stdout.getvalue())
    assert output.startswith("ERROR:")
    assert output.endswith("client section is missing: name")


def test_generator_overrides():
    generator = generator_with_error_handling(asset_filename("movies.yaml"), "filmcli", "films", AuthMode.NONE)
    assert "filmcli" == generator.package_name
    assert "films" == generator.config.cmdline_name
    assert AuthMode.NONE == generator.config.auth


def test_generate_code_dir(copyright_fixture):
    tempdir = TemporaryDirectory()
    code_dir = Path(tempdir.name) / "src"
    with mock.patch('sys.stdout', new_callable=StringIo) as mock_stdout:
        generate_cli(asset_filename("movies.yaml"), "moviecli", code_dir=code_dir.as_posix())
        output = mock_stdout.getvalue()

    assert f"Generated 7 commands in {code_dir.as_posix()}" in output
    assert (code_dir / "main.py").exists()
    assert (code_dir / "movies_add_movie_cmd.py").exists()


def test_generate_project_dir(copyright_fixture):
    tempdir = TemporaryDirectory()
    with mock.patch('sys.stdout', new_callable=StringIo):
        generate_cli(asset_filename("movies.yaml"), "moviecli", project_dir=tempdir.name, cmdline_name="films")

    path = Path(tempdir.name) / "moviecli"
    assert (path / "_base.py").exists()
    assert 'CMD_LINE_NAME = "films"' in (path / "_base.py").read_text()


def test_generate_copyright_file(copyright_fixture):
    tempdir = TemporaryDirectory()
    path = Path(tempdir.name)
    copyright_file = path / "copyright.txt"
    copyright_file.write_text("# Copyright Movie Co.\n")
    with mock.patch('sys.stdout', new_callable=StringIo):
        generate_cli(
            asset_filename("simple.yaml"),
            "simplecli",
            code_dir=(path / "code").as_posix(),
            copyright_file=copyright_file.as_posix(),
        )

    assert "# Copyright Movie Co.\n" == copyright()
    assert "# Copyright Movie Co." in (path / "code" / "main.py").read_text()


def test_generate_no_directory():
    with mock.patch('sys.stdout', new_callable=StringIo) as mock_stdout:
        with pytest.raises(typer.Exit) as ex:
            generate_cli(asset_filename("movies.yaml"), "moviecli")
        assert ex.value.exit_code == 1
        output = mock_stdout.getvalue()
    assert "Must provide code directory" in output


def test_check_problems():
    with mock.patch('sys.stdout', new_callable=StringIo) as mock_stdout:
        with pytest.raises(typer.Exit) as ex:
            generate_check(asset_filename("movies.yaml"))
        assert ex.value.exit_code == 1
        output = mock_stdout.getvalue()

    expected = """\
Unusable parameters and fields:
    Movies.list_movies: filters (dict[str, str])
    Studio.parent (Studio): recursive reference
    Studio.registry (dict[str, str]): dict is not a supported collection
"""
    assert expected == output


def test_check_clean():
    filename = asset_filename("simple.yaml")
    with mock.patch('sys.stdout', new_callable=StringIo) as mock_stdout:
        generate_check(filename)
        output = mock_stdout.getvalue()
    assert f"All parameters and fields in {filename} can be used\n" == output


def test_show_commands():
    # wide enough for the longest list of options
    with (
        mock.patch.dict(os.environ, {"TERMINAL_WIDTH": "250"}),
        mock.patch("sys.stdout", new_callable=StringIo) as mock_stdout,
    ):
        show_commands(asset_filename("movies.yaml"))
        output = to_ascii(mock_stdout.getvalue())

    for text in [
        "Group",
        "Command",
        "Arguments",
        "Options",
        "add-movie",
        "close-studio",
        "ARGUMENTS",
        "--score --comment --created",
    ]:
        assert text in output
    lines = output.splitlines()
    # one line per command
    assert 7 == len([line for line in lines if " movies " in line or " studios " in line])
