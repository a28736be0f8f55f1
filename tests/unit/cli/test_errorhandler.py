import pytest
import typer

from portico.bootstrap.exceptions import ManifestNotFoundError, ToolInvocationError
from portico.build.exceptions import LayoutNotFoundError
from portico.cli.errorhandler import exit_status, handle_cli_errors


@pytest.mark.parametrize(
    ("returncode", "expected"),
    [(1, 1), (42, 42), (127, 127), (-9, 137), (-15, 143), (0, 1)],
)
def test_exit_status(returncode, expected):
    assert exit_status(returncode) == expected


def test_tool_killed_by_signal_exits_like_a_shell():
    with pytest.raises(typer.Exit) as excinfo:
        with handle_cli_errors():
            raise ToolInvocationError(["npm", "install"], -9)

    assert excinfo.value.exit_code == 137


def test_manifest_missing_exits_one(tmp_path):
    with pytest.raises(typer.Exit) as excinfo:
        with handle_cli_errors():
            raise ManifestNotFoundError(tmp_path / "package.json")

    assert excinfo.value.exit_code == 1


def test_debug_reraises_original_error(tmp_path):
    with pytest.raises(LayoutNotFoundError):
        with handle_cli_errors(debug=True):
            raise LayoutNotFoundError("base", tmp_path / "index.md", tmp_path)
