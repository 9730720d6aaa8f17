"""
Tests for the fetch, build and fetch-build command handlers.

The pipeline functions are patched; these tests cover how command-line
values and recipes turn into pipeline arguments and exit codes.
"""

from argparse import Namespace
from pathlib import Path
from unittest.mock import patch

import pytest

from autotoolsdep.cli.commands import build, fetch, fetch_build
from autotoolsdep.cli.utils import (
    parse_env_assignments,
    report_build_failure,
    resolve_parallelism,
)
from autotoolsdep.config.recipe import DEFAULT_TIMEOUT
from autotoolsdep.core.exceptions import (
    BuildStage,
    CommandFailedError,
    ConfigError,
    DependencyBuildError,
    TransportError,
)


def build_args(**overrides):
    """Namespace with the defaults of the shared build options."""
    values = {
        "prefix": Path("prefix"),
        "build_dir": None,
        "configure_args": None,
        "env": None,
        "parallelism": None,
        "make": "make",
    }
    values.update(overrides)
    return Namespace(**values)


def fetch_build_args(**overrides):
    values = {
        "recipe": None,
        "url": None,
        "source_dir": None,
        "download_dir": None,
        "timeout": None,
    }
    values.update(overrides)
    return build_args(**values)


@pytest.fixture
def recipe_file(tmp_path):
    path = tmp_path / "pkg.yaml"
    path.write_text(
        """
version: 1
dependency:
  name: pkg
  url: https://example.com/pkg-1.0.tar.gz
  source_dir: pkg-1.0
  configure_args: [--disable-nls]
  env:
    CC: gcc
    CFLAGS: -O2
  timeout: 120
  parallelism: 3
"""
    )
    return path


# ============================================================================
# Utilities
# ============================================================================


class TestParseEnvAssignments:
    """Test parse_env_assignments function."""

    def test_none(self):
        assert parse_env_assignments(None) == {}

    def test_assignments(self):
        result = parse_env_assignments(["CC=clang", "CFLAGS=-O2 -g", "EMPTY="])
        assert result == {"CC": "clang", "CFLAGS": "-O2 -g", "EMPTY": ""}

    def test_value_may_contain_equals(self):
        assert parse_env_assignments(["OPTS=a=b"]) == {"OPTS": "a=b"}

    def test_later_assignment_wins(self):
        assert parse_env_assignments(["CC=gcc", "CC=clang"]) == {"CC": "clang"}

    @pytest.mark.parametrize("assignment", ["CC", "=clang"])
    def test_invalid(self, assignment):
        with pytest.raises(ConfigError, match="Invalid environment assignment"):
            parse_env_assignments([assignment])


class TestResolveParallelism:
    """Test resolve_parallelism function."""

    def test_explicit_value(self):
        assert resolve_parallelism("6", default=2) == 6

    def test_default_used_when_unset(self):
        assert resolve_parallelism(None, default=2) == 2

    def test_auto_when_no_default(self):
        with patch("autotoolsdep.config.recipe.os.cpu_count", return_value=5):
            assert resolve_parallelism(None) == 5


class TestReportBuildFailure:
    """Test report_build_failure function."""

    def test_fetch_failure(self, caplog):
        error = DependencyBuildError(
            BuildStage.FETCH, TransportError("https://e.com/a.tar.gz", "404")
        )

        assert report_build_failure(error) == 1
        assert "Fetching the dependency failed" in caplog.text

    def test_build_failure(self, caplog):
        error = DependencyBuildError(
            BuildStage.CONFIGURE, CommandFailedError("configure --prefix /p", 1)
        )

        assert report_build_failure(error) == 1
        assert "Building the dependency failed (configure)" in caplog.text


# ============================================================================
# fetch
# ============================================================================


class TestFetchRun:
    """Test fetch command handler."""

    def test_success(self, tmp_path):
        args = Namespace(url="https://e.com/a.tar.gz", dest=tmp_path, timeout=None)

        with patch(
            "autotoolsdep.cli.commands.fetch.fetch_and_extract", return_value=tmp_path
        ) as mock_fetch:
            assert fetch.run(args) == 0

        mock_fetch.assert_called_once_with("https://e.com/a.tar.gz", tmp_path, DEFAULT_TIMEOUT)

    def test_timeout_passed(self, tmp_path):
        args = Namespace(url="https://e.com/a.tar.gz", dest=tmp_path, timeout=0.0)

        with patch("autotoolsdep.cli.commands.fetch.fetch_and_extract") as mock_fetch:
            fetch.run(args)

        assert mock_fetch.call_args.args[2] == 0.0

    def test_failure(self, tmp_path):
        args = Namespace(url="https://e.com/a.tar.gz", dest=tmp_path, timeout=None)

        with patch(
            "autotoolsdep.cli.commands.fetch.fetch_and_extract",
            side_effect=TransportError("https://e.com/a.tar.gz", "404 Not Found"),
        ):
            assert fetch.run(args) == 1


# ============================================================================
# build
# ============================================================================


class TestBuildRun:
    """Test build command handler."""

    def test_success_prints_prefix(self, tmp_path, capsys):
        build_dir = tmp_path / "build"
        args = build_args(
            source=Path("src"),
            build_dir=build_dir,
            configure_args=["--disable-nls"],
            env=["CC=clang"],
            parallelism="2",
        )

        with patch(
            "autotoolsdep.cli.commands.build.build_local_dependency",
            return_value=tmp_path / "prefix",
        ) as mock_build:
            assert build.run(args) == 0

        mock_build.assert_called_once_with(
            Path("src"),
            build_dir,
            Path("prefix"),
            ["--disable-nls"],
            {"CC": "clang"},
            2,
            make="make",
        )
        assert capsys.readouterr().out.strip() == str(tmp_path / "prefix")

    def test_temporary_build_dir(self, isolated_tempdir):
        """Test a temporary build dir is used and removed when none is given."""
        args = build_args(source=Path("src"), parallelism="1")
        seen = {}

        def fake_build(source, build_dir, *rest, **kwargs):
            seen["build_dir"] = build_dir
            assert build_dir.is_dir()
            return Path("prefix")

        with patch(
            "autotoolsdep.cli.commands.build.build_local_dependency",
            side_effect=fake_build,
        ):
            assert build.run(args) == 0

        assert seen["build_dir"].name.startswith("autotoolsdep-build-")
        assert not seen["build_dir"].exists()

    def test_failure_returns_1(self):
        args = build_args(source=Path("src"), build_dir=Path("b"), parallelism="1")
        error = DependencyBuildError(BuildStage.BUILD, CommandFailedError("make -j1", 2))

        with patch(
            "autotoolsdep.cli.commands.build.build_local_dependency", side_effect=error
        ):
            assert build.run(args) == 1

    def test_invalid_env_raises_config_error(self):
        args = build_args(source=Path("src"), env=["NOEQUALS"])

        with pytest.raises(ConfigError):
            build.run(args)


# ============================================================================
# fetch-build
# ============================================================================


class TestLoadRecipe:
    """Test load_recipe function."""

    def test_from_command_line(self):
        args = fetch_build_args(
            url="https://e.com/pkg-1.0.tar.gz",
            source_dir="pkg-1.0",
            configure_args=["--x"],
            env=["A=1"],
            parallelism="2",
        )

        recipe = fetch_build.load_recipe(args)

        assert recipe.url == "https://e.com/pkg-1.0.tar.gz"
        assert recipe.source_dir == "pkg-1.0"
        assert recipe.configure_args == ["--x"]
        assert recipe.env == {"A": "1"}
        assert recipe.timeout == DEFAULT_TIMEOUT
        assert recipe.parallelism == 2

    def test_missing_url_without_recipe(self):
        args = fetch_build_args(source_dir="pkg-1.0")

        with pytest.raises(ConfigError, match="--recipe"):
            fetch_build.load_recipe(args)

    def test_from_recipe(self, recipe_file):
        recipe = fetch_build.load_recipe(fetch_build_args(recipe=recipe_file))

        assert recipe.name == "pkg"
        assert recipe.url == "https://example.com/pkg-1.0.tar.gz"
        assert recipe.configure_args == ["--disable-nls"]
        assert recipe.env == {"CC": "gcc", "CFLAGS": "-O2"}
        assert recipe.timeout == 120.0
        assert recipe.parallelism == 3

    def test_command_line_overrides_recipe(self, recipe_file):
        """Test options override scalars, extend args and merge env."""
        args = fetch_build_args(
            recipe=recipe_file,
            url="https://mirror.example.com/pkg-1.0.tar.gz",
            configure_args=["--enable-static"],
            env=["CC=clang"],
            timeout=0.0,
            parallelism="7",
        )

        recipe = fetch_build.load_recipe(args)

        assert recipe.url == "https://mirror.example.com/pkg-1.0.tar.gz"
        assert recipe.source_dir == "pkg-1.0"
        assert recipe.configure_args == ["--disable-nls", "--enable-static"]
        assert recipe.env == {"CC": "clang", "CFLAGS": "-O2"}
        assert recipe.timeout == 0.0
        assert recipe.parallelism == 7


class TestFetchBuildRun:
    """Test fetch-build command handler."""

    def test_success(self, recipe_file, capsys):
        args = fetch_build_args(recipe=recipe_file, download_dir=Path("dl"))

        with patch(
            "autotoolsdep.cli.commands.fetch_build.fetch_build_dependency",
            return_value=Path("/abs/prefix"),
        ) as mock_pipeline:
            assert fetch_build.run(args) == 0

        mock_pipeline.assert_called_once_with(
            "https://example.com/pkg-1.0.tar.gz",
            Path("prefix"),
            "pkg-1.0",
            ["--disable-nls"],
            {"CC": "gcc", "CFLAGS": "-O2"},
            120.0,
            3,
            download_dir=Path("dl"),
            build_dir=None,
            make="make",
        )
        assert capsys.readouterr().out.strip() == str(Path("/abs/prefix"))

    def test_failure_returns_1(self, recipe_file):
        error = DependencyBuildError(
            BuildStage.FETCH, TransportError("https://example.com/pkg-1.0.tar.gz", "404")
        )

        with patch(
            "autotoolsdep.cli.commands.fetch_build.fetch_build_dependency",
            side_effect=error,
        ):
            assert fetch_build.run(fetch_build_args(recipe=recipe_file)) == 1
