"""Tests for EdgewalkSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from edgewalk.config.settings import EdgewalkSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "EDGEWALK_CONFIG",
        "EDGEWALK_ROOT",
        "EDGEWALK_STORE__PATH",
        "EDGEWALK_PAGING__PAGE_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = EdgewalkSettings.from_cli(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.paging.page_size == 16
        assert settings.db_path == tmp_path / "edgewalk.db"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = EdgewalkSettings.from_cli(root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "edgewalk.toml").write_text('[store]\npath = "data/m.db"\n[paging]\npage_size = 4\n')
        settings = EdgewalkSettings.from_cli(root=tmp_path)
        assert settings.paging.page_size == 4
        assert settings.db_path == tmp_path / "data" / "m.db"

    def test_root_is_config_parent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "edgewalk.toml").write_text("")
        child = tmp_path / "sub"
        child.mkdir()
        monkeypatch.chdir(child)
        settings = EdgewalkSettings.from_cli()
        assert settings.root == tmp_path
        assert settings.config_path == tmp_path / "edgewalk.toml"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir()
        custom.write_text("[seed]\nusers = 7\n")
        settings = EdgewalkSettings.from_cli(config_path=str(custom))
        assert settings.seed.users == 7
        assert settings.root == custom.parent

    def test_absolute_store_path(self, tmp_path: Path) -> None:
        target = tmp_path / "abs.db"
        (tmp_path / "edgewalk.toml").write_text(f'[store]\npath = "{target.as_posix()}"\n')
        settings = EdgewalkSettings.from_cli(root=tmp_path)
        assert settings.db_path == target

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "edgewalk.toml").write_text("[paging\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            EdgewalkSettings.from_cli(root=tmp_path)

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="not found"):
            EdgewalkSettings.from_cli(config_path=str(tmp_path / "missing.toml"))


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "edgewalk.toml").write_text("[paging]\npage_size = 4\n")
        monkeypatch.setenv("EDGEWALK_PAGING__PAGE_SIZE", "9")
        settings = EdgewalkSettings.from_cli(root=tmp_path)
        assert settings.paging.page_size == 9

    def test_cli_flags_beat_everything(self, tmp_path: Path) -> None:
        settings = EdgewalkSettings.from_cli(root=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True
