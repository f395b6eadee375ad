import pytest

from weblookup.config import StyleStore, general_settings, load_config


def test_load_config_copies_bundled_defaults(tmp_path):
    config_dir = tmp_path / "cfg"
    config = load_config(config_dir)

    for filename in ("general.toml", "styles.toml", "backends.toml"):
        assert (config_dir / filename).exists()
    assert config["general"]["log_level"] == "INFO"
    assert config["backend"]["leo"]["class"] == "LeoBackend"
    assert config["styles"] == {}


def test_user_files_override_bundled(tmp_path):
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    (config_dir / "general.toml").write_text(
        '[general]\nbrowser = "firefox %s"\n', encoding="utf-8"
    )
    (config_dir / "styles.toml").write_text(
        '[styles.":lookup:*:leo:*"]\nlanguage = "frde"\n', encoding="utf-8"
    )

    config = load_config(config_dir)

    settings = general_settings(config)
    assert settings["browser"] == "firefox %s"
    assert settings["log_level"] == "INFO"
    styles = StyleStore.from_config(config)
    assert styles.resolve(":lookup:-default-:leo:", "language") == "frde"


def test_invalid_user_file_exits(tmp_path, capsys):
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    (config_dir / "general.toml").write_text("[general\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        load_config(config_dir)

    assert excinfo.value.code == 1
    assert "Invalid configuration file" in capsys.readouterr().err


def test_general_settings_defaults():
    settings = general_settings({})
    assert settings == {
        "log_level": "INFO",
        "log_file": "~/.config/weblookup/logs/weblookup.log",
        "browser": "",
    }


def test_default_config_dir_is_under_home(tmp_path):
    load_config()
    assert (tmp_path / "fake_home" / ".config" / "weblookup" / "general.toml").exists()
