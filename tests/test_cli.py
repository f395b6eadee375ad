import pytest

from weblookup.cli import main as cli_main


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli_main, "setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def fake_launcher(monkeypatch, launcher):
    monkeypatch.setattr(cli_main, "Launcher", lambda command: launcher)
    return launcher


def test_lookup_opens_uri(tmp_path, fake_launcher):
    status = cli_main.run(["leo", "-l", "frde", "sugar"], config_dir=tmp_path)

    assert status == 0
    assert fake_launcher.opened == ["https://dict.leo.org/?search=sugar&lp=frde&lang=en"]


def test_unknown_pair_exits_nonzero(tmp_path, fake_launcher, capsys):
    status = cli_main.run(["leo", "-l", "xx", "hello"], config_dir=tmp_path)

    captured = capsys.readouterr()
    assert status == 1
    assert "xx" in captured.err
    assert "usage: lookup leo" in captured.out
    assert fake_launcher.opened == []


def test_context_refinement_selects_style(tmp_path, fake_launcher):
    (tmp_path / "styles.toml").write_text(
        '[styles.":lookup:work:leo:*"]\nlanguage = "plde"\n', encoding="utf-8"
    )

    cli_main.run(["-c", "work", "leo", "slowo"], config_dir=tmp_path)

    assert "lp=plde" in fake_launcher.opened[0]


def test_list_backends(tmp_path, fake_launcher, capsys):
    assert cli_main.run(["-L"], config_dir=tmp_path) == 0
    output = capsys.readouterr().out
    assert "leo" in output
    assert "dict.leo.org" in output


def test_status_table(tmp_path, fake_launcher, capsys):
    assert cli_main.run(["--status"], config_dir=tmp_path) == 0
    assert "active" in capsys.readouterr().out


def test_backend_help(tmp_path, fake_launcher, capsys):
    assert cli_main.run(["-h", "leo"], config_dir=tmp_path) == 0
    assert "language pairs:" in capsys.readouterr().out


@pytest.mark.parametrize("flag", ["--help", "-h"])
def test_backend_help_after_name(tmp_path, fake_launcher, capsys, flag):
    assert cli_main.run(["leo", flag], config_dir=tmp_path) == 0
    captured = capsys.readouterr()
    assert "language pairs:" in captured.out
    assert "unknown option" not in captured.err
    assert fake_launcher.opened == []


def test_top_level_help(tmp_path, fake_launcher, capsys):
    assert cli_main.run(["-h"], config_dir=tmp_path) == 0
    assert "usage: lookup" in capsys.readouterr().out


def test_no_backend_prints_usage(tmp_path, fake_launcher, capsys):
    assert cli_main.run([], config_dir=tmp_path) == 1
    assert "usage: lookup" in capsys.readouterr().err


def test_unknown_backend(tmp_path, fake_launcher, capsys):
    assert cli_main.run(["nope", "word"], config_dir=tmp_path) == 1
    assert "unknown backend: nope" in capsys.readouterr().err


def test_style_command_persists(tmp_path, fake_launcher):
    assert (
        cli_main.run(
            ["--style", ":lookup:*:leo:*", "language", "rude"], config_dir=tmp_path
        )
        == 0
    )
    cli_main.run(["leo", "privet"], config_dir=tmp_path)

    assert "lp=rude" in fake_launcher.opened[0]


def test_invalid_styles_file(tmp_path, fake_launcher, capsys):
    (tmp_path / "styles.toml").write_text(
        '[styles]\n"no-colon" = { language = "frde" }\n', encoding="utf-8"
    )

    assert cli_main.run(["leo", "word"], config_dir=tmp_path) == 1
    assert "invalid styles configuration" in capsys.readouterr().err


def test_main_exits_with_status(monkeypatch):
    monkeypatch.setattr(cli_main, "run", lambda: 7)
    with pytest.raises(SystemExit) as excinfo:
        cli_main.main()
    assert excinfo.value.code == 7
