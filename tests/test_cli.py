from __future__ import annotations

import json

import pandas as pd
import pytest

from theme_team.cli import build_parser, load_themes, main, write_two_column_csv


def _theme_args(data_dir, theme, *extra):
    return ["--theme", theme, "--data-dir", str(data_dir), *extra]


def test_single_theme_prints_api_shaped_json(data_dir, capsys):
    code = main(_theme_args(data_dir, "aura", "--size", "1", "--seed", "7"))
    assert code == 0

    body = json.loads(capsys.readouterr().out)
    assert body["interpreted"]["rawTokens"] == ["aura"]
    assert [m["key"] for m in body["team"]] == ["lucario"]
    assert "debug" not in body


def test_debug_flag_includes_scores(data_dir, capsys):
    assert main(_theme_args(data_dir, "spooky", "--debug")) == 0
    body = json.loads(capsys.readouterr().out)
    assert body["debug"]["scored"][0] == {"key": "gengar", "score": 8, "reasons": ["spooky"]}


def test_seed_makes_runs_reproducible(data_dir, capsys):
    args = _theme_args(data_dir, "spooky dog cute", "--size", "3", "--seed", "42")
    main(args)
    first = capsys.readouterr().out
    main(args)
    assert capsys.readouterr().out == first


def test_legendaries_excluded_by_default(data_dir, capsys):
    main(_theme_args(data_dir, "psychic"))
    assert json.loads(capsys.readouterr().out)["team"] == []

    main(_theme_args(data_dir, "psychic", "--include-legendaries"))
    assert [m["key"] for m in json.loads(capsys.readouterr().out)["team"]] == ["mewtwo"]


def test_invalid_request_exits_with_1(data_dir, capsys):
    assert main(_theme_args(data_dir, "spooky", "--size", "9")) == 1
    assert "Team size must be between 1 and 6." in capsys.readouterr().err


def test_unknown_type_exits_with_1(data_dir):
    assert main(_theme_args(data_dir, "spooky", "--include-type", "shadow")) == 1


def test_missing_catalog_exits_with_2(tmp_path):
    assert main(["--theme", "spooky", "--data-dir", str(tmp_path / "nowhere")]) == 2


def test_theme_and_input_are_mutually_exclusive():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--theme", "x", "--in", "themes.csv"])


def test_batch_run_writes_two_column_csv(data_dir, tmp_path):
    inp = tmp_path / "themes.csv"
    out = tmp_path / "out" / "teams.csv"
    pd.DataFrame({"Theme": ["aura", "aura", " spooky\n", "zzzz"]}).to_csv(inp, index=False)

    code = main(["--in", str(inp), "--out", str(out), "--data-dir", str(data_dir), "--size", "1", "--seed", "3"])
    assert code == 0

    df = pd.read_csv(out)
    assert list(df.columns) == ["Theme", "Key"]
    assert df["Theme"].tolist() == ["aura", "spooky"]
    assert df["Key"].iloc[0] == "lucario"
    assert df["Key"].iloc[1] in {"gengar", "houndoom", "mimikyu"}


def test_load_themes_requires_theme_column(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame({"Query": ["spooky"]}).to_csv(path, index=False)
    with pytest.raises(ValueError, match="Expected column 'Theme'"):
        load_themes(path)


def test_load_themes_accepts_any_header_case(tmp_path):
    path = tmp_path / "themes.csv"
    pd.DataFrame({"theme": ["  spooky   dogs ", None]}).to_csv(path, index=False)
    assert load_themes(path) == ["spooky dogs", ""]


def test_write_two_column_csv_keeps_theme_order(tmp_path):
    out = tmp_path / "teams.csv"
    rows = write_two_column_csv({"b": ["x"], "a": ["y", "z"]}, ["a", "b", "c"], out)

    assert rows == 3
    df = pd.read_csv(out)
    assert df.values.tolist() == [["a", "y"], ["a", "z"], ["b", "x"]]


def test_batch_missing_input_file_exits_with_1(data_dir, tmp_path, capsys):
    code = main(["--in", str(tmp_path / "missing.csv"), "--out", str(tmp_path / "out.csv"), "--data-dir", str(data_dir)])

    assert code == 1
    assert "Cannot read themes" in capsys.readouterr().err
    assert not (tmp_path / "out.csv").exists()


def test_batch_without_theme_column_exits_with_1(data_dir, tmp_path, capsys):
    inp = tmp_path / "queries.csv"
    pd.DataFrame({"Query": ["spooky"]}).to_csv(inp, index=False)

    code = main(["--in", str(inp), "--out", str(tmp_path / "out.csv"), "--data-dir", str(data_dir)])

    assert code == 1
    assert "Expected column 'Theme'" in capsys.readouterr().err
