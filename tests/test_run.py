import json
from pathlib import Path

import run
from run import collect_records, main, write_results_csv

WIDE_ROW = "1" * 3 + "0" * 147


def test_single_token_argument(capsys):
    results = main([WIDE_ROW])
    assert len(results) == 1
    assert results[0]["classification"] == "unique"
    assert results[0]["row_clues"][0] == [3]
    assert "input: unique (1 models)" in capsys.readouterr().out


def test_malformed_token_checks_empty_board():
    results = main(["not-a-token"])
    assert results[0]["token"] == "0" * 150
    assert results[0]["classification"] == "unique"


def test_directory_input(tmp_path):
    for i in range(3):
        (tmp_path / f"grids{i}.txt").write_text(WIDE_ROW + "\n")
    (tmp_path / "notes.md").write_text("ignored")

    results = main([str(tmp_path)])
    assert len(results) == 3
    assert {r["id"] for r in results} == {"grids0-0", "grids1-0", "grids2-0"}


def test_collect_records_treats_unknown_paths_as_tokens():
    assert collect_records(WIDE_ROW) == [{"id": "input", "token": WIDE_ROW}]


def test_csv_and_json_output(tmp_path):
    source = tmp_path / "grids.csv"
    source.write_text(f"id,token\nrow,{WIDE_ROW}\n")
    output_path = tmp_path / "out.csv"
    json_path = tmp_path / "out.json"

    main([str(source), "--output", str(output_path), "--json", str(json_path)])

    content = output_path.read_text()
    assert "id,token,classification,models,contested,steps" in content
    assert "row," + WIDE_ROW + ",unique,1" in content
    report = json.loads(json_path.read_text())
    assert report[0]["id"] == "row"
    assert report[0]["badge"] == "solvable"


def test_failures_are_recorded_and_batch_continues(monkeypatch, tmp_path):
    def _boom(token, limit=0):
        raise RuntimeError("boom")

    monkeypatch.setattr(run, "check_puzzle", _boom)
    source = tmp_path / "grids.txt"
    source.write_text(WIDE_ROW + "\n" + WIDE_ROW + "\n")
    results = main([str(source)])
    assert [r["classification"] for r in results] == ["error", "error"]
    assert all(r["steps"] == -1 for r in results)


def test_board_and_trace_output(tmp_path, capsys):
    trace_path = tmp_path / "trace.csv"
    main([WIDE_ROW, "--board", "--trace", str(trace_path)])
    out = capsys.readouterr().out
    assert " # # #" + " ." * 12 + "  3" in out
    assert "[solvable]" in out
    assert trace_path.exists()
    assert "action_type" in trace_path.read_text()


def test_limit_from_environment(monkeypatch):
    monkeypatch.setenv(run.LIMIT_ENV, "1")
    args = run.parse_args([WIDE_ROW])
    assert args.limit == 1
    monkeypatch.setenv(run.LIMIT_ENV, "many")
    assert run.parse_args([WIDE_ROW]).limit == 0


def test_write_results_csv(tmp_path):
    output_path = Path(tmp_path / "results.csv")
    write_results_csv(
        [{"id": "a", "token": "0" * 150, "classification": "ambiguous", "models": 2, "contested": [0, 1], "steps": 4}],
        output_path,
    )
    assert 'a,' + "0" * 150 + ',ambiguous,2,"[0,1]",4' in output_path.read_text()
