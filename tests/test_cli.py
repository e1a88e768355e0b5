import io
import json
import sys
from pathlib import Path

import pytest

from pewma.cli import app as cli_app
from pewma.config.settings import SettingsLoader

SMALL_CONFIG = (
    "log_level: WARNING\n"
    "detector:\n"
    "  training_period: 3\n"
    "  alpha0: 0.9\n"
    "  beta: 0.3\n"
    "  threshold: 0.01\n"
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def _json_lines(text: str) -> list[dict]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_init_config_writes_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "pewma.yaml"
    cli_app.main(["--config", str(config_path), "init-config"])
    assert SettingsLoader.load(config_path).detector.training_period == 30


def test_run_emits_one_verdict_per_value(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = _write(tmp_path / "pewma.yaml", SMALL_CONFIG)
    input_path = _write(tmp_path / "values.txt", "1\n1\n1\n1\n1000\n")

    cli_app.main(["--config", str(config_path), "run", "--input", str(input_path)])

    captured = capsys.readouterr()
    verdicts = _json_lines(captured.out)
    assert [v["status"] for v in verdicts] == [
        "in_training",
        "in_training",
        "in_training",
        "in_ordinary",
        "outlier",
    ]
    assert verdicts[0]["density"] is None
    assert '"summary"' in captured.err


def test_run_only_outliers(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = _write(tmp_path / "pewma.yaml", SMALL_CONFIG)
    input_path = _write(tmp_path / "values.txt", "1\n1\n1\n1\n1000\n")

    cli_app.main(["--config", str(config_path), "run", "--input", str(input_path), "--only-outliers"])

    verdicts = _json_lines(capsys.readouterr().out)
    assert len(verdicts) == 1
    assert verdicts[0]["value"] == 1000.0
    assert verdicts[0]["index"] == 4


def test_quickstart_is_default_command(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    config_path = tmp_path / "pewma_test.yaml"
    monkeypatch.setattr(sys, "argv", ["pewma", "--config", str(config_path)])
    monkeypatch.setattr(sys, "stdin", io.StringIO("1\n2\n"))

    cli_app.main()

    assert config_path.exists()
    verdicts = _json_lines(capsys.readouterr().out)
    assert [v["status"] for v in verdicts] == ["in_training", "in_training"]


def test_run_requires_existing_config(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        cli_app.main(["--config", str(tmp_path / "missing.yaml"), "run"])
    assert exc.value.code == 2


def test_run_rejects_invalid_coefficients(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "pewma.yaml", "detector:\n  alpha0: 1.5\n")
    with pytest.raises(SystemExit) as exc:
        cli_app.main(["--config", str(config_path), "run"])
    assert exc.value.code == 2


def test_run_rejects_missing_input_file(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "pewma.yaml", SMALL_CONFIG)
    with pytest.raises(SystemExit) as exc:
        cli_app.main(["--config", str(config_path), "run", "--input", str(tmp_path / "nope.txt")])
    assert exc.value.code == 2


def _summary(err: str) -> dict:
    lines = [json.loads(line) for line in err.splitlines() if line.startswith('{"summary"')]
    return lines[-1]["summary"]


@pytest.mark.parametrize("raw_level", ["verbose", "5"])
def test_run_rejects_invalid_log_level(tmp_path: Path, raw_level: str) -> None:
    config_path = _write(tmp_path / "pewma.yaml", f"log_level: {raw_level}\n")
    with pytest.raises(SystemExit) as exc:
        cli_app.main(["--config", str(config_path), "run"])
    assert exc.value.code == 2


@pytest.mark.parametrize("threshold", ["nan", "inf"])
def test_run_rejects_non_finite_threshold(tmp_path: Path, threshold: str) -> None:
    config_path = _write(tmp_path / "pewma.yaml", SMALL_CONFIG)
    with pytest.raises(SystemExit) as exc:
        cli_app.main(["--config", str(config_path), "run", "--threshold", threshold])
    assert exc.value.code == 2


def test_run_skips_lines_with_invalid_utf8(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = _write(tmp_path / "pewma.yaml", SMALL_CONFIG)
    input_path = tmp_path / "values.txt"
    input_path.write_bytes(b"1\n\xff\xfe\n2\n")

    cli_app.main(["--config", str(config_path), "run", "--input", str(input_path)])

    captured = capsys.readouterr()
    assert [v["value"] for v in _json_lines(captured.out)] == [1.0, 2.0]
    assert _summary(captured.err)["skipped_lines"] == 1


def test_max_values_stops_reading_stdin(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    config_path = _write(tmp_path / "pewma.yaml", SMALL_CONFIG)
    stdin = io.StringIO("1\n2\noops\n3\n")
    monkeypatch.setattr(sys, "stdin", stdin)

    cli_app.main(["--config", str(config_path), "run", "--max-values", "2"])

    captured = capsys.readouterr()
    assert len(_json_lines(captured.out)) == 2
    assert _summary(captured.err) == {
        "observations_total": 2,
        "skipped_lines": 0,
        "by_status": {"in_training": 2},
    }
    assert stdin.read() == "oops\n3\n"
