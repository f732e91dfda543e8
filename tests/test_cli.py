"""
Command Line Tests
"""

import json
import logging

import pytest

from scancore.cli import build_parser, main
from tests.fixtures import EAN13, UPCA, UPCA_AS_GTIN13


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("scancore")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def capture_file(tmp_path):
    rows = [
        {"payload": "noise", "observed_at_ms": 0},
        {"payload": EAN13, "observed_at_ms": 10},
        {"payload": EAN13, "observed_at_ms": 43},
        {"payload": EAN13, "observed_at_ms": 76},
    ]
    path = tmp_path / "capture.jsonl"
    path.write_text("\n".join(json.dumps(r) for r in rows) + "\n", encoding="utf-8")
    return path


class TestReplayCommand:

    def test_prints_confirmed_table(self, capture_file, capsys):
        assert main(["replay", str(capture_file)]) == 0

        out = capsys.readouterr().out
        assert "[*] Replayed 4 reads" in out
        assert f"| 43 | `{EAN13}` | ean13 |" in out
        assert "Reads: 4  Pending: 1  Confirmed: 1  Ignored: 2" in out
        assert "unrecognized_payload: 1" in out
        assert "cooling_down: 1" in out

    def test_json_output(self, capture_file, capsys):
        assert main(["replay", str(capture_file), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [scan['gtin'] for scan in data['confirmed']] == [EAN13]
        assert len(data['outcomes']) == 4

    def test_higher_threshold_confirms_nothing(self, capture_file, capsys):
        assert main(["replay", str(capture_file), "--confirmations", "4"]) == 0
        assert "No scans confirmed." in capsys.readouterr().out

    def test_missing_file_exits_2(self, tmp_path, capsys):
        assert main(["replay", str(tmp_path / "missing.jsonl")]) == 2
        assert "[!] Cannot load capture" in capsys.readouterr().err

    def test_malformed_capture_exits_2(self, tmp_path, capsys):
        path = tmp_path / "bad.jsonl"
        path.write_text('{"payload": 1, "observed_at_ms": 0}\n', encoding="utf-8")

        assert main(["replay", str(path)]) == 2
        assert "line 1:" in capsys.readouterr().err

    def test_non_utf8_capture_exits_2(self, tmp_path, capsys):
        path = tmp_path / "binary.jsonl"
        path.write_bytes(b'{"payload": "\xff\xfe", "observed_at_ms": 0}\n')

        assert main(["replay", str(path)]) == 2
        assert "invalid UTF-8" in capsys.readouterr().err

    @pytest.mark.parametrize("value", ["0", "-5", "two"])
    def test_rejects_bad_tuning(self, capture_file, value):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["replay", str(capture_file), "--window-ms", value])


class TestNormalizeCommand:

    def test_all_valid(self, capsys):
        assert main(["normalize", EAN13, UPCA]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            f"{EAN13}\t{EAN13}\tean13",
            f"{UPCA}\t{UPCA_AS_GTIN13}\tupc_a",
        ]

    def test_failure_sets_exit_code(self, capsys):
        assert main(["normalize", EAN13, "abc"]) == 1
        assert "abc\t-\tNO_DIGITS" in capsys.readouterr().out

    def test_json_output(self, capsys):
        main(["normalize", "123", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data[0]['error_code'] == 'UNSUPPORTED_LENGTH'
        assert data[0]['gtin'] is None


class TestGlobalOptions:

    def test_log_level_is_normalized(self):
        args = build_parser().parse_args(["--log-level", "debug", "normalize", "x"])
        assert args.log_level == "DEBUG"

    def test_unknown_log_level_is_a_usage_error(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--log-level", "FOO", "normalize", "x"])

        assert excinfo.value.code == 2
        assert "Unknown log level" in capsys.readouterr().err
