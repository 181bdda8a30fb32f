"""Tests for driver callbacks."""

import json
import logging

from baksheesh.driver.callbacks import (
    count_data,
    echo_progress,
    load_jsonl,
    log_progress,
    save_to_jsonl_file,
    save_to_jsonl_path,
)
from tests.utils import report


class TestJsonl:
    def test_save_to_jsonl_file_writes_one_line_per_record(self, tmp_path):
        path = tmp_path / "reports.jsonl"

        with path.open("w") as f:
            callback = save_to_jsonl_file(f)
            callback(report(1500, "Transport", "Driving License"))
            callback(report(None, "Police", "Fine"))

        lines = path.read_text().splitlines()
        assert [json.loads(line) for line in lines] == [
            {"amount": 1500.0, "transaction": "Driving License", "department": "Transport"},
            {"amount": None, "transaction": "Fine", "department": "Police"},
        ]

    def test_save_to_jsonl_path_appends(self, tmp_path):
        path = tmp_path / "reports.jsonl"
        path.write_text(json.dumps({"amount": 1.0, "transaction": "a", "department": "b"}) + "\n")

        callback = save_to_jsonl_path(str(path))
        callback(report(2, "c", "d"))

        assert len(path.read_text().splitlines()) == 2

    def test_load_jsonl_round_trip(self, tmp_path):
        records = [report(1500, "Transport", "Driving License"), report(None, "Police", "Fine")]
        path = tmp_path / "reports.jsonl"
        with path.open("w") as f:
            callback = save_to_jsonl_file(f)
            for record in records:
                callback(record)

        assert load_jsonl(path) == records

    def test_load_jsonl_skips_blank_lines(self, tmp_path):
        path = tmp_path / "reports.jsonl"
        path.write_text(
            '{"amount": 5, "transaction": "t", "department": "d"}\n\n'
        )

        assert len(load_jsonl(path)) == 1


class TestCounters:
    def test_count_data(self):
        counter = [0]
        callback = count_data(counter)

        for _ in range(3):
            callback(report(1, "X"))

        assert counter == [3]


class TestProgress:
    def test_log_progress(self, caplog):
        with caplog.at_level(logging.INFO, logger="baksheesh.driver.callbacks"):
            log_progress(10, "http://example.test/reports/paid?page=10")

        assert "offset 10" in caplog.text

    def test_echo_progress(self, capsys):
        echo_progress(0, "http://example.test/reports/paid")

        assert capsys.readouterr().out == (
            "Scraping page at offset 0 (http://example.test/reports/paid)\n"
        )
