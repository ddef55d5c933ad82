#!/usr/bin/env python3

import pytest
from pydantic import ValidationError

from pypatcher.report import BatchReport, Envelope, ItemResult, finalize_report


def _report(*statuses: int) -> BatchReport:
    report = BatchReport()
    for i, status in enumerate(statuses):
        report.add_result(f"pm-mod{i}-1.0-fix.patch", status, f"message {i}")
    return report


def test_empty_report_is_success():
    envelope = finalize_report(BatchReport().results)

    assert envelope.status == 200
    assert envelope.message == "All success"
    assert envelope.payload == []
    assert envelope.metadata["table.fields"] == ["item_id", "status", "message"]


def test_all_success():
    envelope = finalize_report(_report(200, 200).results)

    assert envelope.status == 200
    assert envelope.message == "All success"
    assert [r["status"] for r in envelope.payload] == [200, 200]


def test_mixed_results_are_partial_success():
    envelope = finalize_report(_report(200, 304, 500).results)

    assert envelope.status == 207
    assert envelope.message == "Partial success"


def test_no_success_takes_last_result():
    envelope = finalize_report(_report(500, 412).results)

    assert envelope.status == 412
    assert envelope.message == "message 1"


def test_already_in_place_counts_as_success():
    envelope = finalize_report(_report(304, 304).results)
    assert envelope.status == 200
    assert envelope.message == "All success"

    envelope = finalize_report(_report(200, 304).results)
    assert envelope.status == 200
    assert envelope.message == "All success"


def test_payload_keeps_insertion_order():
    report = BatchReport()
    report.add_result("b.patch", 200, "Applied")
    report.add_result("a.patch", 304, "Already applied")

    envelope = finalize_report(report.results)

    assert envelope.payload == [
        {"item_id": "b.patch", "status": 200, "message": "Applied"},
        {"item_id": "a.patch", "status": 304, "message": "Already applied"},
    ]
    assert [r.item_id for r in envelope.results] == ["b.patch", "a.patch"]


def test_item_results_are_immutable():
    result = ItemResult(item_id="a.patch", status=200, message="Applied")

    with pytest.raises(ValidationError):
        result.status = 500


def test_report_results_are_a_snapshot():
    report = _report(200)
    snapshot = report.results
    report.add_result("later.patch", 200, "Applied")

    assert len(snapshot) == 1
    assert len(report) == 2


def test_envelope_success_statuses():
    assert Envelope(status=200, message="ok").is_success
    assert Envelope(status=207, message="Partial success").is_success
    assert Envelope(status=304, message="Already applied").is_success
    assert not Envelope(status=400, message="Please specify patches_dir").is_success
    assert not Envelope(status=500, message="boom").is_success
    assert Envelope(status=400, message="x").results == []
