"""Tests for building reports from whole documents."""
import asyncio
import logging

import pandas as pd
import pytest
from conftest import LEGACY_15_HEADER, SUMMARIZED_12_HEADER

from usage_report.builder import build_report, build_report_async, read_report_file
from usage_report.errors import DocumentEmptyError, NoValidRowsError, UsageReportError


def test_lines_are_sorted_and_span_derived(legacy15_csv):
    report = build_report(legacy15_csv)
    dates = [line.date for line in report.lines]
    assert dates == sorted(dates)
    assert report.start_date == min(dates) == pd.Timestamp("2024-03-01", tz="UTC")
    assert report.end_date == max(dates) == pd.Timestamp("2024-04-01", tz="UTC")
    assert report.days == pytest.approx(31.0)
    assert report.format_type == "legacy"
    assert report.csv_format == "legacy-15"
    assert len(report.lines) == 5


def test_sort_is_stable_for_equal_dates(legacy15_csv):
    report = build_report(legacy15_csv)
    same_day = [line.sku for line in report.lines if line.date == pd.Timestamp("2024-03-02", tz="UTC")]
    assert same_day == ["git_lfs_storage", "actions_linux"]


def test_crlf_documents_parse(legacy14_csv):
    report = build_report(legacy14_csv)
    assert report.csv_format == "legacy-14"
    assert report.format_type == "legacy"
    assert len(report.lines) == 2
    assert report.lines[-1].cost_center_name == ""


def test_summarized_document_with_quotes(summarized_csv):
    report = build_report(summarized_csv)
    assert report.format_type == "summarized"
    assert [line.product for line in report.lines] == ["codespaces", "actions"]
    assert report.days == pytest.approx(1.0)


def test_header_only_document_is_empty():
    with pytest.raises(DocumentEmptyError) as excinfo:
        build_report(LEGACY_15_HEADER)
    assert excinfo.value.kind == "empty_document"


def test_header_with_trailing_newline_is_empty():
    with pytest.raises(DocumentEmptyError):
        build_report(SUMMARIZED_12_HEADER + "\n")


def test_empty_string_is_empty():
    with pytest.raises(DocumentEmptyError):
        build_report("")


def test_all_short_rows_is_no_valid_rows():
    doc = "\n".join([LEGACY_15_HEADER, "2024-01-01,actions,actions_linux", "2024-01-02,actions"])
    with pytest.raises(NoValidRowsError) as excinfo:
        build_report(doc)
    assert excinfo.value.kind == "no_valid_rows"
    assert [w.line_number for w in excinfo.value.warnings] == [2, 3]
    assert isinstance(excinfo.value, UsageReportError)


def test_bad_rows_are_skipped_and_recorded(caplog):
    doc = "\n".join(
        [
            SUMMARIZED_12_HEADER,
            "2024-06-01,actions,actions_linux,20,minutes,0.008,0.16,0,0.16,acme,acme/web,",
            "too,short",
            "",
            "garbage-date,actions,actions_linux,20,minutes,0.008,0.16,0,0.16,acme,acme/web,",
            "2024-06-03,actions,actions_linux,oops,minutes,0.008,0.16,0,0.16,acme,acme/web,",
        ]
    )
    with caplog.at_level(logging.WARNING, logger="usage_report.builder"):
        report = build_report(doc)
    assert len(report.lines) == 2
    assert [w.line_number for w in report.warnings] == [3, 5]
    assert "Skipping line 3" in caplog.text


def test_build_report_async_resolves_and_rejects(summarized_csv):
    report = asyncio.run(build_report_async(summarized_csv))
    assert len(report.lines) == 2
    with pytest.raises(DocumentEmptyError):
        asyncio.run(build_report_async("header-only"))


def test_read_report_file_tolerates_bom(tmp_path, summarized_csv):
    path = tmp_path / "usage.csv"
    path.write_text("\ufeff" + summarized_csv, encoding="utf-8")
    report = read_report_file(path)
    assert report.format_type == "summarized"
    with pytest.raises(FileNotFoundError):
        read_report_file(tmp_path / "missing.csv")
