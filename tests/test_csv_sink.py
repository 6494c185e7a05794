"""
Tests for the per-stock dump, the master summary CSV and plain table dumps.
"""

import csv

import pandas as pd

from csv_sink import (
    append_summary_row,
    init_summary_csv,
    render_stock_dump,
    save_stock_dump,
    save_table_csv,
    summary_header,
    summary_row,
)
from dom_extract import scrape_stock_data
from metric_normalize import build_metric_record
from metric_vocab import CANONICAL_METRICS, SUMMARY_COLUMNS


def read_summary(path):
    return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")


class TestStockDump:
    """Grouped Metric,Value dump for one stock."""

    def test_render_format(self):
        groups = {"Table_1": {"ROE": "46.74%"}, "URLData": {"URL": "https://x/y"}}
        assert render_stock_dump(groups) == (
            '\nTable_1\nMetric,Value\n"ROE","46.74%"\n\n'
            '\nURLData\nMetric,Value\n"URL","https://x/y"\n\n'
        )

    def test_quotes_are_doubled(self):
        out = render_stock_dump({"G": {'Say "hi"': 'a "b", c'}})
        assert '"Say ""hi""","a ""b"", c"' in out

    def test_save_stock_dump(self, tmp_path):
        path = tmp_path / "TCS.csv"
        save_stock_dump({"DivTable": {"Mcap": "₹1Cr"}}, str(path))
        assert path.read_text(encoding="utf-8").startswith("\nDivTable\nMetric,Value\n")


class TestSummaryCsv:
    """The master summary: header once, then one appended row per stock."""

    def test_header_only_after_init(self, tmp_path):
        path = str(tmp_path / "stocks_master.csv")
        init_summary_csv(path)
        df = read_summary(path)
        assert list(df.columns) == ["Stock", "URL", *CANONICAL_METRICS]
        assert df.empty

    def test_init_truncates_previous_run(self, tmp_path):
        path = str(tmp_path / "stocks_master.csv")
        init_summary_csv(path)
        append_summary_row({"Stock": "TCS"}, path)
        init_summary_csv(path)
        assert read_summary(path).empty

    def test_summary_row_blanks_missing_and_code(self):
        row = summary_row({"Stock": "X", "URL": "u", "ROE": "function(){}", "EPS": "5"})
        assert row[0] == "X"
        assert row[1] == "u"
        assert row[summary_header().index("ROE")] == ""
        assert row[summary_header().index("EPS")] == "5"
        assert len(row) == len(SUMMARY_COLUMNS) + 1

    def test_values_with_quotes_and_commas_round_trip(self, tmp_path):
        path = str(tmp_path / "stocks_master.csv")
        init_summary_csv(path)
        append_summary_row({"Stock": "M&M", "URL": "https://g/m?a=1,2", "Book Value": 'say "x"'}, path)
        df = read_summary(path)
        assert df.loc[0, "Stock"] == "M&M"
        assert df.loc[0, "URL"] == "https://g/m?a=1,2"
        assert df.loc[0, "Book Value"] == 'say "x"'

    def test_every_cell_is_quoted(self, tmp_path):
        path = tmp_path / "stocks_master.csv"
        init_summary_csv(str(path))
        append_summary_row({"Stock": "TCS", "EPS": "134.78"}, str(path))
        last = path.read_text(encoding="utf-8-sig").splitlines()[-1]
        assert last.startswith('"TCS","",')
        assert '"134.78"' in last

    def test_sample_page_end_to_end(self, tmp_path, sample_tbody_page):
        groups = scrape_stock_data(sample_tbody_page)
        groups["URLData"] = {"URL": "https://groww.in/stocks/tcs"}
        record = build_metric_record(groups, "TCS")

        path = str(tmp_path / "stocks_master.csv")
        init_summary_csv(path)
        append_summary_row(record, path)
        df = read_summary(path)

        assert len(df) == 1
        row = df.iloc[0]
        assert row["Stock"] == "TCS"
        assert row["URL"] == "https://groww.in/stocks/tcs"
        assert row["Market Cap"] == "₹1313764Cr"
        assert row["P/E Ratio"] == "26.94"
        assert row["Industry P/E"] == "29.38"
        assert row["Face Value"] == "1"
        assert row["ROCE"] == ""

    def test_rows_append_in_order(self, tmp_path):
        path = str(tmp_path / "stocks_master.csv")
        init_summary_csv(path)
        for sym in ("TCS", "INFY", "WIPRO"):
            append_summary_row({"Stock": sym}, path)
        assert read_summary(path)["Stock"].tolist() == ["TCS", "INFY", "WIPRO"]


class TestTableCsv:
    """Rectangular dumps written by the single-page table scraper."""

    def test_short_rows_are_padded(self, tmp_path):
        path = tmp_path / "table_1.csv"
        save_table_csv(["A", "B", "C"], [["1", "2", "3"], ["4"]], str(path))
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows == [["A", "B", "C"], ["1", "2", "3"], ["4", "", ""]]

    def test_no_header_row(self, tmp_path):
        path = tmp_path / "div_table_1.csv"
        save_table_csv([], [["x", "y"]], str(path))
        assert path.read_text(encoding="utf-8").splitlines() == ['"x","y"']
