# ===== CSV writers: per-stock dump, master summary, plain table dumps =====
import csv
import os

import pandas as pd

from metric_normalize import looks_like_code
from metric_vocab import STOCK_COLUMN, SUMMARY_COLUMNS
from scrape_config import GREEN, RESET


def ensure_dir(path: str) -> str:
    os.makedirs(path, exist_ok=True)
    return path


def _quote(text) -> str:
    return '"' + str(text).replace('"', '""') + '"'


def render_stock_dump(groups) -> str:
    """Blank line, group name, Metric,Value header, one quoted pair per entry."""
    parts = []
    for group_name, entries in groups.items():
        parts.append(f"\n{group_name}\n")
        parts.append("Metric,Value\n")
        for key, value in entries.items():
            parts.append(f"{_quote(key)},{_quote(value)}\n")
        parts.append("\n")
    return "".join(parts)


def save_stock_dump(groups, file_path: str) -> str:
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(render_stock_dump(groups))
    print(f"📄 Data saved to {file_path}")
    return file_path


def summary_header(columns=SUMMARY_COLUMNS) -> list:
    return [STOCK_COLUMN, *columns]


def init_summary_csv(file_path: str, columns=SUMMARY_COLUMNS) -> str:
    """(Re)create the master summary with just its header row."""
    pd.DataFrame(columns=summary_header(columns)).to_csv(file_path, index=False, encoding="utf-8-sig")
    return file_path


def summary_row(record, columns=SUMMARY_COLUMNS) -> list:
    row = [record.get(STOCK_COLUMN, "")]
    for column in columns:
        value = record.get(column) or ""
        if looks_like_code(value):
            value = ""
        row.append(value)
    return row


def append_summary_row(record, file_path: str, columns=SUMMARY_COLUMNS) -> None:
    df = pd.DataFrame([summary_row(record, columns)], columns=summary_header(columns))
    df.to_csv(
        file_path,
        mode="a",
        header=False,
        index=False,
        encoding="utf-8-sig",
        quoting=csv.QUOTE_NONNUMERIC,
    )


def save_table_csv(headers, rows, file_path: str) -> str:
    """Write a rectangular dump; every cell quoted, short rows padded with ''."""
    width = max([len(headers)] + [len(r) for r in rows]) if (headers or rows) else 0
    padded = [list(r) + [""] * (width - len(r)) for r in rows]
    header = (list(headers) + [""] * (width - len(headers))) if headers else False
    df = pd.DataFrame(padded, columns=range(width))
    df.to_csv(file_path, index=False, header=header, encoding="utf-8", quoting=csv.QUOTE_ALL)
    print(f"{GREEN}✅ Table data saved to {file_path}{RESET}")
    return file_path
