#!/usr/bin/env python3
# ===== Single-page table scraper: every table (or table-like block) to its own CSV =====
import asyncio
import os
import sys
import tempfile
from pathlib import Path

from bs4 import BeautifulSoup

import playwright_bridge as bridge
from csv_sink import ensure_dir, save_table_csv
from dom_extract import as_soup
from scrape_config import CYAN, RED, RESET, TABLE_OUTPUT_DIR, YELLOW

# A div counts as a grid when more than this share of its children share the first child's class
GRID_CLASS_SHARE = 0.7


def _cell_texts(cells) -> list[str]:
    return [c.get_text().strip() for c in cells]


def parse_table(table) -> tuple[list[str], list[list[str]]]:
    """
    Headers come from thead, else from the first row (which is then skipped).
    Rows with no text at all are dropped.
    """
    rows = table.find_all("tr")
    header_row = table.select_one("thead tr")
    headers = []
    if header_row is not None:
        headers = _cell_texts(header_row.find_all(["th", "td"]))
        rows = [r for r in rows if r is not header_row]
    elif rows:
        headers = _cell_texts(rows[0].find_all(["th", "td"]))

    start = 0 if (header_row is not None or not headers) else 1
    data = []
    for row in rows[start:]:
        cells = _cell_texts(row.find_all(["td", "th"]))
        if any(cells):
            data.append(cells)
    return headers, data


def parse_tbody(tbody) -> tuple[list[str], list[list[str]]]:
    """Two-cell rows become Metric/Value pairs; other rows keep every td."""
    data = []
    for row in tbody.find_all("tr"):
        cells = _cell_texts(row.find_all("td"))
        if cells:
            data.append(cells)
    headers = ["Metric", "Value"] if data and len(data[0]) == 2 else []
    return headers, data


def _class_key(el) -> str:
    return " ".join(el.get("class") or [])


def find_div_grids(soup: BeautifulSoup) -> list:
    """Divs with more than two children, most of which share the first child's class."""
    grids = []
    for div in soup.find_all("div"):
        children = div.find_all(True, recursive=False)
        if len(children) <= 2:
            continue
        first_class = _class_key(children[0])
        similar = sum(1 for c in children if _class_key(c) == first_class)
        if similar > len(children) * GRID_CLASS_SHARE:
            grids.append(div)
    return grids


def parse_div_grid(div) -> list[list[str]]:
    data = []
    for row in div.find_all(True, recursive=False):
        cells = _cell_texts(row.find_all(True, recursive=False))
        if any(cells):
            data.append(cells)
    return data


def dump_tables(document, output_dir: str = TABLE_OUTPUT_DIR) -> list[str]:
    """
    Write every table on the page to table_<n>.csv. Pages without tables fall
    back to tbody blocks, then to div grids. Returns the written paths.
    """
    soup = as_soup(document)
    ensure_dir(output_dir)
    written = []

    tables = soup.find_all("table")
    print(f"🔎 Found {len(tables)} tables on the page.")
    if tables:
        for idx, table in enumerate(tables, start=1):
            headers, rows = parse_table(table)
            written.append(save_table_csv(headers, rows, os.path.join(output_dir, f"table_{idx}.csv")))
        return written

    print(f"{YELLOW}⚠ No standard tables found. Looking for table-like structures...{RESET}")
    tbodies = soup.find_all("tbody")
    if tbodies:
        for idx, tbody in enumerate(tbodies, start=1):
            headers, rows = parse_tbody(tbody)
            written.append(save_table_csv(headers, rows, os.path.join(output_dir, f"tbody_table_{idx}.csv")))
        return written

    grids = find_div_grids(soup)
    print(f"🔎 Found {len(grids)} potential div-based tables.")
    for idx, grid in enumerate(grids, start=1):
        written.append(save_table_csv([], parse_div_grid(grid), os.path.join(output_dir, f"div_table_{idx}.csv")))
    if not written:
        print(f"{YELLOW}⚠ No table-like structures found.{RESET}")
    return written


async def scrape_all_tables(url: str, output_dir: str = TABLE_OUTPUT_DIR) -> list[str]:
    p, browser, context = await bridge.init_browser()
    try:
        page = await context.new_page()
        await bridge.goto(page, url)
        html = await page.content()
    finally:
        await bridge.shutdown(p, browser)
    return dump_tables(html, output_dir)


async def process_local_html_file(html_file_path: str, output_dir: str = TABLE_OUTPUT_DIR) -> list[str]:
    return await scrape_all_tables(Path(html_file_path).resolve().as_uri(), output_dir)


def wrap_html(html_content: str) -> str:
    if "<html" in html_content:
        return html_content
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n<title>Table Data</title>\n</head>\n"
        f"<body>\n{html_content}\n</body>\n</html>\n"
    )


async def process_html_content(html_content: str, output_dir: str = TABLE_OUTPUT_DIR) -> list[str]:
    """Render an HTML snippet through the browser via a temporary file, then dump its tables."""
    fd, temp_path = tempfile.mkstemp(suffix=".html", prefix="table_scraper_")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(wrap_html(html_content))
        return await process_local_html_file(temp_path, output_dir)
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(f"{RED}❌ Usage: table_scraper.py <url-or-html-file> [output_dir]{RESET}")
        sys.exit(1)
    target = argv[0]
    output_dir = argv[1] if len(argv) > 1 else TABLE_OUTPUT_DIR
    if os.path.isfile(target):
        written = asyncio.run(process_local_html_file(target, output_dir))
    else:
        written = asyncio.run(scrape_all_tables(target, output_dir))
    print(f"\n{CYAN}📦 {len(written)} file(s) written to {output_dir}{RESET}")
    return written


if __name__ == "__main__":
    main()
