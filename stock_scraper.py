#!/usr/bin/env python3
# ===== Stock fundamentals scraper: search each ticker, extract, append to CSV =====
import asyncio
import os
import sys
from datetime import datetime

from playwright.async_api import Error as PlaywrightError

import playwright_bridge as bridge
from csv_sink import append_summary_row, ensure_dir, init_summary_csv, save_stock_dump
from dom_extract import scrape_stock_data
from metric_normalize import build_metric_record
from metric_vocab import SUMMARY_COLUMNS, URL_COLUMN
from scrape_config import (
    BASE_URL,
    CAPTURE_PDF,
    CAPTURE_SCREENSHOT,
    CYAN,
    GREEN,
    INTER_STOCK_DELAY,
    OUTPUT_DIR,
    PAGE_SETTLE_TIME,
    PDF_SUBDIR,
    RED,
    RESET,
    SUMMARY_CSV_NAME,
    YELLOW,
)
from stock_universe import ALL_STOCKS, load_universe_csv, parse_ticker_input


def ts_now() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def safe_filename(symbol: str) -> str:
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in symbol)


async def open_stock_page(page, base_url: str, symbol: str) -> str:
    """Search for one ticker from the base page and land on its stock page. Returns the URL."""
    await bridge.goto(page, base_url)
    await bridge.find_and_click_search(page)
    await bridge.type_in_search_input(page, symbol)
    await bridge.click_search_result(page, symbol)
    await bridge.settle(page, PAGE_SETTLE_TIME)
    return page.url


async def scrape_one_stock(page, base_url: str, symbol: str, output_dir: str, summary_csv: str,
                           capture_pdf: bool = CAPTURE_PDF, capture_screenshot: bool = CAPTURE_SCREENSHOT) -> dict:
    stock_url = await open_stock_page(page, base_url, symbol)
    print(f"🔗 Stock URL: {stock_url}")
    name = safe_filename(symbol)

    if capture_pdf:
        await bridge.save_pdf(page, os.path.join(output_dir, PDF_SUBDIR, f"{name}.pdf"))

    html = await page.content()
    groups = scrape_stock_data(html)
    groups["URLData"] = {URL_COLUMN: stock_url}

    save_stock_dump(groups, os.path.join(output_dir, f"{name}.csv"))
    record = build_metric_record(groups, symbol)
    append_summary_row(record, summary_csv)

    if capture_screenshot:
        await bridge.save_screenshot(page, os.path.join(output_dir, f"{name}.png"))
    return record


async def scrape_stocks_data(stocks, base_url: str = BASE_URL, output_dir: str = OUTPUT_DIR,
                             capture_pdf: bool = CAPTURE_PDF, capture_screenshot: bool = CAPTURE_SCREENSHOT):
    """
    Process every ticker in one browser session, strictly one after another.

    A ticker whose navigation/search/click fails is reported and skipped.
    Returns (records, failed_tickers).
    """
    ensure_dir(output_dir)
    if capture_pdf:
        ensure_dir(os.path.join(output_dir, PDF_SUBDIR))
    summary_csv = init_summary_csv(os.path.join(output_dir, SUMMARY_CSV_NAME), SUMMARY_COLUMNS)

    records, failed = [], []
    p, browser, context = await bridge.init_browser()
    try:
        page = await context.new_page()
        await bridge.goto(page, base_url)
        await bridge.accept_cookies(page)
        if capture_pdf:
            await bridge.save_pdf(page, os.path.join(output_dir, PDF_SUBDIR, "homepage.pdf"))

        for idx, symbol in enumerate(stocks, start=1):
            print(f"\n{CYAN}[{idx}/{len(stocks)}] → {symbol}{RESET}")
            try:
                record = await scrape_one_stock(page, base_url, symbol, output_dir, summary_csv,
                                                capture_pdf=capture_pdf, capture_screenshot=capture_screenshot)
                records.append(record)
                found = sum(1 for c in SUMMARY_COLUMNS[1:] if record.get(c))
                print(f"{GREEN}✅ {symbol}: {found}/{len(SUMMARY_COLUMNS) - 1} metrics{RESET}")
            except (PlaywrightError, RuntimeError) as e:
                print(f"{RED}❌ Error processing {symbol}: {e}{RESET}")
                failed.append(symbol)
                continue
            print(f"{CYAN}⏳ Cooling down {INTER_STOCK_DELAY:.1f}s before next stock...{RESET}")
            await asyncio.sleep(INTER_STOCK_DELAY)
    # asyncio.run turns Ctrl-C into cancellation of this task
    except (KeyboardInterrupt, asyncio.CancelledError):
        print(f"{YELLOW}⚠ Interrupted by user. Shutting down gracefully...{RESET}")
    finally:
        await bridge.shutdown(p, browser)

    if failed:
        fail_path = os.path.join(output_dir, f"failed_tickers_{ts_now()}.txt")
        with open(fail_path, "w", encoding="utf-8") as f:
            f.write("\n".join(failed))
        print(f"{RED}📜 Failed tickers saved to: {fail_path}{RESET}")

    print(f"\n{GREEN}Done.{RESET} {GREEN}OK={len(records)}{RESET}, {RED}FAIL={len(failed)}{RESET}, TOTAL={len(stocks)}")
    print(f"{CYAN}Master data available in:{RESET} {summary_csv}")
    return records, failed


def resolve_jobs(argv, prompt=input) -> list[str]:
    """Tickers from argv (symbols or a CSV path), else from an interactive prompt."""
    if argv:
        if len(argv) == 1 and argv[0].lower().endswith(".csv"):
            if not os.path.exists(argv[0]):
                print(f"{RED}❌ Ticker CSV not found: {argv[0]}{RESET}")
                sys.exit(1)
            jobs = load_universe_csv(argv[0])
            print(f"{CYAN}🗃️ CSV mode: {len(jobs)} unique ticker(s) from: {argv[0]}{RESET}")
            return jobs
        jobs = parse_ticker_input(" ".join(argv))
        print(f"{CYAN}🗂️ Manual mode: {len(jobs)} ticker(s) queued.{RESET}")
        return jobs

    user_inp = prompt(
        "📈 Enter stock ticker(s) (comma-separated) or press Enter for the built-in Nifty list: "
    ).strip()
    if user_inp:
        jobs = parse_ticker_input(user_inp)
        print(f"{CYAN}🗂️ Manual mode: {len(jobs)} ticker(s) queued.{RESET}")
        return jobs

    jobs = list(ALL_STOCKS)
    test_choice = prompt(f"🧪 Scrape all tickers ({len(jobs)}) or first 5 for testing? (all/5): ").strip().lower()
    if test_choice == "5":
        jobs = jobs[:5]
        print(f"{CYAN}🧪 Test mode: Limited to first {len(jobs)} ticker(s).{RESET}")
    return jobs


def main(argv=None):
    jobs = resolve_jobs(sys.argv[1:] if argv is None else argv)
    if not jobs:
        print(f"{RED}❌ No valid tickers. Nothing to do.{RESET}")
        sys.exit(1)

    print(f"{CYAN}🚀 Starting scrape of {len(jobs)} ticker(s). Pacing {INTER_STOCK_DELAY:.1f}s between stocks.{RESET}")
    if "ipykernel" in sys.modules:
        import nest_asyncio
        nest_asyncio.apply()
        return asyncio.get_event_loop().run_until_complete(scrape_stocks_data(jobs))
    return asyncio.run(scrape_stocks_data(jobs))


if __name__ == "__main__":
    main()
