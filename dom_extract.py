# ===== DOM extraction strategies (pure, over a BeautifulSoup tree) =====
from bs4 import BeautifulSoup, Tag

from metric_normalize import merge_candidates
from metric_vocab import (
    CANONICAL_METRICS,
    CURRENT_PRICE_SELECTOR,
    KEY_MARKERS,
    NON_CONTENT_TAGS,
    ROW_MARKERS,
    TRADING_METRICS,
    VALUE_MARKERS,
)


def as_soup(document) -> BeautifulSoup:
    if isinstance(document, BeautifulSoup):
        return document
    return BeautifulSoup(document or "", "html.parser")


def _text(el) -> str:
    return el.get_text().strip()


def _class_string(el: Tag) -> str:
    classes = el.get("class") or []
    if isinstance(classes, str):
        return classes
    return " ".join(classes)


def _attr_has(el: Tag, markers) -> bool:
    cls = _class_string(el)
    el_id = el.get("id") or ""
    return any(m in cls or m in el_id for m in markers)


def _element_children(el):
    return el.find_all(True, recursive=False)


# ===== 1. Structured tables =====
def table_pairs(container: Tag) -> dict:
    """Key/value pairs from every row with at least two td cells."""
    pairs = {}
    for row in container.find_all("tr"):
        cells = row.find_all("td")
        if len(cells) >= 2:
            pairs.setdefault(_text(cells[0]), _text(cells[1]))
    return pairs


def extract_tables(soup: BeautifulSoup) -> dict:
    groups = {}
    for idx, table in enumerate(soup.find_all("table"), start=1):
        pairs = table_pairs(table)
        if pairs:
            groups[f"Table_{idx}"] = pairs
    for idx, tbody in enumerate(soup.find_all("tbody"), start=1):
        pairs = table_pairs(tbody)
        if pairs:
            groups[f"TableBody_{idx}"] = pairs
    return groups


# ===== 2. Labeled div rows =====
def extract_div_table(soup: BeautifulSoup) -> dict:
    pairs = {}
    for row in soup.find_all("div"):
        if not _attr_has(row, ROW_MARKERS):
            continue
        key_el = row.find(lambda t: t.name == "div" and _attr_has(t, KEY_MARKERS))
        value_el = row.find(lambda t: t.name == "div" and _attr_has(t, VALUE_MARKERS))
        if key_el is not None and value_el is not None:
            pairs.setdefault(_text(key_el), _text(value_el))
    return pairs


# ===== 3/4. Nearest non-label neighbour =====
def nearest_value(el: Tag, labels):
    """
    First element after el (then among its parent's children) whose text is
    non-empty and names none of the labels.
    """
    def usable(candidate):
        text = _text(candidate)
        return bool(text) and not any(label in text for label in labels)

    for sibling in el.find_next_siblings(True):
        if usable(sibling):
            return sibling

    parent = el.parent
    # The document root stands in for a missing parentElement
    if parent is None or isinstance(parent, BeautifulSoup):
        return None
    for child in _element_children(parent):
        if child is not el and usable(child):
            return child
    return None


def _content_elements(soup: BeautifulSoup):
    root = soup.body or soup
    for el in root.find_all(True):
        if el.name in NON_CONTENT_TAGS or el.find_parent(list(NON_CONTENT_TAGS)):
            continue
        yield el


def _innermost(el: Tag, name: str) -> bool:
    return not any(name in child.get_text() for child in _element_children(el))


def extract_financial_metrics(soup: BeautifulSoup, metrics=CANONICAL_METRICS) -> dict:
    found = {}
    elements = list(_content_elements(soup))
    for metric in metrics:
        for el in elements:
            if metric not in el.get_text() or not _innermost(el, metric):
                continue
            value_el = nearest_value(el, metrics)
            if value_el is not None:
                found[metric] = _text(value_el)
                break
    return found


def extract_trading_data(soup: BeautifulSoup) -> dict:
    labels = tuple(TRADING_METRICS)
    found = {}
    for metric, markers in TRADING_METRICS.items():
        for marker in markers:
            if metric in found:
                break
            for el in soup.find_all(lambda t: marker in _class_string(t) or marker in (t.get("id") or "")):
                if metric not in el.get_text() and not _attr_has(el, markers):
                    continue
                value_el = nearest_value(el, labels)
                if value_el is not None:
                    found[metric] = _text(value_el)
                    break
    return found


def extract_current_price(soup: BeautifulSoup) -> dict:
    el = soup.select_one(CURRENT_PRICE_SELECTOR)
    if el is None:
        return {}
    return {"Current Price": _text(el)}


# ===== Raw groups for one rendered stock page =====
def scrape_stock_data(document) -> dict:
    """
    Run every strategy over a rendered page and return the raw groups in
    trust order: tables, tbodies, div rows, free-text metrics, current price,
    trading info.
    """
    soup = as_soup(document)
    groups = extract_tables(soup)

    div_table = extract_div_table(soup)
    if div_table:
        groups["DivTable"] = div_table

    financial = extract_financial_metrics(soup)
    if financial:
        groups["FinancialMetrics"] = financial

    price = extract_current_price(soup)
    if price:
        groups["CurrentPrice"] = price

    trading = extract_trading_data(soup)
    if trading:
        groups["TradingData"] = trading

    return groups


def extract(document) -> dict:
    """
    Canonical metric -> value for one page.

    Later strategies only fill keys the earlier ones missed. Values are
    whitespace-normalized but otherwise left as scraped.
    """
    metrics = {}
    for entries in scrape_stock_data(document).values():
        merge_candidates(metrics, entries.items(), strip_commas=False)
    return metrics
