# ===== Key normalization + value sanitizing =====
import re

from metric_vocab import (
    CANONICAL_METRICS,
    CODE_FRAGMENTS,
    KEY_ALIASES,
    STOCK_COLUMN,
    URL_COLUMN,
)

# Exact lookup: aliases plus canonical names mapping to themselves
_EXACT = dict(KEY_ALIASES)
for _metric in CANONICAL_METRICS:
    _EXACT.setdefault(_metric, _metric)


def _longest_first(pairs):
    # sorted() is stable so declaration order survives within a length
    return sorted(pairs, key=lambda pair: len(pair[0]), reverse=True)


# Substring passes, tried in order: every alias before any canonical name
_ALIAS_PASS = _longest_first(KEY_ALIASES.items())
_CANONICAL_PASS = _longest_first((m, m) for m in CANONICAL_METRICS)

_WS_RE = re.compile(r"\s+")


def normalize_key(raw_key):
    """
    Map a scraped label onto a canonical metric name.

    Exact spelling first, then any alias contained in the label, then any
    canonical name contained in it. Within a pass the longest spelling wins.
    Returns None when nothing matches.
    """
    if not isinstance(raw_key, str):
        return None
    key = raw_key.strip()
    if not key:
        return None
    if key in _EXACT:
        return _EXACT[key]
    for spelling_pass in (_ALIAS_PASS, _CANONICAL_PASS):
        for spelling, canonical in spelling_pass:
            if spelling in key:
                return canonical
    return None


def looks_like_code(value: str) -> bool:
    return any(fragment in value for fragment in CODE_FRAGMENTS)


def sanitize_value(raw_value, strip_commas: bool = True):
    """Clean a scraped value; None when empty or when it looks like script text."""
    if not isinstance(raw_value, str):
        return None
    if looks_like_code(raw_value):
        return None
    value = raw_value.replace(",", "") if strip_commas else raw_value
    value = _WS_RE.sub(" ", value).strip()
    return value or None


def merge_candidates(record, candidates, strip_commas: bool = True):
    """
    Fold raw (key, value) candidates into record in place.

    First writer wins: a canonical key already present is never overwritten.
    """
    for raw_key, raw_value in candidates:
        canonical = normalize_key(raw_key)
        if not canonical or canonical in record:
            continue
        value = sanitize_value(raw_value, strip_commas=strip_commas)
        if value is None:
            continue
        record[canonical] = value
    return record


def build_metric_record(groups, stock: str) -> dict:
    """
    Build the aggregate summary record for one stock from its raw groups.

    Groups are consulted in their scrape order; URL comes from the URLData group.
    """
    url = groups.get("URLData", {}).get(URL_COLUMN, "")
    record = {STOCK_COLUMN: stock, URL_COLUMN: url}
    metrics = {}
    for group_name, entries in groups.items():
        if group_name == "URLData":
            continue
        merge_candidates(metrics, entries.items())
    for metric in CANONICAL_METRICS:
        if metric in metrics:
            record[metric] = metrics[metric]
    return record
