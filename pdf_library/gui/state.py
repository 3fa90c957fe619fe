"""
Streamlit session state for the PDF library interface.

Streamlit reruns the whole script on every interaction; anything that
must survive a rerun (the last search, the page shown, which summaries
are open) lives in st.session_state under the keys below.
"""

import math
import streamlit as st
from typing import Any, Dict, List, Optional

from ..search import SearchResult, SearchStats


DEFAULT_STATE = {
    "search_query": "",
    "search_results": [],
    "search_stats": None,
    "search_error": None,
    "show_summary": {},
    "results_per_page": 20,
    "current_page": 1,
    "advanced_search": False,
    "last_upload": None,
}

SEARCH_KEYS = ("search_results", "search_stats", "search_error", "current_page", "show_summary")


def init_state(results_per_page: int = None) -> None:
    """
    Fill in missing session keys, leaving existing ones untouched.

    Args:
        results_per_page: Initial page size, from the gui config.
    """
    defaults = dict(DEFAULT_STATE)
    if results_per_page:
        defaults["results_per_page"] = results_per_page

    for key, value in defaults.items():
        st.session_state.setdefault(key, value)


def get_state(key: str, default: Any = None) -> Any:
    return st.session_state.get(key, default)


def set_state(key: str, value: Any) -> None:
    st.session_state[key] = value


def clear_search_state() -> None:
    """Forget the last search, its page and its open summaries."""
    for key in SEARCH_KEYS:
        value = DEFAULT_STATE[key]
        st.session_state[key] = value.copy() if isinstance(value, (list, dict)) else value


def record_search(results: List[SearchResult], stats: SearchStats) -> None:
    """Store a completed search and show its first page."""
    clear_search_state()
    set_state("search_results", results)
    set_state("search_stats", stats)


def record_search_error(message: str) -> None:
    """Store a search failure in place of results."""
    clear_search_state()
    set_state("search_error", message)


def toggle_summary(result_id: str) -> bool:
    """Flip the summary panel of one result and return its new state."""
    shown = dict(get_state("show_summary", {}))
    shown[result_id] = not shown.get(result_id, False)
    set_state("show_summary", shown)
    return shown[result_id]


def get_pagination_state(total_results: Optional[int] = None) -> Dict[str, int]:
    """
    Page position of the result list.

    Args:
        total_results: When given, the current page is clamped to the
                       last page holding results.

    Returns:
        Dictionary with current_page, results_per_page, total_pages and offset.
    """
    per_page = max(1, get_state("results_per_page", 20))
    current_page = max(1, get_state("current_page", 1))
    total_pages = max(1, math.ceil(total_results / per_page)) if total_results else 1

    if total_results is not None and current_page > total_pages:
        current_page = total_pages
        set_state("current_page", current_page)

    return {
        "current_page": current_page,
        "results_per_page": per_page,
        "total_pages": total_pages,
        "offset": (current_page - 1) * per_page
    }
