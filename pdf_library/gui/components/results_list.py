"""
Result cards and page navigation for the search view.

A card shows rank, title, score and the highlighted snippet; its summary
toggle runs the summarize tool on the document.
"""

import streamlit as st
from typing import Dict, List

from ...core import PDFLibraryError
from ...library import LibraryService
from ...search import SearchResult
from ..state import get_state, set_state, toggle_summary
from ...utils import format_score

EXPANDED_CARDS = 3


def _snippet_markdown(snippet: str) -> str:
    """Turn the index's <mark> highlighting into markdown bold."""
    return snippet.replace("<mark>", "**").replace("</mark>", "**").replace("\n", " ")


def render_results(results: List[SearchResult], service: LibraryService, offset: int = 0) -> None:
    """
    Render one page of results.

    Args:
        results: Results of the current page.
        service: Library service, used for summaries.
        offset: Rank of the first result on this page, zero-based.
    """
    for rank, result in enumerate(results, start=offset + 1):
        with st.expander(f"**{rank}. {result.title}**", expanded=rank <= EXPANDED_CARDS):
            _render_card_body(result, rank, service)


def _render_card_body(result: SearchResult, rank: int, service: LibraryService) -> None:
    st.caption(f"Score : {format_score(result.score)} · {result.id}")

    if result.snippet:
        st.markdown(_snippet_markdown(result.snippet))

    card_key = f"{rank}_{result.id}"

    if st.button("Résumé", key=f"summary_btn_{card_key}"):
        toggle_summary(card_key)

    if not get_state("show_summary", {}).get(card_key, False):
        return

    try:
        summary = service.summarize(result.id)
    except PDFLibraryError as e:
        st.warning(f"Résumé indisponible : {e.message}")
        return

    if summary:
        st.markdown(f"> {summary}")
    else:
        st.info("Aucun texte à résumer.")


def render_pagination(pagination: Dict[str, int]) -> None:
    """
    Render previous/next controls.

    Args:
        pagination: Result of get_pagination_state(total_results).
    """
    current_page = pagination["current_page"]
    total_pages = pagination["total_pages"]

    if total_pages <= 1:
        return

    col_prev, col_label, col_next = st.columns([1, 2, 1])

    with col_prev:
        if st.button("Précédent", disabled=current_page <= 1, use_container_width=True):
            set_state("current_page", current_page - 1)
            st.rerun()

    with col_label:
        st.markdown(
            f"<div style='text-align:center'>Page {current_page} sur {total_pages}</div>",
            unsafe_allow_html=True
        )

    with col_next:
        if st.button("Suivant", disabled=current_page >= total_pages, use_container_width=True):
            set_state("current_page", current_page + 1)
            st.rerun()
