"""
Search input and result header.

The query is submitted through a form, so pressing Enter and clicking
the button behave the same.
"""

import streamlit as st
from typing import Tuple

from ...search import SearchStats
from ..state import get_state, set_state


def render_search_bar() -> Tuple[str, bool]:
    """
    Render the query form.

    Returns:
        Tuple of (query_text, was_submitted).
    """
    with st.form("search_form", clear_on_submit=False, border=False):
        col_input, col_button = st.columns([5, 1])

        with col_input:
            query = st.text_input(
                "Rechercher",
                value=get_state("search_query", ""),
                placeholder="Saisissez vos termes de recherche...",
                label_visibility="collapsed"
            )

        with col_button:
            submitted = st.form_submit_button("Rechercher", type="primary", use_container_width=True)

    if submitted:
        set_state("search_query", query)

    return query, submitted


def render_search_header(stats: SearchStats) -> None:
    """Show result count, timing and the index generation searched."""
    col_count, col_meta = st.columns([3, 2])

    with col_count:
        st.markdown(f"**{stats.total_results:,}** résultats pour « {stats.query} »")

    with col_meta:
        st.caption(
            f"{stats.execution_time_ms:.0f} ms · génération {stats.generation} "
            f"· {stats.documents_indexed} documents indexés"
        )


def render_no_results(query: str) -> None:
    st.info(f"Aucun résultat pour « {query} »")

    with st.expander("Suggestions"):
        st.markdown("""
        - Vérifiez l'orthographe
        - Essayez d'autres mots-clés
        - En recherche avancée, cherchez un préfixe (`mot*`)
        - Seul le début de chaque document long est indexé
        """)
