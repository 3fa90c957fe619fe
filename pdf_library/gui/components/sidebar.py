"""
Sidebar component for the PDF library.

Displays index status, the document list, upload, search options,
and help text.
"""

import streamlit as st
import tempfile
from pathlib import Path
from typing import Dict

from ...core import PDFLibraryError
from ...library import LibraryService
from ...utils import get_file_size_mb, truncate_text
from ..state import get_state, set_state, clear_search_state


STATE_LABELS = {
    "building": "Construction en cours",
    "ready": "Prêt",
    "stale": "Mise à jour en cours"
}


def render_sidebar(service: LibraryService) -> Dict:
    """
    Render the sidebar with status, documents and options.

    Args:
        service: The running library service.

    Returns:
        Dictionary of selected options.
    """
    with st.sidebar:
        st.title("Bibliothèque PDF")

        st.subheader("Index")
        _render_status(service)

        st.divider()

        st.subheader("Documents")
        _render_documents(service)
        _render_upload(service)

        st.divider()

        st.subheader("Options")
        options = _render_options()

        st.divider()

        _render_help()

    return options


def _render_status(service: LibraryService) -> None:
    """Display index state and statistics."""
    health = service.health()
    snapshot = service.snapshot()

    col1, col2 = st.columns(2)

    with col1:
        st.metric("Documents indexés", f"{health['documents']:,}")

    with col2:
        st.metric("Génération", health["generation"])

    st.caption(f"État : {STATE_LABELS.get(health['index_state'], health['index_state'])}")

    if snapshot is not None:
        stats = snapshot.stats
        st.caption(f"Dernière mise à jour : {snapshot.built_at:%Y-%m-%d %H:%M}")
        if stats.files_failed or stats.files_empty:
            st.caption(
                f"{stats.files_failed} en échec, {stats.files_empty} sans texte"
            )

    error = service.manager.last_error
    if error is not None:
        st.warning(f"Dernière reconstruction en échec : {error}")

    if st.button("Reconstruire l'index", use_container_width=True):
        service.manager.request_rebuild(reason="gui")
        st.toast("Reconstruction de l'index demandée")


def _render_documents(service: LibraryService) -> None:
    """List the store contents."""
    try:
        documents = service.list_documents()
    except PDFLibraryError as e:
        st.warning(f"Impossible de lire le dossier : {e.message}")
        return

    with st.expander(f"{len(documents)} fichiers", expanded=False):
        for doc in documents:
            size_mb = get_file_size_mb(service.pdf_dir / doc["name"])
            st.caption(f"{truncate_text(doc['name'], 40)} ({size_mb:.1f} Mo)")


def _render_upload(service: LibraryService) -> None:
    """Add a PDF to the store."""
    uploaded = st.file_uploader("Ajouter un PDF", type=["pdf"], key="pdf_uploader")

    if uploaded is None or get_state("last_upload") == uploaded.file_id:
        return

    with tempfile.TemporaryDirectory() as tmp_dir:
        tmp_path = Path(tmp_dir) / "upload.pdf"
        tmp_path.write_bytes(uploaded.getbuffer())

        try:
            result, _ = service.add_document(tmp_path, uploaded.name)
        except PDFLibraryError as e:
            st.error(f"Échec de l'ajout : {e.message}")
            return

    set_state("last_upload", uploaded.file_id)
    clear_search_state()
    st.success(f"{result['filename']} ajouté, l'index est en cours de mise à jour")


def _render_options() -> Dict:
    """Render search option controls."""
    results_per_page = st.slider(
        "Résultats par page",
        min_value=10,
        max_value=100,
        value=get_state("results_per_page", 20),
        step=10,
        key="results_slider"
    )
    set_state("results_per_page", results_per_page)

    advanced_search = st.checkbox(
        "Recherche avancée",
        value=get_state("advanced_search", False),
        key="advanced_checkbox",
        help="Activer les opérateurs OR, AND, NOT et la recherche de phrases exactes"
    )
    set_state("advanced_search", advanced_search)

    return {
        "results_per_page": results_per_page,
        "advanced_search": advanced_search
    }


def _render_help() -> None:
    """Display search help text."""
    with st.expander("Aide à la recherche"):
        st.markdown("""
        **Recherche simple :**
        - Tapez des mots pour trouver les documents contenant l'un d'eux
        - La recherche ignore les accents et la casse
        - Seuls les premiers caractères de chaque document sont indexés

        **Recherche avancée :**
        - `mot1 OR mot2` : l'un ou l'autre terme
        - `mot1 AND mot2` : les deux termes
        - `mot1 NOT mot2` : exclut un terme
        - `"phrase exacte"` : la phrase exacte
        - `prefixe*` : les mots commençant par le préfixe

        **Exemples :**
        - `aviation civile`
        - `reglement OR directive`
        - `securite NOT maritime`
        - `"controle aerien"`
        """)
