"""
Main Streamlit application for the PDF library.

Entry point that assembles all components into the web interface:
index status, upload, search and results.

Note: This file is run directly by Streamlit, so it needs to
set up the Python path before importing other modules.
"""

import sys
from pathlib import Path

# Add project root to path for imports when run directly by Streamlit
_project_root = Path(__file__).parent.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import streamlit as st  # noqa: E402

from pdf_library.core import get_config, get_logger, PDFLibraryError, IndexNotReady  # noqa: E402
from pdf_library.library import LibraryService  # noqa: E402

from pdf_library.gui.state import (  # noqa: E402
    init_state,
    get_state,
    get_pagination_state,
    record_search,
    record_search_error,
)
from pdf_library.gui.components import (  # noqa: E402
    render_sidebar,
    render_search_bar,
    render_search_header,
    render_no_results,
    render_results,
    render_pagination,
)

logger = get_logger(__name__)


@st.cache_resource
def get_service() -> LibraryService:
    """
    Start the process-wide library service.

    Streamlit reruns this script on every interaction; the cached
    service and its index survive those reruns.
    """
    service = LibraryService()
    service.start()
    return service


def render_banner(title: str) -> None:
    """
    Render the main header banner.

    Args:
        title: Title text to display.
    """
    st.title(title)
    st.caption("Recherche plein texte dans vos documents PDF")


def main():
    """Main application entry point."""
    config = get_config()

    st.set_page_config(
        page_title=config.gui.page_title,
        page_icon="📄",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    init_state(config.gui.results_per_page)

    service = get_service()

    options = render_sidebar(service)

    render_banner(config.gui.page_title)

    query_text, submitted = render_search_bar()

    if submitted and query_text.strip():
        _execute_search(service, query_text, options)

    _render_results_section(service)


def _execute_search(service: LibraryService, query_text: str, options: dict) -> None:
    """
    Run the query and store its outcome in session state.

    Args:
        service: The running library service.
        query_text: Raw query from the search bar.
        options: Search options from the sidebar.
    """
    with st.spinner("Recherche en cours..."):
        try:
            results, stats = service.engine.search_with_stats(
                query_text,
                advanced=options["advanced_search"]
            )
        except IndexNotReady:
            record_search_error("L'index est en cours de construction, réessayez dans un instant.")
            return
        except PDFLibraryError as e:
            logger.warning(f"Search error: {e.message}")
            record_search_error(f"Erreur lors de la recherche : {e.message}")
            return

    record_search(results, stats)
    logger.info(f"Search '{query_text}': {stats.total_results} results")


def _render_results_section(service: LibraryService) -> None:
    """Render the outcome of the last search, or the welcome text."""
    error = get_state("search_error")
    if error:
        st.warning(error)
        return

    stats = get_state("search_stats")
    if not stats:
        _render_welcome()
        return

    render_search_header(stats)

    results = get_state("search_results", [])
    if not results:
        render_no_results(stats.query)
        return

    pagination = get_pagination_state(len(results))
    offset = pagination["offset"]

    st.divider()
    render_results(results[offset:offset + pagination["results_per_page"]], service, offset=offset)
    st.divider()
    render_pagination(pagination)


def _render_welcome() -> None:
    """Render welcome message when no search has been performed."""
    st.markdown("""
    ### Bienvenue dans la bibliothèque PDF

    Utilisez la barre de recherche ci-dessus pour trouver des documents dans votre collection.

    **Fonctionnalités :**
    - Recherche plein texte avec classement BM25
    - Ajout de documents depuis la barre latérale
    - Résumé rapide des documents trouvés
    - Opérateurs de recherche avancée

    Saisissez une requête pour commencer.
    """)


if __name__ == "__main__":
    main()
