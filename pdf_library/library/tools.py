"""
Named tool operations with JSON envelopes.

Each tool takes a flat parameter mapping (as received from a form, a query
string or the command line) and answers {"ok": true, "result": ...} or
{"ok": false, "error": ..., "type": ...}.

Every tool answers under the single key "result", search included: a
search envelope is {"ok": true, "result": [{id, score, title}, ...]},
not a separate "results" key.
"""

from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..core import get_logger, InvalidParameter, PDFLibraryError, UnknownTool
from .service import LibraryService

logger = get_logger(__name__)


ToolHandler = Callable[[LibraryService, Mapping[str, Any]], Any]

TRUE_VALUES = ("1", "true", "yes", "on")


def _int_param(params: Mapping[str, Any], key: str, default: Optional[int] = None) -> Optional[int]:
    """Read an optional integer parameter."""
    value = params.get(key)
    if value is None or value == "":
        return default

    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"Parameter '{key}' must be an integer, got {value!r}", {"parameter": key})


def _bool_param(params: Mapping[str, Any], key: str, default: bool = False) -> bool:
    """Read an optional boolean flag."""
    value = params.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _list_pdfs(service: LibraryService, params: Mapping[str, Any]) -> List[Dict[str, str]]:
    return service.list_documents()


def _get_pdf_metadata(service: LibraryService, params: Mapping[str, Any]) -> Dict:
    return service.get_metadata(params.get("file"))


def _extract_pdf_text(service: LibraryService, params: Mapping[str, Any]) -> Dict:
    return {"text": service.extract_text(params.get("file"))}


def _search_in_pdfs(service: LibraryService, params: Mapping[str, Any]) -> List[Dict]:
    results = service.search(
        params.get("q") or "",
        advanced=_bool_param(params, "advanced"),
        limit=_int_param(params, "limit")
    )
    return [result.to_dict() for result in results]


def _summarize_pdf(service: LibraryService, params: Mapping[str, Any]) -> Dict:
    sentences = _int_param(params, "sentences", service.config.library.summary_sentences)
    return {"summary": service.summarize(params.get("file"), sentences)}


def _split_pdf(service: LibraryService, params: Mapping[str, Any]) -> Dict:
    result, _ = service.split_pdf(
        params.get("file"),
        start_page=_int_param(params, "start_page", 1),
        end_page=_int_param(params, "end_page")
    )
    return result


def _convert_pdf_to_epub(service: LibraryService, params: Mapping[str, Any]) -> Dict:
    return service.convert_to_epub(params.get("file"), params.get("title"))


def _upload_pdf(service: LibraryService, params: Mapping[str, Any]) -> Dict:
    result, _ = service.add_document(params.get("source"), params.get("filename"))
    return result


def _remove_pdf(service: LibraryService, params: Mapping[str, Any]) -> Dict:
    result, _ = service.remove_document(params.get("file"))
    return result


def _rebuild_index(service: LibraryService, params: Mapping[str, Any]) -> Dict:
    wait = _bool_param(params, "wait", default=True)
    future = service.rebuild_index(wait=wait)

    if not wait:
        return {"queued": True}

    snapshot = future.result()
    return {"generation": snapshot.generation, "documents": len(snapshot)}


def _health(service: LibraryService, params: Mapping[str, Any]) -> Dict:
    return service.health()


TOOLS: Dict[str, ToolHandler] = {
    "list_pdfs": _list_pdfs,
    "get_pdf_metadata": _get_pdf_metadata,
    "extract_pdf_text": _extract_pdf_text,
    "search_in_pdfs": _search_in_pdfs,
    "summarize_pdf": _summarize_pdf,
    "split_pdf": _split_pdf,
    "convert_pdf_to_epub": _convert_pdf_to_epub,
    "upload_pdf": _upload_pdf,
    "remove_pdf": _remove_pdf,
    "rebuild_index": _rebuild_index,
    "health": _health,
}


def get_tool(name: str) -> ToolHandler:
    """
    Look up a tool handler by name.

    Raises:
        UnknownTool: If no tool has that name.
    """
    try:
        return TOOLS[name]
    except KeyError:
        raise UnknownTool(f"Unknown tool: {name}", {"available": sorted(TOOLS)})


def run_tool(service: LibraryService, name: str, params: Mapping[str, Any] = None) -> Dict:
    """
    Run a tool and wrap its outcome in an envelope.

    Args:
        service: Library service to operate on.
        name: Tool name, e.g. "search_in_pdfs".
        params: Tool parameters.

    Returns:
        {"ok": True, "result": ...} on success, otherwise
        {"ok": False, "error": message, "type": exception class name}.
    """
    params = params or {}

    try:
        result = get_tool(name)(service, params)

    except PDFLibraryError as e:
        logger.info(f"Tool {name} failed: {e.__class__.__name__}: {e.message}")
        return {"ok": False, "error": e.message, "type": e.__class__.__name__}

    except FutureTimeout:
        logger.warning(f"Tool {name} timed out waiting for the index rebuild")
        return {"ok": False, "error": "Timed out waiting for the index rebuild", "type": "Timeout"}

    except Exception as e:
        logger.error(f"Tool {name} raised an unexpected error: {e}", exc_info=True)
        return {"ok": False, "error": str(e), "type": e.__class__.__name__}

    return {"ok": True, "result": result}


if __name__ == "__main__":
    import json

    with LibraryService() as service:
        service.start().result()
        print(json.dumps(run_tool(service, "list_pdfs"), indent=2, ensure_ascii=False))
        print(json.dumps(run_tool(service, "health"), indent=2, ensure_ascii=False))
