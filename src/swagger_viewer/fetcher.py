"""Document fetcher — downloads, validates and bundles an API document."""

import httpx
import structlog

from swagger_viewer.parser.swagger import DOCUMENT_ERRORS, decode_document, validate_document

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "swagger-viewer/1.0"

logger = structlog.get_logger(__name__)


async def fetch_document(
    url: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> dict | None:
    """Fetch the document at url.

    Returns the validated document with internal references resolved, or
    None when anything goes wrong (network, decoding, validation). The
    failure is logged, not raised.
    """
    try:
        text = await _get_text(url, client, timeout)
        # cheap shape check (JSON or YAML object with a version field) before the
        # validator parses the text itself
        decode_document(text)
        doc = validate_document(text)
    except httpx.HTTPError as e:
        logger.error("Error fetching swagger doc", url=url, error=str(e))
        return None
    except DOCUMENT_ERRORS as e:
        logger.error("Invalid swagger doc", url=url, error=str(e))
        return None

    logger.info("Fetched swagger doc", url=url, paths=len(doc.get("paths") or {}))
    return doc


async def _get_text(url: str, client: httpx.AsyncClient | None, timeout: float) -> str:
    if client is None:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
            return await _get_text(url, own_client, timeout)

    response = await client.get(url, headers={"User-Agent": USER_AGENT, "Accept": "application/json"})
    response.raise_for_status()
    return response.text
