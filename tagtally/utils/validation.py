from typing import Any, List

from tagtally.core.exceptions import FormatError, ContentError
from tagtally.utils.constants import URLS_FIELD, ALLOWED_PAYLOAD_KEYS, TIKTOK_SHARE_PREFIX


def validate_formatting(payload: Any, strict: bool = True) -> bool:
    if not isinstance(payload, dict):
        return False
    if URLS_FIELD not in payload:
        return False
    # strict mode only allows the canonical {api_key, urls} body
    if strict and not set(payload.keys()) <= ALLOWED_PAYLOAD_KEYS:
        return False

    urls = payload[URLS_FIELD]
    if not isinstance(urls, list) or not all(isinstance(url, str) for url in urls):
        return False
    return True


def validate_content(urls: List[str], prefix: str = TIKTOK_SHARE_PREFIX) -> bool:
    return all(url.startswith(prefix) for url in urls)


def validate_payload(payload: Any, strict: bool = True, prefix: str = TIKTOK_SHARE_PREFIX) -> List[str]:
    """
    Check the shape and content of a request body.

    Args:
        payload: The decoded JSON body.
        strict: Reject keys other than api_key and urls.
        prefix: Literal every url has to start with.

    Returns:
        The list of post urls, in request order.

    Raises:
        FormatError: The body is not an object holding a ``urls`` array of strings.
        ContentError: At least one url does not start with ``prefix``.
    """
    if not validate_formatting(payload, strict=strict):
        raise FormatError()
    urls = payload[URLS_FIELD]
    if not validate_content(urls, prefix=prefix):
        raise ContentError()
    return list(urls)
