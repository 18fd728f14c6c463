"""Map driver exceptions onto coarse, provider-agnostic error categories."""

import logging

logger = logging.getLogger(__name__)


def classify_error(exc: BaseException) -> str:
    """Classify an exception into a provider-agnostic category.

    Categories: ``timeout``, ``auth``, ``connectivity``, ``syntax``, ``io``,
    ``unknown``. SQL Server messages are matched case-insensitively.
    """
    message = str(exc).lower()
    class_name = exc.__class__.__name__.lower()

    if isinstance(exc, TimeoutError) or _matches_any(message, ("timeout", "timed out")):
        return "timeout"
    if _matches_any(
        message,
        (
            "login failed",
            "permission denied",
            "not authorized",
            "access denied",
            "the select permission was denied",
        ),
    ):
        return "auth"
    if _matches_any(
        message,
        (
            "unable to connect",
            "could not connect",
            "connection refused",
            "connection reset",
            "adaptive server is unavailable",
            "network",
            "dbprocess is dead",
        ),
    ):
        return "connectivity"
    if _matches_any(
        message, ("incorrect syntax", "invalid object name", "invalid column name", "syntax error")
    ):
        return "syntax"
    if isinstance(exc, OSError):
        return "io"

    if class_name in {"operationalerror", "interfaceerror"}:
        return "connectivity"
    if class_name in {"programmingerror", "databaseerror"}:
        return "syntax"

    logger.debug("Unclassified error type %s", exc.__class__.__name__)
    return "unknown"


def _matches_any(text: str, fragments: tuple[str, ...]) -> bool:
    return any(fragment in text for fragment in fragments)
