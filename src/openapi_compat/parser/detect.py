"""Detect which OpenAPI dialect a parsed document uses."""

OPENAPI3 = "openapi3"
SWAGGER2 = "swagger2"
UNKNOWN = "unknown"


def detect_kind(doc: dict) -> str:
    """Detect the dialect of a parsed contract document.

    Returns: 'openapi3', 'swagger2', or 'unknown'.
    """
    if "openapi" in doc:
        return OPENAPI3
    if "swagger" in doc:
        return SWAGGER2
    return UNKNOWN
