"""Shared utilities used across the technician scheduling package."""

from typing import Any, Mapping, Optional

PLACEHOLDER = "—"


def first_present(payload: Mapping[str, Any], *keys: str) -> Optional[Any]:
    """Return the first value under ``keys`` that is not None.

    Examples:
        >>> first_present({"customerName": "Ana"}, "customer_name", "customerName")
        'Ana'
        >>> first_present({}, "a", "b") is None
        True
    """
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def unwrap_data(body: Any) -> Any:
    """Strip the ``{"success": ..., "data": ...}`` envelope when present."""
    if isinstance(body, dict) and "success" in body and isinstance(body.get("data"), (dict, list)):
        return body["data"]
    return body
