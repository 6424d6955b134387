"""
Response envelopes shared by every endpoint.

Success: {success: true, message, data?, meta?}
Error:   {success: false, message, errors?}
"""

from typing import Any


def success_response(message: str, data: Any = None, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build the success envelope."""
    content: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        content["data"] = data
    if meta is not None:
        content["meta"] = meta
    return content


def error_response(message: str, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Build the error envelope."""
    content: dict[str, Any] = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return content
