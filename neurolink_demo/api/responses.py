"""Response envelopes shared by every route."""

from datetime import datetime, timezone
from typing import Any, Dict


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(data: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a payload in the standard success envelope."""
    return {"success": True, **data, "timestamp": timestamp()}


def error_response(error: str, status_code: int) -> Dict[str, Any]:
    return {
        "success": False,
        "error": error,
        "status_code": status_code,
        "timestamp": timestamp(),
    }
