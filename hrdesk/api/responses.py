from typing import Any


def ok(message: str, data: Any = None) -> dict:
    """Success envelope shared by every route."""
    body = {"status": True, "message": message}
    if data is not None:
        body["data"] = data
    return body
