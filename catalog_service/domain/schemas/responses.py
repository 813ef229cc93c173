from typing import Any, Dict


def success_response(data: Any) -> Dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"status": "SUCCESS", "data": data}


def error_response(message: str) -> Dict[str, Any]:
    """Wrap a message in the error envelope."""
    return {"status": "ERROR", "data": {"message": message}}
