from typing import Any, Dict, Optional


class ApiResponse:
    """Success/message/data envelope handed back by every API wrapper."""

    def __init__(self, success: bool, message: str = '', data: Any = None):
        self.success = bool(success)
        self.message = message or ''
        self.data = data

    @classmethod
    def ok(cls, message: str, data: Any = None) -> 'ApiResponse':
        return cls(True, message, data)

    @classmethod
    def failure(cls, message: str) -> 'ApiResponse':
        return cls(False, message)

    @classmethod
    def from_payload(cls, payload: Any) -> 'ApiResponse':
        """Map a backend body onto the envelope.

        Bodies that already carry a ``success`` flag are taken field for field;
        anything else is treated as a successful result whose data is the body.
        """
        if isinstance(payload, dict) and 'success' in payload:
            return cls(
                payload.get('success'),
                payload.get('message') or '',
                payload.get('data'),
            )
        return cls(True, '', payload)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'message': self.message,
            'data': self.data,
        }

    def __repr__(self):
        return f'ApiResponse(success={self.success!r}, message={self.message!r})'


def failure_from_error(error: Exception, default_message: str) -> ApiResponse:
    """Prefer the backend's own message, fall back to ``default_message``."""
    message: Optional[str] = getattr(error, 'backend_message', None)
    return ApiResponse.failure(message or default_message)
