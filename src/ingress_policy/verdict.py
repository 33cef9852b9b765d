"""
Verdict Module

Accept/Reject outcome of a policy evaluation and its wire encoding.
"""

from typing import Any, Dict, Optional


class Verdict:
    """Outcome of evaluating an admission request."""

    accepted = False

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        self.message = message
        self.code = code

    def to_dict(self) -> Dict[str, Any]:
        """Convert verdict to the policy response format, omitting unset fields."""
        response: Dict[str, Any] = {'accepted': self.accepted}
        if self.message is not None:
            response['message'] = self.message
        if self.code is not None:
            response['code'] = self.code
        return response

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Verdict):
            return NotImplemented
        return (self.accepted, self.message, self.code) == (other.accepted, other.message, other.code)

    def __hash__(self) -> int:
        return hash((self.accepted, self.message, self.code))

    def __repr__(self) -> str:
        if self.accepted:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}(message={self.message!r}, code={self.code!r})"


class Accept(Verdict):
    """The request is allowed."""

    accepted = True

    def __init__(self):
        super().__init__()


class Reject(Verdict):
    """The request is denied with a human-readable reason.

    Policy violations carry no code; only malformed input is tagged with an
    HTTP-style status code.
    """

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message=message, code=code)
