"""Exceptions for debate operations

Each error carries the HTTP status it maps to and a user-facing message.
Diagnostic detail belongs in the logs, not in ``message``.
"""

from typing import Optional


class DebateError(Exception):
    """Base exception for debate errors"""

    status_code = 500
    default_message = "サーバーでエラーが発生しました。"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(DebateError):
    """Raised when a debate does not exist"""

    status_code = 404
    default_message = "ディベートが見つかりません。"


class InvalidInputError(DebateError):
    """Raised for malformed topics, turn counts or persona choices"""

    status_code = 400
    default_message = "入力内容が正しくありません。"


class InvalidStateError(DebateError):
    """Raised when the debate is in the wrong phase for the operation"""

    status_code = 400
    default_message = "現在の状態ではこの操作はできません。"


class ConflictError(DebateError):
    """Raised on duplicate votes and competing turn requests"""

    status_code = 409
    default_message = "リクエストが競合しました。"


class UpstreamError(DebateError):
    """Raised when the generation backend fails or returns unusable output"""

    status_code = 502
    default_message = "AIの応答中にエラーが発生しました。"
