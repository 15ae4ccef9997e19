class AccountsError(Exception):
    """HTTP 레이어에서 400 {"Error": ...} 로 변환되는 오류의 기본 클래스"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DecodeError(AccountsError):
    """요청 본문 JSON 디코딩 실패"""


class ParseError(AccountsError):
    """경로의 id 파싱 실패"""


class NotFound(AccountsError):
    """해당 id의 계좌 없음"""


class StorageError(AccountsError):
    """DB 연결/쿼리/제약조건 오류"""


class MethodNotAllowed(AccountsError):
    pass


def describe_errors(errors) -> str:
    """pydantic 검증 오류 목록을 한 줄 메시지로"""
    if not errors:
        return "invalid request body"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    if loc:
        return f"invalid request body: {first.get('msg')} ({loc})"
    return f"invalid request body: {first.get('msg')}"
