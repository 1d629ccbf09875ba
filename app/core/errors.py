from fastapi import HTTPException, status


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "未登录或 openid 缺失"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class InvalidInput(HTTPException):
    def __init__(self, detail: str = "请求参数无效"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "未找到该关系人"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str = "该 id 已存在"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class Internal(HTTPException):
    def __init__(self, detail: str = "服务器内部错误"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail
        )


def envelope(data=None, message: str | None = None, code: int = 0) -> dict:
    """
    Every response, success or failure, uses {code, data?, message?}.
    """
    body = {"code": code}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body
