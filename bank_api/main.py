import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .database import AccountStore, create_store
from .errors import AccountsError, DecodeError, MethodNotAllowed, describe_errors
from .views import accounts

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def error_response(error: AccountsError) -> JSONResponse:
    """모든 오류는 400 {"Error": ...}"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"Error": error.message}
    )


async def accounts_error_handler(request: Request, exc: AccountsError):
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(DecodeError(describe_errors(exc.errors())))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # 경로는 맞는데 메서드가 없는 경우도 405 가 아니라 400
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return error_response(MethodNotAllowed(f"method not allowed {request.method}"))
    return JSONResponse(
        status_code=exc.status_code,
        content={"Error": str(exc.detail)},
        headers=exc.headers
    )


def create_app(settings: Optional[Settings] = None, store: Optional[AccountStore] = None) -> FastAPI:
    """앱 생성
    store 를 주지 않으면 settings.storage 에 맞는 저장소를 만든다.
    """
    settings = settings or Settings()
    if store is None:
        store = create_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 요청을 받기 전에 테이블 생성
        await store.init()
        logger.info("JSON API server running on: %s", settings.listen_addr)
        try:
            yield
        finally:
            await store.close()

    app = FastAPI(
        title="Bank Accounts API",
        description="계좌 생성/조회/수정/삭제 및 입금 이체",
        version=VERSION,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = store

    app.add_exception_handler(AccountsError, accounts_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    # 라우터 등록
    app.include_router(accounts.router)

    @app.get("/")
    async def root():
        """메인 페이지"""
        return {
            "message": "Bank Accounts API",
            "version": VERSION,
            "available_routes": [
                "GET /accounts",
                "POST /accounts",
                "DELETE /accounts",
                "GET /accounts/{id}",
                "PATCH /accounts/{id}",
                "POST /accounts/transfer"
            ],
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """헬스체크"""
        return {"status": "healthy"}

    return app


def run(settings: Optional[Settings] = None):
    """uvicorn 으로 서버 실행"""
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
