import re

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..database import AccountStore
from ..errors import AccountsError, DecodeError, MethodNotAllowed, ParseError, describe_errors
from ..models import (
    CreateAccountRequest,
    DeleteAccountRequest,
    TransferRequest,
    UpdateAccountRequest,
    new_account,
    updated_account,
)
from ..scenarios.transfer import TransferService

ACCOUNT_ID_PATTERN = re.compile(r"[+-]?[0-9]+")

router = APIRouter(
    prefix="/accounts",
    tags=["Accounts"],
)


def get_store(request: Request) -> AccountStore:
    return request.app.state.store


def to_id(raw_id: str) -> int:
    """경로의 {id} 를 10진수 정수로 변환"""
    if not ACCOUNT_ID_PATTERN.fullmatch(raw_id):
        raise ParseError(f"invalid account id: {raw_id!r}")
    return int(raw_id)


async def decode_body(request: Request, model):
    """요청 본문을 model 로 디코딩, 실패하면 DecodeError"""
    try:
        return model.model_validate_json(await request.body())
    except ValidationError as e:
        raise DecodeError(describe_errors(e.errors()))


# /accounts/{id} 보다 먼저 등록
@router.post("/transfer")
async def transfer(request: TransferRequest, store: AccountStore = Depends(get_store)):
    """입금 계좌 잔액에 amount 를 더함"""
    account = await TransferService(store).transfer(request)
    return {"message": "transfer succeed", "data": account}


@router.api_route("/transfer", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def transfer_method_not_allowed(request: Request):
    # /accounts/{id} 로 넘어가지 않도록 여기서 막음
    raise MethodNotAllowed(f"method not allowed {request.method}")


@router.get("")
async def find_accounts(store: AccountStore = Depends(get_store)):
    accounts = await store.list_accounts()
    return {"message": "success", "data": accounts}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(request: CreateAccountRequest, store: AccountStore = Depends(get_store)):
    account = new_account(request.first_name, request.last_name)
    await store.create_account(account)
    return {"message": "account created"}


@router.delete("")
async def delete_account(request: DeleteAccountRequest, store: AccountStore = Depends(get_store)):
    """없는 id 를 삭제해도 같은 성공 응답"""
    await store.delete_account(request.id)
    return {"message": "account deleted"}


@router.get("/{account_id}")
async def find_account_by_id(account_id: str, store: AccountStore = Depends(get_store)):
    account = await store.get_account(to_id(account_id))
    return {"message": "success", "data": account}


@router.patch("/{account_id}")
async def update_account(account_id: str, request: Request, store: AccountStore = Depends(get_store)):
    """계좌 수정
    존재 확인에 실패하면 400 이 아니라 201 + {"error": ...} 로 응답한다.
    본문은 존재 확인 뒤에 디코딩한다.
    """
    parsed_id = to_id(account_id)
    try:
        await store.get_account(parsed_id)
    except AccountsError:
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={"error": f"can't find account: {parsed_id}"}
        )

    body = await decode_body(request, UpdateAccountRequest)
    account = updated_account(parsed_id, body.first_name, body.last_name, body.balance)
    updated = await store.update_account(account)
    return {"message": "account updated", "data": updated}
