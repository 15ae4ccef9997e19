import random
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# 계좌번호 범위 [0, 1_000_000)
ACCOUNT_NUMBER_LIMIT = 1_000_000


class Account(BaseModel):
    id: Optional[int] = None  # 저장소에서 할당
    first_name: str
    last_name: str
    number: int
    balance: int = 0
    created_at: datetime


class CreateAccountRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")


class UpdateAccountRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    balance: int = 0  # "500" 같은 문자열도 int로 변환


class TransferRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to_account: int = Field(default=0, alias="toAccount")
    amount: int = 0


class DeleteAccountRequest(BaseModel):
    id: int = 0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_account(first_name: str, last_name: str) -> Account:
    """새 계좌 생성 (잔액 0, 랜덤 계좌번호, 현재 UTC 시각)"""
    return Account(
        first_name=first_name,
        last_name=last_name,
        number=random.randrange(ACCOUNT_NUMBER_LIMIT),
        balance=0,
        created_at=utc_now(),
    )


def updated_account(account_id: int, first_name: str, last_name: str, balance: int) -> Account:
    """수정용 계좌 객체 생성
    created_at은 현재 시각으로 다시 찍힘 (기존 생성 시각은 유지되지 않음)
    number는 저장소에서 변경하지 않으므로 0으로 둔다
    """
    return Account(
        id=account_id,
        first_name=first_name,
        last_name=last_name,
        number=0,
        balance=balance,
        created_at=utc_now(),
    )
