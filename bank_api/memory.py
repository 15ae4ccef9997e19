import asyncio
import itertools
from typing import Dict, List

from .database import AccountStore
from .errors import NotFound
from .models import Account


class MemoryAccountStore(AccountStore):
    """프로세스 메모리에 계좌를 저장 (테스트, ACCOUNTS_STORAGE=memory)

    latency 를 주면 매 호출마다 먼저 그만큼 대기한 뒤 데이터를 읽고 쓴다.
    동시 이체에서 읽기-수정-쓰기 사이의 끼어들기를 재현할 때 사용.
    """

    def __init__(self, latency: float = 0.0):
        self.latency = latency
        self._rows: Dict[int, Account] = {}
        self._ids = itertools.count(1)  # 삭제돼도 id 재사용 안 함

    async def _wait(self):
        if self.latency:
            await asyncio.sleep(self.latency)

    async def list_accounts(self) -> List[Account]:
        await self._wait()
        return [row.model_copy() for row in self._rows.values()]

    async def get_account(self, account_id: int) -> Account:
        await self._wait()
        row = self._rows.get(account_id)
        if row is None:
            raise NotFound(f"can't find account: {account_id}")
        return row.model_copy()

    async def create_account(self, account: Account) -> None:
        await self._wait()
        account_id = next(self._ids)
        self._rows[account_id] = account.model_copy(update={"id": account_id})

    async def update_account(self, account: Account) -> Account:
        await self._wait()
        row = self._rows.get(account.id)
        if row is None:
            raise NotFound(f"can't find account: {account.id}")

        # number 는 최초 값 유지
        self._rows[account.id] = row.model_copy(update={
            "first_name": account.first_name,
            "last_name": account.last_name,
            "balance": account.balance,
            "created_at": account.created_at,
        })
        return self._rows[account.id].model_copy()

    async def delete_account(self, account_id: int) -> None:
        await self._wait()
        self._rows.pop(account_id, None)
