import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import List, Optional

import asyncpg

from .config import Settings
from .errors import NotFound, StorageError
from .models import Account

logger = logging.getLogger(__name__)

ACCOUNT_COLUMNS = "id, first_name, last_name, number, balance, created_at"


class AccountStore(ABC):
    """계좌 저장소 인터페이스
    HTTP 레이어는 이 인터페이스만 사용하고 SQL은 구현체 안에만 둔다.
    모든 메서드는 저장소 오류 시 StorageError 를 던진다.
    """

    async def init(self) -> None:
        """테이블 생성 등 시작 시 한 번 하는 초기화 (여러 번 불러도 안전)"""

    async def close(self) -> None:
        pass

    @abstractmethod
    async def list_accounts(self) -> List[Account]:
        ...

    @abstractmethod
    async def get_account(self, account_id: int) -> Account:
        """없으면 NotFound"""

    @abstractmethod
    async def create_account(self, account: Account) -> None:
        ...

    @abstractmethod
    async def update_account(self, account: Account) -> Account:
        """이름/잔액/created_at 덮어쓰기 (number 는 그대로), 수정 후 행을 반환
        id 가 없으면 NotFound"""

    @abstractmethod
    async def delete_account(self, account_id: int) -> None:
        """없는 id 여도 오류 없음"""


class PostgresAccountStore(AccountStore):
    def __init__(self, db_url: str, min_size: int = 1, max_size: int = 10):
        self.db_url = db_url
        self.min_size = min_size
        self.max_size = max_size
        self.pool: Optional[asyncpg.Pool] = None
        self._initialized = False

    async def init_pool(self):
        """커넥션 풀 초기화"""
        if self.pool is None:
            self.pool = await asyncpg.create_pool(
                self.db_url,
                min_size=self.min_size,
                max_size=self.max_size
            )

    async def close(self):
        """커넥션 풀 종료"""
        if self.pool:
            await self.pool.close()
            self.pool = None

    @asynccontextmanager
    async def get_connection(self):
        """커넥션 가져오기
        asyncpg 오류와 접속 실패(OSError)는 StorageError 로 감싸서 올린다
        """
        try:
            if not self.pool:
                await self.init_pool()
            async with self.pool.acquire() as conn:
                yield conn
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            logger.warning("storage failure: %s", e)
            raise StorageError(str(e)) from e

    async def init(self):
        """데이터베이스 초기화 (테이블 생성)"""
        if self._initialized:
            return

        async with self.get_connection() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS accounts (
                    id SERIAL PRIMARY KEY,
                    first_name VARCHAR,
                    last_name VARCHAR,
                    number INTEGER,
                    balance INTEGER,
                    created_at TIMESTAMPTZ
                )
            """)

        logger.info("accounts table ready")
        self._initialized = True

    async def list_accounts(self) -> List[Account]:
        async with self.get_connection() as conn:
            rows = await conn.fetch(f"SELECT {ACCOUNT_COLUMNS} FROM accounts")

        return [Account(**dict(row)) for row in rows]

    async def get_account(self, account_id: int) -> Account:
        async with self.get_connection() as conn:
            row = await conn.fetchrow(
                f"SELECT {ACCOUNT_COLUMNS} FROM accounts WHERE id = $1",
                account_id
            )

        if row is None:
            raise NotFound(f"can't find account: {account_id}")
        return Account(**dict(row))

    async def create_account(self, account: Account) -> None:
        async with self.get_connection() as conn:
            status = await conn.execute(
                """
                INSERT INTO accounts (first_name, last_name, number, balance, created_at)
                VALUES ($1, $2, $3, $4, $5)
                """,
                account.first_name, account.last_name, account.number,
                account.balance, account.created_at
            )

        logger.debug("%s number=%s", status, account.number)

    async def update_account(self, account: Account) -> Account:
        async with self.get_connection() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE accounts SET
                    first_name = $2,
                    last_name = $3,
                    balance = $4,
                    created_at = $5
                WHERE id = $1
                RETURNING {ACCOUNT_COLUMNS}
                """,
                account.id, account.first_name, account.last_name,
                account.balance, account.created_at
            )

        if row is None:
            raise NotFound(f"can't find account: {account.id}")
        return Account(**dict(row))

    async def delete_account(self, account_id: int) -> None:
        async with self.get_connection() as conn:
            await conn.execute("DELETE FROM accounts WHERE id = $1", account_id)


def create_store(settings: Settings) -> AccountStore:
    """설정에 맞는 저장소 구현체 생성"""
    if settings.storage == "memory":
        from .memory import MemoryAccountStore
        return MemoryAccountStore()
    if settings.storage == "postgres":
        return PostgresAccountStore(
            settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
    raise ValueError(f"unknown storage backend: {settings.storage}")
