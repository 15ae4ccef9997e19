from ..database import AccountStore
from ..models import Account, TransferRequest


class TransferService:
    """입금 계좌에 금액을 더하는 이체
    출금 계좌는 없음 (차감하지 않음), 락이나 트랜잭션도 없음.
    같은 계좌로 동시에 이체하면 읽기-수정-쓰기 사이에 갱신이 유실될 수 있다.
    """

    def __init__(self, store: AccountStore):
        self.store = store

    async def transfer(self, request: TransferRequest) -> Account:
        ############################읽는부분############################
        # 계좌가 없거나 저장소 오류면 여기서 요청 전체가 실패
        account = await self.store.get_account(request.to_account)

        ############################업데이트 부분############################
        # created_at 은 조회한 값 그대로 저장
        account.balance += request.amount
        return await self.store.update_account(account)
