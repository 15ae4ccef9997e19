"""실행 중인 서버에 직접 요청을 보내는 수동 테스트
python simple_test.py  (API_BASE_URL 로 주소 변경)
"""

import os
from concurrent.futures import ThreadPoolExecutor

import requests

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080")


def create_account(first_name="Hong", last_name="Gildong"):
    """계좌 생성 후 목록의 마지막 계좌 반환"""
    response = requests.post(
        f"{API_BASE_URL}/accounts",
        json={"firstName": first_name, "lastName": last_name},
        timeout=30
    )
    print(f"생성: {response.status_code} {response.json()}")
    return list_accounts()[-1]


def list_accounts():
    response = requests.get(f"{API_BASE_URL}/accounts", timeout=30)
    return response.json()["data"]


def transfer(account_id, amount=100):
    """단일 이체"""
    response = requests.post(
        f"{API_BASE_URL}/accounts/transfer",
        json={"toAccount": str(account_id), "amount": str(amount)},
        timeout=30
    )
    return response.json()


def check_balance(account_id):
    response = requests.get(f"{API_BASE_URL}/accounts/{account_id}", timeout=30)
    balance = response.json()["data"]["balance"]
    print(f"잔액: {balance}")
    return balance


def concurrent_transfers(account_id, count=10, amount=100):
    """쓰레드 count 개로 동시에 이체
    락이 없으므로 최종 잔액이 기대값보다 작게 나올 수 있다
    """
    before = check_balance(account_id)
    with ThreadPoolExecutor(max_workers=count) as executor:
        results = list(executor.map(lambda _: transfer(account_id, amount), range(count)))

    after = check_balance(account_id)
    expected = before + count * amount
    print(f"성공 응답: {sum(1 for r in results if 'data' in r)}/{count}")
    print(f"기대 잔액: {expected}, 실제 잔액: {after}, 유실: {(expected - after) // amount}건")
    return after


if __name__ == "__main__":
    print("=== 계좌 API 테스트 ===")

    # 1. 계좌 생성
    account = create_account()

    # 2. 단일 이체
    print(f"\n100 이체: {transfer(account['id'])}")

    # 3. 동시 이체
    print("\n동시 이체 (10건):")
    concurrent_transfers(account["id"])

    # 4. 삭제
    response = requests.delete(f"{API_BASE_URL}/accounts", json={"id": str(account["id"])}, timeout=30)
    print(f"\n삭제: {response.json()}")
