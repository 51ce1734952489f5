"""
결제 대량 적재 샘플

auto-commit 을 끄고 배치 쓰기 후 한 번에 커밋하는 예제.
대량 쓰기 시 권장하는 방식입니다.
"""

import logging
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from storage import DbapiQueryableStorage, QueryableStorage, QueryableStorageError, StorageConfig
from sample.database import open_sample_database

logger = logging.getLogger(__name__)


class Payment(BaseModel):
    """결제 엔티티"""
    code: int = Field(gt=0)
    int_code: int = 1
    amount: Decimal = Field(gt=0)
    pay_date: date = Field(default_factory=date.today)
    ch_code: int = 1
    state: int = 1
    account: str = "000123456"
    pay_type: str = "AAA"

    @classmethod
    def sequential(cls, count: int, amount: Decimal) -> list["Payment"]:
        """코드가 1부터 순차 증가하는 결제 목록 생성"""
        return [cls(code=i, amount=amount) for i in range(1, count + 1)]

    def values(self) -> list:
        return [
            self.code, self.int_code, self.amount, self.pay_date,
            self.ch_code, self.state, self.account, self.pay_type,
        ]


class PaymentsDao:
    """payments 테이블 접근 객체"""

    def __init__(self, storage: QueryableStorage, batch_size: int):
        self._storage = storage
        self._batch_size = batch_size

    def insert(self, payment: Payment) -> int:
        return self._storage.write("payments_insert", payment.values(), self._batch_size)

    def find_by_pk(self, code: int) -> list | None:
        return self._storage.read_single("payments_find_by_pk", [code])

    def count(self) -> int:
        return self._storage.read_single_value("payments_count") or 0

    def total_amount(self) -> Decimal:
        total = self._storage.read_single_value("payments_total_amount")
        return Decimal(str(total)) if total is not None else Decimal(0)


def run(config: StorageConfig | None = None, total_rows: int = 10_000) -> dict:
    """
    결제 샘플 실행

    Args:
        config: Storage 설정 (auto_commit 은 항상 False 로 덮어씀)
        total_rows: 적재할 결제 건수

    Returns:
        실행 결과 요약 (count, total_amount, inserted)
    """
    config = (config or StorageConfig(max_string_param_length=200, batch_size=100)) \
        .model_copy(update={"auto_commit": False})

    conn = open_sample_database()
    try:
        with DbapiQueryableStorage.builder() \
                .connection(conn) \
                .queries_from_resource("sample", "sql/payments.yaml") \
                .config(config) \
                .build() as storage:
            dao = PaymentsDao(storage, config.batch_size)

            inserted = 0
            try:
                for payment in Payment.sequential(total_rows, Decimal(100)):
                    inserted += dao.insert(payment)
                storage.commit()
                logger.info(f"Bulk payments store completed (inserted={inserted})")
            except QueryableStorageError as e:
                storage.rollback()
                logger.error(f"Bulk payments store rolled back due to: {e.message}")

            for code in (1, 100, 1_000, total_rows):
                logger.info(f"Record {code}: {dao.find_by_pk(code)}")

            count = dao.count()
            total = dao.total_amount()
            logger.info(f"Total records: {count}, total amount: {total}")
            return {"inserted": inserted, "count": count, "total_amount": total}
    finally:
        conn.close()
