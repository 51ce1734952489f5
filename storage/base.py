"""
Storage 추상화 계층

이름으로 등록된 SQL 을 실행하는 QueryableStorage 인터페이스와
구현체가 사용하는 connection/statement 구조적 타입을 정의합니다.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, ContextManager, Iterator, Protocol, Sequence

__all__ = ['QueryableStorage', 'ConnectionLike', 'StatementLike', 'ResultLike', 'Row']

Row = list[Any]


class ResultLike(Protocol):
    """쿼리 결과 (컬럼 수 + 행 반복)"""

    @property
    def column_count(self) -> int: ...

    def __iter__(self) -> Iterator[Sequence[Any]]: ...


class StatementLike(Protocol):
    """prepare 된 statement"""

    def clear_parameters(self) -> None: ...
    def set_null(self, index: int) -> None: ...
    def set_string(self, index: int, value: str) -> None: ...
    def set_int(self, index: int, value: int) -> None: ...
    def set_long(self, index: int, value: int) -> None: ...
    def set_date(self, index: int, value: date) -> None: ...
    def set_decimal(self, index: int, value: Decimal) -> None: ...
    def set_timestamp(self, index: int, value: datetime) -> None: ...
    def set_binary(self, index: int, value: bytes, length: int) -> None: ...
    def execute_update(self) -> int: ...
    def execute_query(self) -> ContextManager[ResultLike]: ...
    def add_batch(self) -> None: ...
    def execute_batch(self) -> list[int]: ...
    def clear_batch(self) -> None: ...
    def close(self) -> None: ...


class ConnectionLike(Protocol):
    """Storage 가 소유하는 단일 연결"""

    @property
    def closed(self) -> bool: ...

    def prepare_statement(self, sql: str) -> StatementLike: ...
    def set_auto_commit(self, auto_commit: bool) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...
    def close(self) -> None: ...


class QueryableStorage(ABC):
    """
    이름으로 등록된 쿼리 실행 인터페이스

    사용 예시:
        with DbapiQueryableStorage.builder() \\
                .connect("sqlite3", "app.db") \\
                .queries_from_path("sql/users.yaml") \\
                .config(StorageConfig(auto_commit=False)) \\
                .build() as storage:
            storage.write("users_insert", ["john", "john@example.com"])
            storage.commit()
            row = storage.read_single("users_select", ["john"])
    """

    @abstractmethod
    def write(self, query_name: str, params: Sequence[Any] | None = None, batch_size: int = 1) -> int:
        """
        쓰기 쿼리 실행

        Args:
            query_name: 등록된 쿼리 이름
            params: 위치 파라미터 (None 또는 빈 목록이면 파라미터 없음)
            batch_size: 1이면 즉시 실행, 1보다 크면 배치가 찰 때 실행

        Returns:
            영향받은 행 수 (배치가 아직 안 찼으면 0)
        """

    @abstractmethod
    def read(self, query_name: str, params: Sequence[Any] | None = None) -> list[Row]:
        """조회 쿼리 실행 - 모든 행 반환 (결과가 없으면 빈 목록)"""

    @abstractmethod
    def commit(self) -> None:
        """트랜잭션 커밋 (auto-commit 이면 무시)"""

    @abstractmethod
    def rollback(self) -> None:
        """트랜잭션 롤백 (auto-commit 이면 무시)"""

    @abstractmethod
    def close(self) -> None:
        """리소스 정리 (예외를 던지지 않음)"""

    def read_single(self, query_name: str, params: Sequence[Any] | None = None) -> Row | None:
        """첫 번째 행 반환"""
        rows = self.read(query_name, params)
        return rows[0] if rows else None

    def read_single_value(self, query_name: str, params: Sequence[Any] | None = None) -> Any:
        """첫 번째 행의 첫 번째 컬럼 값 반환"""
        row = self.read_single(query_name, params)
        return row[0] if row else None

    def read_as_stream(self, query_name: str, params: Sequence[Any] | None = None) -> Iterator[Row]:
        """행 이터레이터 반환"""
        return iter(self.read(query_name, params))

    def read_column_values(self, query_name: str, params: Sequence[Any] | None = None) -> Iterator[Any]:
        """첫 번째 컬럼 값 이터레이터 반환"""
        return (row[0] for row in self.read_as_stream(query_name, params))

    def __enter__(self) -> "QueryableStorage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
