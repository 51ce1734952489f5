"""
DB-API 2.0 (PEP 249) 어댑터 모듈

표준 DB-API 연결을 감싸서 Storage 가 사용하는 connection/statement 인터페이스를 제공합니다.
sqlite3 의 경우 prepare 시점에 EXPLAIN 으로 SQL 을 검증하고,
DATE/TIMESTAMP/DECIMAL 값을 sqlite 가 저장할 수 있는 형태로 변환합니다.
"""

import importlib
import logging
import sqlite3
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterator, Sequence

from storage.model.param import ParamKind

logger = logging.getLogger(__name__)

FETCH_SIZE = 500

_SQLITE_CONVERTERS: dict[ParamKind, Callable[[Any], Any]] = {
    ParamKind.DATE: lambda v: v.isoformat(),
    ParamKind.TIMESTAMP: lambda v: v.isoformat(sep=" "),
    ParamKind.DECIMAL: str,
}


def _log_query(sql: str, parameters: Any = None) -> None:
    """SQL 쿼리 로깅"""
    sql_oneline = ' '.join(sql.split())
    if parameters:
        logger.debug(f"[SQL] {sql_oneline} | params: {parameters}")
    else:
        logger.debug(f"[SQL] {sql_oneline}")


def _log_result(row_count: int) -> None:
    """SQL 결과 로깅"""
    logger.debug(f"[SQL Result] {row_count} row(s)")


class DbapiResult:
    """조회 결과 - 커서를 감싸고 with 블록 종료 시 닫음"""

    def __init__(self, cursor: Any):
        self._cursor = cursor
        self._row_count = 0

    @property
    def column_count(self) -> int:
        return len(self._cursor.description or ())

    def __iter__(self) -> Iterator[Sequence[Any]]:
        while True:
            rows = self._cursor.fetchmany(FETCH_SIZE)
            if not rows:
                break
            self._row_count += len(rows)
            yield from rows

    def close(self) -> None:
        _log_result(self._row_count)
        self._cursor.close()

    def __enter__(self) -> "DbapiResult":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class DbapiStatement:
    """
    DB-API 용 prepared statement

    바인딩된 값과 배치 버퍼를 보관하고, 실행 시점에 커서를 열어 SQL 을 실행합니다.
    """

    def __init__(self, connection: "DbapiConnection", sql: str):
        self._connection = connection
        self._sql = sql
        self._params: dict[int, Any] = {}
        self._batch: list[tuple] = []
        self._closed = False

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def closed(self) -> bool:
        return self._closed

    def clear_parameters(self) -> None:
        self._check_open()
        self._params.clear()

    def set_null(self, index: int) -> None:
        self._set(index, None)

    def set_string(self, index: int, value: str) -> None:
        self._set(index, value)

    def set_int(self, index: int, value: int) -> None:
        self._set(index, value)

    def set_long(self, index: int, value: int) -> None:
        self._set(index, value)

    def set_date(self, index: int, value: date) -> None:
        self._set(index, self._connection.convert(ParamKind.DATE, value))

    def set_decimal(self, index: int, value: Decimal) -> None:
        self._set(index, self._connection.convert(ParamKind.DECIMAL, value))

    def set_timestamp(self, index: int, value: datetime) -> None:
        self._set(index, self._connection.convert(ParamKind.TIMESTAMP, value))

    def set_binary(self, index: int, value: bytes, length: int) -> None:
        self._set(index, bytes(value[:length]))

    def execute_update(self) -> int:
        """INSERT/UPDATE/DELETE 실행 - affected rows 반환"""
        params = self._bound_values()
        _log_query(self._sql, params)
        cursor = self._connection.cursor()
        try:
            cursor.execute(self._sql, params)
            count = max(cursor.rowcount, 0)
        finally:
            cursor.close()
        _log_result(count)
        return count

    def execute_query(self) -> DbapiResult:
        """SELECT 실행 - with 블록에서 사용할 결과 반환"""
        params = self._bound_values()
        _log_query(self._sql, params)
        cursor = self._connection.cursor()
        try:
            cursor.execute(self._sql, params)
        except Exception:
            cursor.close()
            raise
        return DbapiResult(cursor)

    def add_batch(self) -> None:
        """현재 바인딩된 값을 배치 버퍼에 추가"""
        self._batch.append(self._bound_values())

    def execute_batch(self) -> list[int]:
        """
        배치 실행

        DB-API 의 executemany 는 전체 affected rows 만 알려주므로
        단일 원소 목록으로 반환합니다.
        """
        self._check_open()
        if not self._batch:
            return []
        _log_query(self._sql, f"[{len(self._batch)} rows]")
        cursor = self._connection.cursor()
        try:
            cursor.executemany(self._sql, self._batch)
            count = max(cursor.rowcount, 0)
        finally:
            cursor.close()
        _log_result(count)
        return [count]

    def clear_batch(self) -> None:
        self._batch.clear()

    @property
    def batch_length(self) -> int:
        return len(self._batch)

    def close(self) -> None:
        self._params.clear()
        self._batch.clear()
        self._closed = True

    def _set(self, index: int, value: Any) -> None:
        self._check_open()
        if index < 1:
            raise IndexError(f"Parameter index out of range: {index}")
        self._params[index] = value

    def _bound_values(self) -> tuple:
        self._check_open()
        if not self._params:
            return ()
        last = max(self._params)
        missing = [i for i in range(1, last + 1) if i not in self._params]
        if missing:
            raise ValueError(f"No value specified for parameter {missing[0]}")
        return tuple(self._params[i] for i in range(1, last + 1))

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Statement is closed")


class DbapiConnection:
    """
    DB-API 연결 어댑터

    사용 예시:
        conn = DbapiConnection(sqlite3.connect("app.db", check_same_thread=False))
        conn = DbapiConnection.connect("sqlite3", ":memory:", check_same_thread=False)
    """

    def __init__(self, connection: Any, auto_commit: bool | None = True):
        """
        Args:
            connection: DB-API 연결
            auto_commit: 연결에 적용할 auto-commit 모드 (None이면 드라이버 설정 유지)
        """
        if connection is None:
            raise ValueError("connection is required")
        self._raw = connection
        self._is_sqlite = isinstance(connection, sqlite3.Connection)
        self._converters = _SQLITE_CONVERTERS if self._is_sqlite else {}
        self._closed = False
        if auto_commit is not None and not self.closed:
            self.set_auto_commit(auto_commit)

    @classmethod
    def connect(cls, driver: str, *args: Any, **kwargs: Any) -> "DbapiConnection":
        """
        드라이버 모듈 이름으로 연결 생성

        Args:
            driver: DB-API 모듈 이름 (예: "sqlite3", "psycopg2", "pymysql")
            *args, **kwargs: driver.connect() 인자
        """
        module = importlib.import_module(driver)
        raw = module.connect(*args, **kwargs)
        logger.debug(f"Connection created using driver '{driver}'")
        return cls(raw)

    @property
    def raw(self) -> Any:
        """원본 DB-API 연결"""
        return self._raw

    @property
    def closed(self) -> bool:
        if self._closed:
            return True
        flag = getattr(self._raw, 'closed', None)
        if flag is not None:
            return bool(flag)
        # sqlite3 처럼 closed 속성이 없는 드라이버는 커서 생성으로 확인
        try:
            self._raw.cursor().close()
        except Exception:
            return True
        return False

    def cursor(self) -> Any:
        return self._raw.cursor()

    def prepare_statement(self, sql: str) -> DbapiStatement:
        """statement 생성 (sqlite3 는 EXPLAIN 으로 SQL 검증)"""
        if not isinstance(sql, str) or not sql.strip():
            raise ValueError("SQL text is required")
        if self._is_sqlite:
            self._explain(sql)
        return DbapiStatement(self, sql)

    def set_auto_commit(self, auto_commit: bool) -> None:
        """auto-commit 모드 변경"""
        mode = getattr(self._raw, 'autocommit', None)
        if callable(mode):
            # pymysql 등은 autocommit(bool) 메서드 제공
            mode(auto_commit)
        elif hasattr(self._raw, 'autocommit'):
            # psycopg2, sqlite3 (3.12+)
            self._raw.autocommit = auto_commit
        elif hasattr(self._raw, 'isolation_level'):
            self._raw.isolation_level = None if auto_commit else 'DEFERRED'
        else:
            logger.warning(f"Driver does not support switching auto-commit: {type(self._raw).__name__}")
            return
        logger.debug(f"Auto-commit set to {auto_commit}")

    def convert(self, kind: ParamKind, value: Any) -> Any:
        """드라이버가 저장할 수 있는 형태로 값 변환"""
        converter = self._converters.get(kind)
        return converter(value) if converter is not None else value

    def commit(self) -> None:
        self._raw.commit()
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        self._raw.rollback()
        logger.debug("Transaction rolled back")

    def close(self) -> None:
        self._closed = True
        self._raw.close()

    def _explain(self, sql: str) -> None:
        cursor = self._raw.cursor()
        try:
            cursor.execute(f"EXPLAIN {sql}")
        except sqlite3.ProgrammingError as e:
            # 바인딩 개수 오류는 SQL 컴파일이 성공했다는 뜻
            if "bindings" not in str(e):
                raise
        finally:
            cursor.close()
