"""
쿼리 파라미터 모델

바인딩 가능한 값의 종류를 ParamKind 로 명시적으로 열거하고,
QueryParam 은 (kind, value) 쌍으로 바인딩 대상을 표현합니다.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from storage.exception import InvalidParameterError

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1


class ParamKind(str, Enum):
    """바인딩 가능한 파라미터 종류"""
    NULL = "NULL"
    STRING = "STRING"
    INTEGER = "INTEGER"
    LONG = "LONG"
    DATE = "DATE"
    DECIMAL = "DECIMAL"
    TIMESTAMP = "TIMESTAMP"
    BINARY = "BINARY"


def _is_int_in(value: Any, low: int, high: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high


# 종류별 허용 값 (DATE 는 날짜 부분만 쓰므로 datetime 도 허용)
_KIND_CHECKS = {
    ParamKind.NULL: lambda v: v is None,
    ParamKind.STRING: lambda v: isinstance(v, str),
    ParamKind.INTEGER: lambda v: _is_int_in(v, INT32_MIN, INT32_MAX),
    ParamKind.LONG: lambda v: _is_int_in(v, INT64_MIN, INT64_MAX),
    ParamKind.DATE: lambda v: isinstance(v, date),
    ParamKind.DECIMAL: lambda v: isinstance(v, Decimal),
    ParamKind.TIMESTAMP: lambda v: isinstance(v, datetime),
    ParamKind.BINARY: lambda v: isinstance(v, (bytes, bytearray, memoryview)),
}


@dataclass(frozen=True)
class QueryParam:
    """종류가 결정된 쿼리 파라미터"""
    kind: ParamKind
    value: Any = None

    def __post_init__(self):
        """kind 와 값의 타입이 맞지 않으면 바인딩 전에 거부"""
        if not isinstance(self.kind, ParamKind):
            raise InvalidParameterError(f"Unsupported parameter kind: {self.kind}", "param")
        if not _KIND_CHECKS[self.kind](self.value):
            raise InvalidParameterError(
                f"Query parameter of kind {self.kind.value} cannot hold {type(self.value).__name__}", "param"
            )

    @classmethod
    def of(cls, value: Any) -> "QueryParam":
        """
        파이썬 값의 타입으로 ParamKind 결정

        Raises:
            InvalidParameterError: 지원하지 않는 타입
        """
        if isinstance(value, QueryParam):
            return value
        if value is None:
            return cls(ParamKind.NULL)
        if isinstance(value, str):
            return cls(ParamKind.STRING, value)
        # bool 은 int 의 하위 타입이므로 먼저 걸러낸다
        if isinstance(value, int) and not isinstance(value, bool):
            if INT32_MIN <= value <= INT32_MAX:
                return cls(ParamKind.INTEGER, value)
            if INT64_MIN <= value <= INT64_MAX:
                return cls(ParamKind.LONG, value)
            raise InvalidParameterError(
                f"Integer query parameter out of 64-bit range: {value}", "param"
            )
        # datetime 은 date 의 하위 타입
        if isinstance(value, datetime):
            return cls(ParamKind.TIMESTAMP, value)
        if isinstance(value, date):
            return cls(ParamKind.DATE, value)
        if isinstance(value, Decimal):
            return cls(ParamKind.DECIMAL, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(ParamKind.BINARY, bytes(value))
        raise InvalidParameterError(
            f"Unsupported data type for query parameter: {type(value).__name__}", "param"
        )
