"""
파라미터 바인딩 모듈

ParamKind 별로 statement 의 바인딩 메서드를 호출합니다.
상태가 없으며 statement 에 값을 바인딩하는 것 외의 부수효과는 없습니다.
"""

from datetime import datetime
from typing import Any, Sequence

from storage.exception import InvalidParameterError
from storage.model.param import ParamKind, QueryParam


def bind_param(statement: Any, index: int, value: Any, max_string_length: int) -> None:
    """
    단일 파라미터 바인딩

    Args:
        statement: 바인딩 대상 statement
        index: 1부터 시작하는 위치
        value: 파이썬 값 또는 QueryParam
        max_string_length: 문자열 최대 길이

    Raises:
        InvalidParameterError: 지원하지 않는 타입 또는 문자열 길이 초과
    """
    param = QueryParam.of(value)
    kind = param.kind

    if kind is ParamKind.NULL:
        statement.set_null(index)
    elif kind is ParamKind.STRING:
        if len(param.value) > max_string_length:
            raise InvalidParameterError(
                f"Query parameter must be at most {max_string_length} characters", "stringParam"
            )
        statement.set_string(index, param.value)
    elif kind is ParamKind.INTEGER:
        statement.set_int(index, param.value)
    elif kind is ParamKind.LONG:
        statement.set_long(index, param.value)
    elif kind is ParamKind.DATE:
        # 명시적으로 DATE 로 지정된 datetime 은 날짜 부분만 사용
        day = param.value.date() if isinstance(param.value, datetime) else param.value
        statement.set_date(index, day)
    elif kind is ParamKind.DECIMAL:
        statement.set_decimal(index, param.value)
    elif kind is ParamKind.TIMESTAMP:
        statement.set_timestamp(index, param.value)
    elif kind is ParamKind.BINARY:
        data = bytes(param.value)
        statement.set_binary(index, data, len(data))
    else:
        raise InvalidParameterError(f"Unsupported parameter kind: {kind}", "param")


def bind_params(statement: Any, params: Sequence[Any] | None, max_string_length: int) -> None:
    """파라미터 목록을 1부터 순서대로 바인딩"""
    if not params:
        return
    for i, value in enumerate(params, start=1):
        bind_param(statement, i, value, max_string_length)
