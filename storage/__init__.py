"""
이름 기반 쿼리 실행 패키지

사용 예시:
    from storage import DbapiQueryableStorage, StorageConfig

    storage = DbapiQueryableStorage.builder() \\
        .connect("sqlite3", "data/app.db", check_same_thread=False) \\
        .queries_from_resource("sample", "sql/users.yaml") \\
        .config(StorageConfig(auto_commit=False)) \\
        .build()

    # 쓰기 (배치 크기 100)
    storage.write("users_insert", ["john", "secret", "john@example.com"], batch_size=100)
    storage.commit()

    # 조회
    rows = storage.read("users_select_all")
    email = storage.read_single_value("users_select_email", ["john"])
"""

from storage.base import QueryableStorage, Row
from storage.dbapi import DbapiConnection, DbapiQueryableStorage
from storage.exception import (
    QueryableStorageError,
    InvalidParameterError,
    QueryNotFoundError,
    QueryExecutionError,
    InitializationError,
    CommitError,
    RollbackError,
    StorageClosedError,
)
from storage.model import ParamKind, QueryParam, StorageConfig

__all__ = [
    'QueryableStorage',
    'Row',
    'DbapiConnection',
    'DbapiQueryableStorage',
    'QueryableStorageError',
    'InvalidParameterError',
    'QueryNotFoundError',
    'QueryExecutionError',
    'InitializationError',
    'CommitError',
    'RollbackError',
    'StorageClosedError',
    'ParamKind',
    'QueryParam',
    'StorageConfig',
]
