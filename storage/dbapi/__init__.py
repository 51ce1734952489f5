"""
DB-API 기반 Storage 패키지

사용 예시:
    from storage.dbapi import DbapiQueryableStorage

    with DbapiQueryableStorage.builder() \\
            .connect("sqlite3", ":memory:", check_same_thread=False) \\
            .add_query("notes_insert", "INSERT INTO notes (id, text) VALUES (?, ?)") \\
            .build() as storage:
        storage.write("notes_insert", [1, "hello"])
"""

from storage.dbapi.connection import (
    DbapiConnection,
    DbapiStatement,
    DbapiResult,
)
from storage.dbapi.queryable import DbapiQueryableStorage, Builder

__all__ = [
    'DbapiConnection',
    'DbapiStatement',
    'DbapiResult',
    'DbapiQueryableStorage',
    'Builder',
]
