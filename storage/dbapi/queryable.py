"""
DB-API 기반 QueryableStorage 구현

모든 쿼리를 생성 시점에 prepare 해두고 이름으로 실행합니다.
하나의 연결을 여러 스레드가 공유하므로 write/read/commit/rollback/close 는
인스턴스 단위 락 안에서 실행됩니다.
"""

import logging
import threading
from pathlib import Path
from typing import IO, Any, Mapping, Sequence

from storage.base import ConnectionLike, QueryableStorage, Row
from storage.batch import BatchCoordinator
from storage.binder import bind_params
from storage.dbapi.connection import DbapiConnection
from storage.exception import (
    CommitError,
    InitializationError,
    InvalidParameterError,
    QueryableStorageError,
    QueryExecutionError,
    QueryNotFoundError,
    RollbackError,
    StorageClosedError,
)
from storage.loader import (
    load_queries_from_path,
    load_queries_from_resource,
    load_queries_from_stream,
    parse_queries,
)
from storage.model.config import StorageConfig
from storage.registry import QueryRegistry

logger = logging.getLogger(__name__)


def _as_connection(connection: Any) -> ConnectionLike:
    """DB-API 연결이면 DbapiConnection 으로 감쌈"""
    if hasattr(connection, 'prepare_statement'):
        return connection
    return DbapiConnection(connection)


def _is_open(connection: Any) -> bool:
    if hasattr(connection, 'prepare_statement'):
        return not connection.closed
    # 감싸기 전의 DB-API 연결
    return not DbapiConnection(connection, auto_commit=None).closed


class DbapiQueryableStorage(QueryableStorage):
    """
    DB-API 연결 위에서 이름으로 등록된 쿼리를 실행하는 Storage

    사용 예시:
        storage = DbapiQueryableStorage.builder() \\
            .connect("sqlite3", "app.db", check_same_thread=False) \\
            .queries_from_path("sql/payments.yaml") \\
            .config(StorageConfig(batch_size=100, auto_commit=False)) \\
            .build()

        for payment in payments:
            storage.write("payments_insert", payment.values(), batch_size=100)
        storage.commit()
        storage.close()

    배치 실행 실패 시 대기 중이던 배치는 버려지고 (버퍼/카운터 초기화) 예외가 발생합니다.
    """

    def __init__(
        self,
        connection: Any,
        queries: Mapping[str, str] | None,
        config: StorageConfig | None,
        owns_connection: bool = False,
    ):
        """
        Args:
            connection: ConnectionLike 또는 DB-API 연결 (열려 있어야 함)
            queries: 쿼리 이름 -> SQL (비어 있으면 안 됨)
            config: Storage 설정
            owns_connection: True면 close() 시 연결도 닫음

        Raises:
            InvalidParameterError: 인자 검증 실패
            InitializationError: statement prepare 실패
        """
        if connection is None or not _is_open(connection):
            raise InvalidParameterError("Invalid connection", "connection")
        if not isinstance(queries, Mapping) or not queries:
            raise InvalidParameterError("Invalid queries", "queries")
        queries = parse_queries(dict(queries), "queries")
        if config is None:
            raise InvalidParameterError("Invalid config", "config")

        self._config = config
        self._owns_connection = owns_connection
        self._lock = threading.RLock()
        self._batches = BatchCoordinator()
        self._closed = False

        try:
            self._connection = _as_connection(connection)
            if not config.auto_commit:
                self._connection.set_auto_commit(False)
            self._registry = QueryRegistry(self._connection, queries)
        except Exception as e:
            raise InitializationError(str(e)) from e

        logger.info(
            f"QueryableStorage initialized "
            f"(queries={len(self._registry)}, auto_commit={config.auto_commit})"
        )

    @classmethod
    def builder(cls) -> "Builder":
        return Builder()

    @property
    def config(self) -> StorageConfig:
        return self._config

    def write(self, query_name: str, params: Sequence[Any] | None = None, batch_size: int = 1) -> int:
        _check_query_name(query_name)
        _check_params(params)
        if not isinstance(batch_size, int) or isinstance(batch_size, bool) or batch_size < 1:
            raise InvalidParameterError("Batch size must be a positive integer", "batchSize")

        with self._lock:
            statement = self._lookup(query_name)
            try:
                statement.clear_parameters()
                bind_params(statement, params, self._config.max_string_param_length)
                if batch_size > 1:
                    statement.add_batch()
                    if self._batches.increment(query_name) < batch_size:
                        return 0
                    return self._execute_batch(query_name, statement, batch_size)
                return statement.execute_update()
            except QueryableStorageError:
                raise
            except Exception as e:
                raise QueryExecutionError(query_name, str(e)) from e

    def read(self, query_name: str, params: Sequence[Any] | None = None) -> list[Row]:
        _check_query_name(query_name)
        _check_params(params)

        with self._lock:
            statement = self._lookup(query_name)
            try:
                statement.clear_parameters()
                bind_params(statement, params, self._config.max_string_param_length)
                with statement.execute_query() as result:
                    column_count = result.column_count
                    return [[row[i] for i in range(column_count)] for row in result]
            except QueryableStorageError:
                raise
            except Exception as e:
                raise QueryExecutionError(query_name, str(e)) from e

    def commit(self) -> None:
        if self._config.auto_commit:
            return
        with self._lock:
            try:
                self._connection.commit()
            except Exception as e:
                raise CommitError(str(e)) from e

    def rollback(self) -> None:
        if self._config.auto_commit:
            return
        with self._lock:
            try:
                self._connection.rollback()
            except Exception as e:
                raise RollbackError(str(e)) from e

    def close(self) -> None:
        """
        리소스 정리

        배치 카운터와 statement 를 정리합니다. 정리 중 발생한 예외는
        로그만 남기고 호출자에게 전달하지 않습니다.
        이후 write/read 는 StorageClosedError 를 발생시킵니다.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._batches.clear()
            self._registry.close_all()
            if self._owns_connection:
                try:
                    self._connection.close()
                except Exception as e:
                    logger.warning(f"Error closing connection: {e}")
        logger.info("QueryableStorage closed")

    def pending_batch_count(self, query_name: str) -> int:
        """배치에 쌓여 있는 건수 (없으면 0)"""
        return self._batches.pending(query_name)

    def _lookup(self, query_name: str) -> Any:
        if self._closed:
            raise StorageClosedError(query_name)
        statement = self._registry.get(query_name)
        if statement is None:
            raise QueryNotFoundError(query_name)
        return statement

    def _execute_batch(self, query_name: str, statement: Any, batch_size: int) -> int:
        # 카운터 확인과 배치 실행은 다른 writer 에 대해 원자적이어야 함
        with self._lock:
            if not self._batches.is_full(query_name, batch_size):
                return 0
            try:
                counts = statement.execute_batch()
            finally:
                self._batches.reset(query_name)
                statement.clear_batch()
        total = sum(counts)
        logger.debug(f"Batch executed: query={query_name}, size={batch_size}, affected={total}")
        return total


def _check_query_name(query_name: Any) -> None:
    if not isinstance(query_name, str) or not query_name.strip():
        raise InvalidParameterError("Invalid query name", "queryName")


def _check_params(params: Any) -> None:
    if params is not None and not isinstance(params, (list, tuple)):
        raise InvalidParameterError("Query parameters must be a list or tuple", "queryParams")


class Builder:
    """
    DbapiQueryableStorage 빌더

    연결은 connection() 또는 connect() 로, 쿼리는 queries(), queries_from_path(),
    queries_from_resource(), queries_from_stream(), add_query() 로 지정합니다.
    쿼리 로드 메서드는 기존 쿼리에 병합되며 같은 이름은 나중 값이 우선합니다.
    """

    def __init__(self):
        self._connection: Any = None
        self._owns_connection = False
        self._queries: dict[str, str] | None = None
        self._config: StorageConfig | None = StorageConfig()

    def connection(self, connection: Any) -> "Builder":
        """외부에서 만든 연결 사용 (close() 시 닫지 않음)"""
        self._connection = connection
        self._owns_connection = False
        return self

    def connect(self, driver: str, *args: Any, **kwargs: Any) -> "Builder":
        """
        DB-API 드라이버로 연결 생성 (close() 시 함께 닫음)

        예시:
            builder.connect("sqlite3", ":memory:", check_same_thread=False)
        """
        try:
            self._connection = DbapiConnection.connect(driver, *args, **kwargs)
        except Exception as e:
            raise InvalidParameterError(f"Failed to create connection using driver: {driver}", "driver") from e
        self._owns_connection = True
        return self

    def queries(self, queries: Mapping[str, str] | None) -> "Builder":
        """쿼리 매핑 지정 (기존 쿼리 대체)"""
        if queries is not None and not isinstance(queries, Mapping):
            raise InvalidParameterError("Invalid queries", "queries")
        self._queries = dict(queries) if queries is not None else None
        return self

    def queries_from_path(self, path: str | Path) -> "Builder":
        return self._merge(load_queries_from_path(path))

    def queries_from_resource(self, package: str, resource: str) -> "Builder":
        return self._merge(load_queries_from_resource(package, resource))

    def queries_from_stream(self, stream: IO[str] | IO[bytes]) -> "Builder":
        return self._merge(load_queries_from_stream(stream))

    def add_query(self, query_name: str, sql: str) -> "Builder":
        return self._merge({query_name: sql})

    def config(self, config: StorageConfig | None) -> "Builder":
        self._config = config
        return self

    def build(self) -> DbapiQueryableStorage:
        if self._connection is None:
            raise InvalidParameterError("Connection is required", "connection")
        if not self._queries:
            raise InvalidParameterError("Queries are required", "queries")
        try:
            return DbapiQueryableStorage(
                self._connection, self._queries, self._config, owns_connection=self._owns_connection
            )
        except QueryableStorageError:
            if self._owns_connection:
                self._connection.close()
            raise

    def _merge(self, queries: Mapping[str, str]) -> "Builder":
        if self._queries is None:
            self._queries = {}
        self._queries.update(queries)
        return self
