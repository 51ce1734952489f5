"""
배치 쓰기 테스트

테스트 항목:
1. BatchCoordinator 카운터 동작
2. batch_size - 1 번은 0 반환, batch_size 번째에 배치 실행
3. 쿼리 이름별 독립 배치
4. 배치 실행 실패 시 버퍼/카운터 초기화
5. 실제 sqlite 연결에서 배치 적재

실행: python -m pytest test/batch_test.py -v
"""

import logging
import sqlite3
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from storage import DbapiQueryableStorage, InvalidParameterError, QueryExecutionError, StorageConfig
from storage.batch import BatchCoordinator

logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

QUERIES = {
    "a_insert": "INSERT INTO a (v) VALUES (?)",
    "b_insert": "INSERT INTO b (v) VALUES (?)",
}


def make_storage():
    """배치 실행 시 [1] * 크기 를 반환하는 mock statement 로 Storage 생성"""
    statements = {}

    def prepare(sql):
        statement = MagicMock()
        statement.execute_update.return_value = 1
        statement.pending = 0

        def add_batch():
            statement.pending += 1

        def execute_batch():
            size, statement.pending = statement.pending, 0
            return [1] * size

        statement.add_batch.side_effect = add_batch
        statement.execute_batch.side_effect = execute_batch
        statements[sql] = statement
        return statement

    connection = MagicMock()
    connection.closed = False
    connection.prepare_statement.side_effect = prepare
    storage = DbapiQueryableStorage(connection, QUERIES, StorageConfig())
    return storage, statements


class TestBatchCoordinator:
    """카운터 단위 테스트"""

    def test_increment_and_reset(self):
        batches = BatchCoordinator()
        assert batches.pending("q") == 0
        assert batches.increment("q") == 1
        assert batches.increment("q") == 2
        assert batches.is_full("q", 2)
        assert not batches.is_full("q", 3)

        batches.reset("q")
        assert batches.pending("q") == 0
        assert len(batches) == 0

    def test_clear(self):
        batches = BatchCoordinator()
        batches.increment("a")
        batches.increment("b")
        assert len(batches) == 2
        batches.clear()
        assert len(batches) == 0
        logger.info("BatchCoordinator test passed")


class TestBatchWrite:
    """배치 쓰기"""

    def test_returns_zero_until_full(self):
        storage, statements = make_storage()
        statement = statements[QUERIES["a_insert"]]

        results = [storage.write("a_insert", [i], 5) for i in range(5)]
        assert results == [0, 0, 0, 0, 5]
        statement.execute_batch.assert_called_once()
        statement.clear_batch.assert_called_once()
        statement.execute_update.assert_not_called()
        logger.info("Batch fires on size test passed")

    def test_repeated_cycles(self):
        storage, statements = make_storage()
        results = [storage.write("a_insert", [i], 3) for i in range(9)]
        assert results == [0, 0, 3] * 3
        assert statements[QUERIES["a_insert"]].execute_batch.call_count == 3

    def test_pending_count(self):
        storage, _ = make_storage()
        for i in range(3):
            storage.write("a_insert", [i], 4)
        assert storage.pending_batch_count("a_insert") == 3
        storage.write("a_insert", [3], 4)
        assert storage.pending_batch_count("a_insert") == 0
        assert storage.pending_batch_count("unknown") == 0

    def test_independent_query_names(self):
        """쿼리 이름별로 배치가 독립적으로 쌓임"""
        storage, statements = make_storage()
        assert storage.write("a_insert", [1], 2) == 0
        assert storage.write("b_insert", [1], 2) == 0
        assert storage.write("a_insert", [2], 2) == 2
        assert storage.pending_batch_count("b_insert") == 1
        statements[QUERIES["b_insert"]].execute_batch.assert_not_called()
        assert storage.write("b_insert", [2], 2) == 2
        logger.info("Independent batches test passed")

    def test_single_write_does_not_touch_batch(self):
        storage, statements = make_storage()
        storage.write("a_insert", [1], 3)
        assert storage.write("a_insert", [2]) == 1
        assert storage.pending_batch_count("a_insert") == 1
        statements[QUERIES["a_insert"]].execute_update.assert_called_once()

    def test_failure_resets_batch(self):
        """배치 실행 실패 시 예외 후 카운터와 버퍼 초기화"""
        storage, statements = make_storage()
        statement = statements[QUERIES["a_insert"]]
        statement.execute_batch.side_effect = RuntimeError("UNIQUE constraint failed")

        storage.write("a_insert", [1], 2)
        with pytest.raises(QueryExecutionError) as exc_info:
            storage.write("a_insert", [2], 2)
        assert exc_info.value.message == "Query a_insert failed: UNIQUE constraint failed"
        assert storage.pending_batch_count("a_insert") == 0
        statement.clear_batch.assert_called_once()

        # 다음 사이클은 처음부터 다시 쌓임
        statement.execute_batch.side_effect = lambda: [1, 1]
        assert storage.write("a_insert", [3], 2) == 0
        assert storage.write("a_insert", [4], 2) == 2
        logger.info("Batch failure reset test passed")

    def test_bind_failure_does_not_count(self):
        """바인딩 실패한 쓰기는 배치에 쌓이지 않음"""
        storage, statements = make_storage()
        with pytest.raises(InvalidParameterError):
            storage.write("a_insert", [1.5], 2)
        assert storage.pending_batch_count("a_insert") == 0
        statements[QUERIES["a_insert"]].add_batch.assert_not_called()

    def test_close_discards_pending(self):
        storage, statements = make_storage()
        storage.write("a_insert", [1], 10)
        storage.close()
        assert storage.pending_batch_count("a_insert") == 0
        statements[QUERIES["a_insert"]].execute_batch.assert_not_called()


class TestSqliteBatch:
    """sqlite 연결 배치 적재"""

    def test_batch_insert(self):
        conn = sqlite3.connect(":memory:", check_same_thread=False)
        conn.execute("CREATE TABLE a (v INTEGER)")
        conn.execute("CREATE TABLE b (v INTEGER)")
        conn.commit()

        storage = DbapiQueryableStorage(
            conn,
            {**QUERIES, "a_count": "SELECT COUNT(*) FROM a"},
            StorageConfig(auto_commit=False),
        )
        affected = sum(storage.write("a_insert", [i], 10) for i in range(25))
        storage.commit()

        # 마지막 5건은 배치가 차지 않아 실행되지 않음
        assert affected == 20
        assert storage.pending_batch_count("a_insert") == 5
        assert storage.read_single_value("a_count") == 20

        storage.close()
        conn.close()
        logger.info("Sqlite batch insert test passed")
