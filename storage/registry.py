"""
쿼리 레지스트리 모듈

생성 시점에 이름별 SQL 을 한 번씩 prepare 하고, 이후에는 조회만 합니다.
"""

import logging
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class QueryRegistry:
    """쿼리 이름 -> prepared statement 매핑"""

    def __init__(self, connection: Any, queries: Mapping[str, str]):
        """
        모든 쿼리를 prepare

        하나라도 실패하면 이미 prepare 한 statement 를 닫고 예외를 그대로 전파합니다.
        """
        self._statements: dict[str, Any] = {}
        try:
            for name, sql in queries.items():
                self._statements[name] = connection.prepare_statement(sql)
        except Exception:
            self.close_all()
            raise
        logger.debug(f"Prepared {len(self._statements)} statement(s)")

    def get(self, query_name: str) -> Any | None:
        """statement 반환 (없으면 None)"""
        return self._statements.get(query_name)

    def names(self) -> list[str]:
        """등록된 쿼리 이름 목록"""
        return list(self._statements)

    def close_all(self) -> None:
        """모든 statement 를 닫고 비움 (예외는 무시)"""
        for name, statement in self._statements.items():
            try:
                statement.close()
            except Exception as e:
                logger.warning(f"Error closing statement '{name}': {e}")
        self._statements.clear()

    def __contains__(self, query_name: str) -> bool:
        return query_name in self._statements

    def __len__(self) -> int:
        return len(self._statements)
