"""
쿼리 정의 로더

YAML 매핑(쿼리 이름 -> SQL)을 파일, 스트림, 패키지 리소스에서 읽습니다.

예시 (users.yaml):
    users_insert: INSERT INTO users (name, email) VALUES (?, ?)
    users_select: |
      SELECT id, name, email
        FROM users
       WHERE id = ?
"""

import logging
from importlib import resources
from pathlib import Path
from typing import IO, Any

import yaml

from storage.exception import InvalidParameterError

logger = logging.getLogger(__name__)


def parse_queries(data: Any, source: str) -> dict[str, str]:
    """YAML 로드 결과를 검증하여 이름 -> SQL dict 로 변환"""
    if not isinstance(data, dict):
        raise InvalidParameterError(f"Queries must be a mapping of name to SQL: {source}", "queries")
    queries: dict[str, str] = {}
    for name, sql in data.items():
        if not isinstance(name, str) or not name.strip():
            raise InvalidParameterError(f"Invalid query name '{name}' in {source}", "queries")
        if not isinstance(sql, str) or not sql.strip():
            raise InvalidParameterError(f"Invalid SQL for query '{name}' in {source}", "queries")
        queries[name] = sql.strip()
    logger.debug(f"Loaded {len(queries)} query(ies) from {source}")
    return queries


def load_queries_from_stream(stream: IO[str] | IO[bytes], source: str = "stream") -> dict[str, str]:
    """스트림에서 쿼리 로드"""
    try:
        data = yaml.safe_load(stream)
    except yaml.YAMLError as e:
        raise InvalidParameterError(f"Failed to load queries from {source}: {e}", "inputStream") from e
    return parse_queries(data, source)


def load_queries_from_path(path: str | Path) -> dict[str, str]:
    """YAML 파일에서 쿼리 로드"""
    path = Path(path)
    if not path.is_file():
        raise InvalidParameterError(f"Queries file not found: {path}", "path")
    with open(path, encoding="utf-8") as f:
        return load_queries_from_stream(f, str(path))


def load_queries_from_resource(package: str, resource: str) -> dict[str, str]:
    """
    패키지 리소스에서 쿼리 로드

    Args:
        package: 리소스를 포함한 패키지 (예: "sample")
        resource: 패키지 기준 상대 경로 (예: "sql/users.yaml")
    """
    try:
        ref = resources.files(package).joinpath(resource)
    except ModuleNotFoundError as e:
        raise InvalidParameterError(f"Package not found: {package}", "resourcePath") from e
    if not ref.is_file():
        raise InvalidParameterError(f"Queries resource not found: {package}/{resource}", "resourcePath")
    with ref.open("r", encoding="utf-8") as f:
        return load_queries_from_stream(f, f"{package}/{resource}")
