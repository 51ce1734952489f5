"""
사용자 CRUD 샘플

auto-commit 모드에서 단건 쓰기와 여러 조회 메서드를 사용하는 기본 예제.
"""

import logging

from pydantic import BaseModel, Field

from storage import DbapiQueryableStorage, QueryableStorage, StorageConfig
from sample.database import open_sample_database

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "changeit"


class User(BaseModel):
    """사용자 엔티티"""
    userid: str = Field(min_length=1)
    password: str = Field(min_length=1)
    email: str = Field(min_length=1)

    @classmethod
    def with_defaults(cls, userid: str) -> "User":
        """기본 비밀번호와 예제 이메일로 생성"""
        return cls(userid=userid, password=DEFAULT_PASSWORD, email=f"{userid}@example.com")

    @classmethod
    def from_row(cls, row: list) -> "User":
        return cls(userid=row[0], password=row[1], email=row[2])


class UsersDao:
    """users 테이블 접근 객체"""

    def __init__(self, storage: QueryableStorage):
        self._storage = storage

    def insert(self, user: User) -> int:
        return self._storage.write("users_insert", [user.userid, user.password, user.email])

    def update(self, user: User) -> int:
        return self._storage.write("users_update", [user.password, user.email, user.userid])

    def delete(self, userid: str) -> int:
        return self._storage.write("users_delete", [userid])

    def count(self) -> int:
        return self._storage.read_single_value("users_count") or 0

    def find_by_pk(self, userid: str) -> User | None:
        row = self._storage.read_single("users_find_by_pk", [userid])
        return User.from_row(row) if row else None

    def exists(self, userid: str) -> bool:
        return self._storage.read_single("users_find_by_pk", [userid]) is not None

    def find_all(self) -> list[User]:
        return [User.from_row(row) for row in self._storage.read_as_stream("users_find_all")]

    def find_by_email_pattern(self, pattern: str) -> list[User]:
        return [User.from_row(row) for row in self._storage.read_as_stream("users_search_by_email", [pattern])]


def run(config: StorageConfig | None = None) -> dict:
    """
    사용자 샘플 실행

    Returns:
        실행 결과 요약 (count, search 등)
    """
    conn = open_sample_database()
    try:
        with DbapiQueryableStorage.builder() \
                .connection(conn) \
                .queries_from_resource("sample", "sql/users.yaml") \
                .config(config or StorageConfig()) \
                .build() as storage:
            dao = UsersDao(storage)

            user0 = User.with_defaults("user0")
            dao.insert(user0)
            logger.info(f"Created: {dao.find_by_pk('user0')}")

            dao.insert(User(userid="user1", password=DEFAULT_PASSWORD, email="user1@foo.com"))
            dao.insert(User.with_defaults("user2"))
            logger.info(f"Users: {dao.find_all()}, count={dao.count()}")

            dao.update(user0.model_copy(update={"password": "secret"}))
            logger.info(f"User 0 exists: {dao.exists('user0')}")

            dao.delete("user2")
            logger.info(f"User 2 exists after deletion: {dao.exists('user2')}")

            found = dao.find_by_email_pattern("%@foo.com")
            logger.info(f"Search result: {found}")

            storage.commit()
            return {
                "count": dao.count(),
                "users": [u.userid for u in dao.find_all()],
                "search": [u.userid for u in found],
            }
    finally:
        conn.close()
