"""
Storage 관련 예외 클래스 정의

모든 예외는 기계가 읽을 수 있는 code 와 사람이 읽을 message 를 가집니다.
"""


class QueryableStorageError(Exception):
    """Storage 기본 예외"""
    def __init__(self, message: str, code: str = "GENERIC_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class InvalidParameterError(QueryableStorageError):
    """잘못된 인자 (누락, 길이 초과, 지원하지 않는 타입 등)"""
    def __init__(self, message: str, parameter_name: str | None = None):
        self.parameter_name = parameter_name
        super().__init__(message, "INVALID_PARAMETER")


class QueryNotFoundError(QueryableStorageError):
    """등록되지 않은 쿼리 이름"""
    def __init__(self, query_name: str):
        self.query_name = query_name
        super().__init__(f"Query {query_name} not found", "QUERY_NOT_FOUND")


class QueryExecutionError(QueryableStorageError):
    """쿼리 실행 실패"""
    def __init__(self, query_name: str, message: str):
        self.query_name = query_name
        super().__init__(f"Query {query_name} failed: {message}", "QUERY_EXECUTION_ERROR")


class InitializationError(QueryableStorageError):
    """Storage 생성 실패"""
    def __init__(self, message: str):
        super().__init__(f"Init error: {message}", "INIT_ERROR")


class CommitError(QueryableStorageError):
    """커밋 실패 (auto-commit 비활성화 시에만 발생)"""
    def __init__(self, message: str):
        super().__init__(f"Commit failed: {message}", "COMMIT_ERROR")


class RollbackError(QueryableStorageError):
    """롤백 실패 (auto-commit 비활성화 시에만 발생)"""
    def __init__(self, message: str):
        super().__init__(f"Rollback failed: {message}", "ROLLBACK_ERROR")


class StorageClosedError(QueryableStorageError):
    """close() 이후 쿼리 실행 시도"""
    def __init__(self, query_name: str):
        self.query_name = query_name
        super().__init__(f"Storage is closed: cannot run query {query_name}", "STORAGE_CLOSED")
