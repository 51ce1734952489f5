"""
배치 카운터 모듈

쿼리 이름별로 배치에 쌓인 건수를 관리합니다.
카운트가 0 인 항목은 남기지 않습니다 (배치 실행 시 항목 자체를 제거).
"""

import threading


class BatchCoordinator:
    """쿼리 이름별 배치 카운터"""

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, query_name: str) -> int:
        """카운터 증가 후 현재 값 반환 (첫 호출 시 생성)"""
        with self._lock:
            count = self._counters.get(query_name, 0) + 1
            self._counters[query_name] = count
            return count

    def is_full(self, query_name: str, batch_size: int) -> bool:
        """배치가 batch_size 이상 쌓였는지 확인"""
        with self._lock:
            return self._counters.get(query_name, 0) >= batch_size

    def reset(self, query_name: str) -> None:
        """카운터 제거"""
        with self._lock:
            self._counters.pop(query_name, None)

    def pending(self, query_name: str) -> int:
        """대기 중인 건수 (없으면 0)"""
        with self._lock:
            return self._counters.get(query_name, 0)

    def clear(self) -> None:
        """모든 카운터 제거"""
        with self._lock:
            self._counters.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)
