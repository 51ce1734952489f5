"""샘플용 SQLite 연결 생성"""

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

INIT_SQL_PATH = Path(__file__).parent / "sql" / "init.sql"


def open_sample_database(db_path: str = ":memory:") -> sqlite3.Connection:
    """init.sql 로 테이블을 만든 SQLite 연결 반환"""
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.executescript(INIT_SQL_PATH.read_text(encoding="utf-8"))
    conn.commit()
    logger.info(f"Sample database ready: {db_path}")
    return conn
