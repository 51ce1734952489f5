"""
sqlrunner 샘플 실행 진입점

사용법:
    python main.py                 # 전체 실행
    python main.py users           # 사용자 샘플만
    python main.py payments        # 결제 샘플만
    python main.py users payments  # 복수 선택
"""

import sys
import os

# Windows 인코딩 설정 (cp949 -> UTF-8)
if sys.platform == "win32":
    os.environ["PYTHONUTF8"] = "1"

import logging
from pathlib import Path

import yaml

from common.logging import setup_logging
from storage import StorageConfig

logger = logging.getLogger(__name__)

VALID_SAMPLES = ("users", "payments")


def load_config() -> dict:
    """config/storage.yaml 로드"""
    config_path = Path(__file__).parent / "config" / "storage.yaml"
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def main(samples: list[str]) -> dict:
    """메인 함수"""
    config = load_config()

    log_cfg = config.get("logging", {})
    setup_logging(
        level=log_cfg.get("level", "INFO"),
        json_format=log_cfg.get("json_format", True),
        log_file=log_cfg.get("log_file"),
        sql_level=log_cfg.get("sql_level"),
    )

    storage_config = StorageConfig.from_dict(config.get("storage"))

    results = {}
    if "users" in samples:
        from sample.users import run as run_users
        results["users"] = run_users(storage_config)
        logger.info("Users sample finished")
    if "payments" in samples:
        from sample.payments import run as run_payments
        results["payments"] = run_payments(storage_config)
        logger.info("Payments sample finished")
    return results


if __name__ == "__main__":
    args = sys.argv[1:]

    if args:
        selected = [s for s in args if s in VALID_SAMPLES]
        if not selected:
            print("Usage: python main.py [users] [payments]")
            sys.exit(1)
    else:
        selected = list(VALID_SAMPLES)

    print(f"Running samples: {', '.join(selected)}")
    main(selected)
