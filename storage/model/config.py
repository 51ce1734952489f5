"""
Storage 설정 모델 정의
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_STRING_PARAM_LENGTH = 100
DEFAULT_BATCH_SIZE = 1
DEFAULT_AUTO_COMMIT = True


class StorageConfig(BaseModel):
    """Storage 설정 (생성 후 변경 불가)"""
    model_config = ConfigDict(frozen=True, extra='forbid')

    max_string_param_length: int = Field(
        default=DEFAULT_MAX_STRING_PARAM_LENGTH, gt=0, description="문자열 파라미터 최대 길이"
    )
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0, description="애플리케이션 기본 배치 크기")
    auto_commit: bool = Field(default=DEFAULT_AUTO_COMMIT, description="False면 commit/rollback 수동 호출")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "StorageConfig":
        """dict에서 설정 생성 (None이면 기본값)"""
        return cls(**(data or {}))

    @classmethod
    def from_yaml(cls, path: str | Path, section: str | None = "storage") -> "StorageConfig":
        """
        YAML 파일에서 설정 로드

        Args:
            path: YAML 파일 경로
            section: 설정이 들어있는 최상위 키 (None이면 파일 전체)
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if section is not None:
            data = data.get(section) or {}
        return cls.from_dict(data)
