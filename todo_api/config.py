"""
全局配置模块：通过 pydantic-settings 读取 .env 环境变量
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用全局配置，从 .env 文件加载"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── 快照文件 ──
    DATA_FILE: Path = Path("todos.json")  # Todo 快照文件路径（全量覆盖写）
    SNAPSHOT_INDENT: int = 2  # 快照 JSON 缩进，保持人工可读

    # ── CORS ──
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # ── 应用 ──
    ENV: str = "development"  # development | production
    APP_NAME: str = "todo-api"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 3000

    @field_validator("SNAPSHOT_INDENT")
    @classmethod
    def _check_indent(cls, v: int) -> int:
        if v < 0:
            raise ValueError("SNAPSHOT_INDENT 不能为负数")
        return v


@lru_cache
def get_settings() -> Settings:
    """单例获取配置（带缓存）"""
    return Settings()
