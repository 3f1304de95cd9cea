"""
Settings Configuration
使用 Pydantic 进行配置验证和管理
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class SageSettings(BaseSettings):
    """Sage API 配置"""
    api_base_url: str = Field(
        default="https://api.us-east-1.prod.sage.amazon.dev/api",
        description="API 根地址",
    )
    default_tag_id: str = Field(default="9391", description="默认标签ID")
    results_per_page: int = Field(default=100, description="每页条数")
    max_pages_to_load: int = Field(default=10, description="非 load-all 模式下的页数上限")
    auth_host: str = Field(default="sage.amazon.dev", description="token 来源站点")
    token_prefix: str = Field(default="eyJ", description="拦截 Authorization 时识别 JWT 的前缀")
    token_storage_key: str = Field(default="sage_userscript_auth_token", description="token 存储键")
    token_timestamp_key: str = Field(
        default="sage_userscript_auth_token_timestamp",
        description="token 获取时间存储键",
    )
    question_url_template: str = Field(
        default="https://sage.amazon.dev/questions/{id}",
        description="问题链接模板",
    )

    class Config:
        env_prefix = "SAGE_"


class CredentialSettings(BaseSettings):
    """凭证存储配置"""
    store_path: str = Field(default="./data/credentials.json", description="持久化 (跨站) 存储文件")
    fallback_store_path: str = Field(default="./data/local_storage.json", description="本地回退存储文件")
    cookie_scan_interval: float = Field(default=5.0, description="cookie 轮询间隔(秒)")

    class Config:
        env_prefix = "CREDENTIAL_"


class GeneralSettings(BaseSettings):
    """通用设置"""
    request_timeout: int = Field(default=30, description="请求超时时间(秒)")
    log_level: str = Field(default="INFO", description="日志级别")


class Settings(BaseSettings):
    """主配置类 - 聚合所有子配置"""

    sage: SageSettings = Field(default_factory=SageSettings)
    credentials: CredentialSettings = Field(default_factory=CredentialSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """从指定的 .env 文件加载配置"""
        if env_path is None:
            # 默认查找 config/.env
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            sage=SageSettings(),
            credentials=CredentialSettings(),
            general=GeneralSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """获取全局配置单例"""
    return Settings.load_from_env_file()


# 便捷访问
def get_sage_settings() -> SageSettings:
    return get_settings().sage


def get_credential_settings() -> CredentialSettings:
    return get_settings().credentials
