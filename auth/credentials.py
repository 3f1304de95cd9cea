"""
Credential Resolver
从多个来源解析 Sage token, 并持久化新观察到的 token

优先级 (先命中者为准):
    1. 持久化 (跨站) 存储
    2. 同源 cookie ``token`` (命中后回写到持久化存储)
    3. 本地回退存储
"""
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional
from urllib.parse import unquote
import logging

from config import SageSettings, get_settings
from models import Credential
from storage import BaseKeyValueStore
from utils.exceptions import StorageError


logger = logging.getLogger(__name__)

# 返回原始 Cookie 头 (例如 "a=1; token=eyJ...") 的回调
CookieSource = Callable[[], Optional[str]]
Clock = Callable[[], datetime]

COOKIE_NAME = "token"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_cookie_token(cookie_header: Optional[str], name: str = COOKIE_NAME) -> Optional[str]:
    """从 Cookie 头中取出指定 cookie 的值 (URL 解码)"""
    if not cookie_header:
        return None
    for part in cookie_header.split(";"):
        key, sep, value = part.strip().partition("=")
        if sep and key == name:
            value = unquote(value)
            return value or None
    return None


def _header_value(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if str(key).lower() == wanted and value:
            return str(value)
    return None


class CredentialResolver:
    """
    Token 解析器

    同一时刻只有一个有效 token, 新观察到的值直接覆盖旧值.
    token 不会被主动删除, 过期后由 401 暴露出来.
    """

    def __init__(
        self,
        store: BaseKeyValueStore,
        fallback_store: BaseKeyValueStore,
        cookie_source: Optional[CookieSource] = None,
        settings: Optional[SageSettings] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Args:
            store: 持久化 (跨站) 存储
            fallback_store: 同源本地回退存储
            cookie_source: 读取当前 Cookie 头的回调, 为空表示没有 cookie 来源
            settings: Sage 配置, 默认读取全局配置
            clock: 时间源, 便于测试
        """
        self.store = store
        self.fallback_store = fallback_store
        self.cookie_source = cookie_source
        self.settings = settings or get_settings().sage
        self._clock = clock or _utcnow

    @property
    def _token_key(self) -> str:
        return self.settings.token_storage_key

    @property
    def _timestamp_key(self) -> str:
        return self.settings.token_timestamp_key

    def _stored_timestamp(self) -> Optional[datetime]:
        raw = self.store.get(self._timestamp_key)
        if not raw:
            return None
        try:
            millis = int(float(raw))
        except ValueError:
            logger.warning(f"[Sage] Ignoring malformed token timestamp: {raw!r}")
            return None
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)

    def _write_persistent(self, token: str) -> datetime:
        now = self._clock()
        self.store.set(self._token_key, token)
        self.store.set(self._timestamp_key, str(int(now.timestamp() * 1000)))
        return now

    def _read_cookie(self) -> Optional[str]:
        if self.cookie_source is None:
            return None
        return parse_cookie_token(self.cookie_source())

    def resolve(self) -> Optional[Credential]:
        """按优先级解析当前 token, 都没有时返回 None"""
        token = self.store.get(self._token_key)
        if token:
            logger.debug("[Sage] Using token from persistent storage")
            return Credential(token=token, acquired_at=self._stored_timestamp())

        token = self._read_cookie()
        if token:
            logger.info("[Sage] Found token in cookie, storing for cross-site use")
            acquired_at = self._write_persistent(token)
            return Credential(token=token, acquired_at=acquired_at)

        token = self.fallback_store.get(self._token_key)
        if token:
            logger.debug("[Sage] Using token from local fallback storage")
            return Credential(token=token, acquired_at=self._stored_timestamp())

        return None

    def token(self) -> Optional[str]:
        credential = self.resolve()
        return credential.token if credential else None

    def persist(self, token: str) -> Credential:
        """写入 token 与获取时间, 无条件覆盖旧值"""
        acquired_at = self._write_persistent(token)
        self.fallback_store.set(self._token_key, token)
        logger.info("[Sage] Token stored successfully")
        return Credential(token=token, acquired_at=acquired_at)

    def age(self) -> Optional[timedelta]:
        """距上次持久化的时长; 从未持久化时返回 None"""
        stored = self._stored_timestamp()
        if stored is None:
            return None
        return self._clock() - stored

    def age_hours(self) -> Optional[int]:
        age = self.age()
        if age is None:
            return None
        return int(age.total_seconds() // 3600)

    def observe(self, url: str, headers: Optional[Mapping[str, str]]) -> bool:
        """
        出站请求观察端口

        宿主的网络层在请求目标站点时调用; Authorization 头带有 JWT 前缀且与当前
        token 不同时持久化.

        Returns:
            是否写入了新 token
        """
        if not url or self.settings.auth_host not in url:
            return False
        candidate = _header_value(headers, "Authorization")
        if not candidate or not candidate.startswith(self.settings.token_prefix):
            return False
        if candidate == self.token():
            return False
        self.persist(candidate)
        logger.info("[Sage] Captured token from outbound request")
        return True

    def rescan_cookie(self) -> bool:
        """重新读取 cookie, 值变化时持久化"""
        cookie_token = self._read_cookie()
        if not cookie_token:
            return False
        if cookie_token == self.token():
            return False
        self.persist(cookie_token)
        return True

    async def watch_cookie(
        self,
        interval: Optional[float] = None,
        stop_event: Optional[asyncio.Event] = None,
    ) -> None:
        """
        按固定间隔轮询 cookie, 直到 stop_event 被设置

        Args:
            interval: 轮询间隔(秒), 默认取 CredentialSettings.cookie_scan_interval
            stop_event: 停止信号
        """
        if interval is None:
            interval = get_settings().credentials.cookie_scan_interval
        stop_event = stop_event or asyncio.Event()

        while not stop_event.is_set():
            try:
                self.rescan_cookie()
            except StorageError as e:
                logger.error(f"[Sage] Cookie rescan failed: {e}")
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
