"""
Base Scraper
分页抓取器的抽象基类
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar
import logging

import aiohttp

from config import Settings, get_settings


logger = logging.getLogger(__name__)

T = TypeVar("T")  # 泛型返回类型


class BaseScraper(ABC, Generic[T]):
    """
    抓取器抽象基类
    负责 HTTP 会话的创建与回收, 子类实现具体的分页协议
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        trace_configs: Optional[List[aiohttp.TraceConfig]] = None,
    ):
        self.settings = settings or get_settings()
        self._trace_configs = list(trace_configs or [])
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """返回抓取器名称"""
        pass

    @abstractmethod
    async def fetch_page(self, collection_id: str, page: int) -> Any:
        """
        抓取单页

        Args:
            collection_id: 集合ID (例如标签ID)
            page: 页码, 从 1 开始
        """
        pass

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()

    async def close(self):
        """清理资源"""
        if self._session:
            await self._session.close()
            self._session = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """获取或创建 HTTP 会话"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.general.request_timeout),
                trace_configs=self._trace_configs or None,
            )
        return self._session

    async def _http_get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Tuple[int, str, bytes]:
        """
        发出 GET 请求

        Returns:
            (状态码, 状态说明, 原始响应体)
        """
        session = await self._get_session()
        async with session.get(url, params=params, headers=headers) as response:
            body = await response.read()
            return response.status, response.reason or "", body

    def _log_error(self, message: str, error: Exception):
        """记录错误日志"""
        logger.error(f"[{self.name}] {message}: {error}")
