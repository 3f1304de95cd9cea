"""
Sage Scraper
按标签分页拉取 Sage 问题

端点: GET {base}/tags/{tag_id}/questions.json?page=&per_page=&endpoint_version=v2&t=
"""
import asyncio
from typing import Any, Callable, Dict, List, Optional
import json
import logging
import math
import time

import aiohttp
from pydantic import ValidationError

from .base import BaseScraper
from auth import CredentialResolver
from config import Settings
from models import FetchResult, Question, QuestionPage
from utils.exceptions import (
    AuthAbsentError,
    AuthExpiredError,
    FetchError,
    HttpStatusError,
    NetworkError,
    ParseError,
)


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class SageScraper(BaseScraper[Question]):
    """
    Sage 问题抓取器

    特性:
    - 页面严格串行请求, 第 N 页的响应决定是否请求第 N+1 页
    - 空页是权威的结束信号, total_pages 仅用于提前结束
    - 默认最多 max_pages_to_load 页, unlimited 模式不设上限
    - 不重试: 任一页失败即整体失败, 已累积的结果丢弃
    """

    def __init__(
        self,
        resolver: CredentialResolver,
        settings: Optional[Settings] = None,
        trace_configs: Optional[List[aiohttp.TraceConfig]] = None,
    ):
        super().__init__(settings=settings, trace_configs=trace_configs)
        self.resolver = resolver

    @property
    def name(self) -> str:
        return "Sage"

    @property
    def page_size(self) -> int:
        return self.settings.sage.results_per_page

    @property
    def max_pages(self) -> int:
        return self.settings.sage.max_pages_to_load

    def _build_url(self, tag_id: str) -> str:
        base = self.settings.sage.api_base_url.rstrip("/")
        return f"{base}/tags/{tag_id}/questions.json"

    def _build_params(self, page: int) -> Dict[str, Any]:
        return {
            "page": page,
            "per_page": self.page_size,
            "endpoint_version": "v2",
            "t": int(time.time() * 1000),  # cache-bust
        }

    @staticmethod
    def _build_headers(token: str) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": token,
            "Content-Type": "application/json",
        }

    @staticmethod
    def _parse_response(status: int, reason: str, body: bytes) -> QuestionPage:
        """把原始响应转换为 QuestionPage, 失败时抛出对应的 FetchError"""
        if status == 401:
            raise AuthExpiredError(source="Sage")
        if not 200 <= status < 300:
            raise HttpStatusError(status, reason, source="Sage")

        try:
            data = json.loads(body)
        except ValueError as e:
            raise ParseError(source="Sage", error=str(e)) from e

        if not isinstance(data, dict):
            raise ParseError(source="Sage", error=f"expected object, got {type(data).__name__}")

        try:
            return QuestionPage.model_validate(data)
        except ValidationError as e:
            raise ParseError(source="Sage", error=str(e)) from e

    async def fetch_page(self, tag_id: str, page: int) -> QuestionPage:
        """
        抓取单页问题

        Args:
            tag_id: 标签ID
            page: 页码
        """
        token = self.resolver.token()
        if not token:
            raise AuthAbsentError(source=self.name)

        try:
            status, reason, body = await self._http_get(
                self._build_url(tag_id),
                params=self._build_params(page),
                headers=self._build_headers(token),
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._log_error(f"Request for page {page} failed", e)
            raise NetworkError(source=self.name, error=str(e)) from e

        return self._parse_response(status, reason, body)

    def progress_message(self, page: int, unlimited: bool) -> str:
        if unlimited:
            return f"Loading page {page}... (unlimited mode)"
        return f"Loading page {page}/{self.max_pages}..."

    async def fetch_all(
        self,
        tag_id: str,
        unlimited: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> FetchResult:
        """
        拉取标签下的全部问题

        Args:
            tag_id: 标签ID
            unlimited: 为 True 时忽略页数上限, 直到遇到空页
            on_progress: 每页请求前调用, 参数为进度文本

        Returns:
            FetchResult (问题与已加载的页数)

        Raises:
            FetchError: 任意一页失败; 不返回部分结果
        """
        ceiling = math.inf if unlimited else self.max_pages
        page = 1
        collected: List[Question] = []

        while page <= ceiling:
            if on_progress is not None:
                on_progress(self.progress_message(page, unlimited))

            try:
                result = await self.fetch_page(tag_id, page)
            except FetchError:
                logger.warning(f"[Sage] Run for tag {tag_id} aborted at page {page}, discarding {len(collected)} questions")
                raise

            if not result.questions:
                logger.info(f"[Sage] No more questions found at page {page}")
                break

            collected.extend(result.questions)
            logger.info(f"[Sage] Loaded page {page}: {len(result.questions)} questions (total: {len(collected)})")
            page += 1

            if result.total_pages and page > result.total_pages:
                logger.info(f"[Sage] Reached last page ({result.total_pages})")
                break
        else:
            logger.info(f"[Sage] Stopped at page limit ({self.max_pages})")

        pages_loaded = page - 1
        logger.info(f"[Sage] Finished loading {len(collected)} questions across {pages_loaded} pages")
        return FetchResult(questions=tuple(collected), pages_loaded=pages_loaded)
