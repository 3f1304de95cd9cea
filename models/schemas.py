"""
Data Models / Schemas
定义 Sage API 的数据结构

API 返回的字段经常缺失或为 null, 这里为每个字段显式声明可选性:
计数器缺失/为 null 时保留 None, 统计时按 0 处理; 列表缺失/为 null 时为空元组.

缺失与 null 被视为同一种状态. accepted_answer_id 缺失时不算已采纳,
网页版在过滤和渲染时只判断 `!== null`, 会把缺失当作已采纳; 这里有意与其不同,
以保证统计和过滤对同一问题给出一致的结论.

单个字段类型异常 (浮点计数, 列表中的 null, 无法解析的日期) 只会让该字段降级,
不会让整页解析失败.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_count(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _without_nulls(value: Any) -> Any:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return [item for item in value if item is not None]
    return value


class Facet(str, Enum):
    """可过滤维度"""
    OWNER = "owner"
    TAG = "tag"
    TOPIC = "topic_id"
    HAS_ACCEPTED_ANSWER = "has_answer"
    HAS_ANSWERS = "has_responses"


class Owner(BaseModel):
    """提问者/回答者"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[str] = None
    displayname: Optional[str] = Field(None, description="显示名")

    @field_validator("id", "displayname", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _optional_text(value)


class Tag(BaseModel):
    """标签"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = Field(None, description="标签名")

    @field_validator("id", "name", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _optional_text(value)


class Answer(BaseModel):
    """回答 (只保留统计/展示需要的字段)"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[str] = None
    owner: Optional[Owner] = None
    score: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _optional_text(value)

    @field_validator("score", mode="before")
    @classmethod
    def _count(cls, value: Any) -> Optional[int]:
        return _optional_count(value)


class Question(BaseModel):
    """Sage 问题模型, 入库后只读"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[str] = Field(None, description="问题ID")
    title: Optional[str] = Field(None, description="问题标题")
    owner: Optional[Owner] = Field(None, description="提问者")
    creation_date: Optional[datetime] = Field(None, description="创建时间")
    score: Optional[int] = Field(None, description="得分")
    view_count: Optional[int] = Field(None, description="浏览数")
    answers: Tuple[Answer, ...] = Field(default_factory=tuple, description="回答列表")
    accepted_answer_id: Optional[str] = Field(None, description="采纳答案ID")
    tags: Tuple[Tag, ...] = Field(default_factory=tuple, description="标签")
    topic_id: Optional[str] = Field(None, description="话题ID")

    @field_validator("id", "title", "accepted_answer_id", "topic_id", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _optional_text(value)

    @field_validator("score", "view_count", mode="before")
    @classmethod
    def _count(cls, value: Any) -> Optional[int]:
        return _optional_count(value)

    @field_validator("answers", "tags", mode="before")
    @classmethod
    def _sequence(cls, value: Any) -> Any:
        return _without_nulls(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _plain_tag_names(cls, value: Any) -> Any:
        # 兼容: tags 直接是字符串列表
        if isinstance(value, (list, tuple)):
            return [{"name": item} if isinstance(item, str) else item for item in value]
        return value

    @field_validator("creation_date", mode="before")
    @classmethod
    def _lenient_date(cls, value: Any) -> Any:
        # 数值按毫秒时间戳处理, 与 JS Date 一致
        if value is None or value == "" or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            try:
                return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
            except (ValueError, OverflowError, OSError):
                return None
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return None
        if isinstance(value, datetime):
            return value
        return None

    @property
    def owner_name(self) -> Optional[str]:
        return self.owner.displayname if self.owner else None

    @property
    def tag_names(self) -> Tuple[str, ...]:
        return tuple(tag.name for tag in self.tags if tag.name)

    @property
    def has_answers(self) -> bool:
        return len(self.answers) > 0

    @property
    def has_accepted_answer(self) -> bool:
        return self.accepted_answer_id is not None


class Credential(BaseModel):
    """Bearer token 与获取时间"""
    model_config = ConfigDict(frozen=True)

    token: str
    acquired_at: Optional[datetime] = None


class QuestionPage(BaseModel):
    """questions.json 单页响应"""
    model_config = ConfigDict(extra="ignore")

    questions: Tuple[Question, ...] = Field(default_factory=tuple)
    total_pages: Optional[int] = None

    @field_validator("questions", mode="before")
    @classmethod
    def _sequence(cls, value: Any) -> Any:
        return _without_nulls(value)

    @field_validator("total_pages", mode="before")
    @classmethod
    def _count(cls, value: Any) -> Optional[int]:
        return _optional_count(value)


class FetchResult(BaseModel):
    """一次完整加载的结果"""
    model_config = ConfigDict(frozen=True)

    questions: Tuple[Question, ...] = Field(default_factory=tuple)
    pages_loaded: int = 0
