"""
Key/Value Store
凭证使用的简单键值存储 (持久化跨站存储 + 本地回退存储)
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
import json
import logging

from utils.exceptions import StorageError


logger = logging.getLogger(__name__)


class BaseKeyValueStore(ABC):
    """
    键值存储抽象基类
    值一律为字符串, 写入即覆盖 (last-write-wins)
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """获取值"""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """设置值"""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """删除值"""
        pass

    def exists(self, key: str) -> bool:
        """检查键是否存在"""
        return self.get(key) is not None


class MemoryStore(BaseKeyValueStore):
    """
    内存存储
    适合测试, 或宿主自己负责持久化的场景
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class JsonFileStore(BaseKeyValueStore):
    """
    JSON 文件存储
    整个存储是一个 JSON 对象, 每次写入整体落盘
    """

    def __init__(self, path: str):
        """
        Args:
            path: JSON 文件路径, 父目录不存在时自动创建
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._data = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable store {self.path}: {e}")
            return {}
        if not isinstance(payload, dict):
            logger.warning(f"Ignoring non-object store {self.path}")
            return {}
        return {str(k): str(v) for k, v in payload.items() if v is not None}

    def _save(self) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise StorageError(f"Failed to write store {self.path}", {"error": str(e)}) from e

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._save()

    def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._save()
