"""产品记录输出端

只追加、一次一条记录、不做去重或更新。
"""

from __future__ import annotations

import abc
import json
import threading
from pathlib import Path

from ...extractor.models import ProductRecord
from ..exceptions import DatasetWriteError
from ..logger import get_logger

logger = get_logger(__name__)


class RecordSink(abc.ABC):
    """记录输出端抽象"""

    @abc.abstractmethod
    def push(self, record: ProductRecord) -> None:
        """追加一条记录"""

    def close(self) -> None:
        """关闭输出端（默认无操作）"""
        return None


class MemoryRecordSink(RecordSink):
    """内存输出端，用于嵌入调用和测试"""

    def __init__(self) -> None:
        self.records: list[ProductRecord] = []

    def push(self, record: ProductRecord) -> None:
        self.records.append(record)


class JsonlRecordSink(RecordSink):
    """JSON Lines 文件输出端，每条记录一行"""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.count = 0
        self._lock = threading.Lock()

    def push(self, record: ProductRecord) -> None:
        line = json.dumps(record.to_dict(), ensure_ascii=False)
        try:
            with self._lock:
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
                self.count += 1
        except OSError as exc:
            raise DatasetWriteError(str(self.path), f"写入失败 ({exc})") from exc

        logger.debug(f"[Dataset] 已写入: {record.source_url}")

    def read_all(self) -> list[dict]:
        """读取已写入的全部记录"""
        if not self.path.exists():
            return []

        records = []
        for line in self.path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line:
                records.append(json.loads(line))
        return records
