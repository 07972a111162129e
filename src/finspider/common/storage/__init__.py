"""Common Storage模块 - 输出层"""

from .dataset import JsonlRecordSink, MemoryRecordSink, RecordSink

__all__ = [
    "RecordSink",
    "JsonlRecordSink",
    "MemoryRecordSink",
]
