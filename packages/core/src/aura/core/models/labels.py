"""标签归一化与编解码

存储格式为 JSON 包装对象 {"labels": [...]} 的 UTF-8 字节。
空标签集合的存储形式是 None（缺省），而不是空列表。
"""

import json
from collections.abc import Iterable

import structlog
from pydantic import BaseModel

from ..exceptions import DecodeError

log = structlog.get_logger()


class _LabelsWrapper(BaseModel):
    """标签存储包装对象"""

    labels: list[str]


def normalize_labels(raw: Iterable[str]) -> list[str] | None:
    """归一化标签序列

    去除首尾空白、丢弃空项、大小写不敏感去重（保留首次出现的写法）、
    按小写键字典序排序。结果为空时返回 None。

    Args:
        raw: 原始标签序列

    Returns:
        归一化后的标签列表，或 None（无标签）
    """
    seen: set[str] = set()
    cleaned: list[str] = []
    for item in raw:
        label = item.strip()
        if not label:
            continue
        key = label.lower()
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(label)

    if not cleaned:
        return None
    return sorted(cleaned, key=str.lower)


def encode_labels(raw: Iterable[str]) -> bytes | None:
    """归一化并编码为存储字节，无标签时返回 None"""
    labels = normalize_labels(raw)
    if labels is None:
        return None
    return _LabelsWrapper(labels=labels).model_dump_json().encode("utf-8")


def _parse_labels_payload(data: bytes) -> list[str]:
    try:
        payload = json.loads(data.decode("utf-8"))
        return _LabelsWrapper.model_validate(payload).labels
    except (UnicodeDecodeError, ValueError) as e:
        # pydantic.ValidationError 是 ValueError 的子类
        raise DecodeError(f"标签数据解码失败: {e}") from e


def decode_labels(data: bytes | None) -> list[str]:
    """解码存储字节；缺省或格式错误时返回空列表"""
    if not data:
        return []
    try:
        return _parse_labels_payload(data)
    except DecodeError as e:
        log.debug("labels_decode_failed", error=str(e), size=len(data))
        return []
