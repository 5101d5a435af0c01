"""属性值标签联合类型

每种字段类型对应一个不可变的 pydantic 模型，kind 字段作为判别标签。
缺省值统一用 None 表示，不包装成模型。

判等规则：
- 缺省 vs 缺省 -> 相等
- 字符串 / 布尔 / 整数 / 浮点 / 标识符 / 二进制 -> 精确相等
- 日期 -> 相差小于 DATE_EQUALITY_TOLERANCE_S 秒视为相等
- 类型不一致（包括缺省 vs 有值）-> 不相等
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..config import DATE_EQUALITY_TOLERANCE_S
from ..exceptions import ValidationError
from ..models.enums import FieldKind


class _BaseValue(BaseModel):
    """属性值基类"""

    model_config = ConfigDict(frozen=True)

    def matches(self, other: "_BaseValue") -> bool:
        """同类型且值精确相等"""
        return type(other) is type(self) and other.value == self.value  # type: ignore[attr-defined]


class StringValue(_BaseValue):
    kind: Literal[FieldKind.STRING] = FieldKind.STRING
    value: str


class BoolValue(_BaseValue):
    kind: Literal[FieldKind.BOOL] = FieldKind.BOOL
    value: bool


class DateValue(_BaseValue):
    kind: Literal[FieldKind.DATE] = FieldKind.DATE
    value: datetime

    def matches(self, other: _BaseValue) -> bool:
        """日期容忍亚秒级误差"""
        if not isinstance(other, DateValue):
            return False
        delta = self.value.timestamp() - other.value.timestamp()
        return abs(delta) < DATE_EQUALITY_TOLERANCE_S


class IntValue(_BaseValue):
    kind: Literal[FieldKind.INT] = FieldKind.INT
    value: int


class FloatValue(_BaseValue):
    kind: Literal[FieldKind.FLOAT] = FieldKind.FLOAT
    value: float


class IdValue(_BaseValue):
    kind: Literal[FieldKind.ID] = FieldKind.ID
    value: str


class BinaryValue(_BaseValue):
    kind: Literal[FieldKind.BINARY] = FieldKind.BINARY
    value: bytes


class OtherValue(_BaseValue):
    """无法编辑的值，仅用于展示"""

    kind: Literal[FieldKind.OTHER] = FieldKind.OTHER
    value: Any


FieldValue = Annotated[
    StringValue
    | BoolValue
    | DateValue
    | IntValue
    | FloatValue
    | IdValue
    | BinaryValue
    | OtherValue,
    Field(discriminator="kind"),
]

_VALUE_TYPES: dict[FieldKind, type[_BaseValue]] = {
    FieldKind.STRING: StringValue,
    FieldKind.BOOL: BoolValue,
    FieldKind.DATE: DateValue,
    FieldKind.INT: IntValue,
    FieldKind.FLOAT: FloatValue,
    FieldKind.ID: IdValue,
    FieldKind.BINARY: BinaryValue,
    FieldKind.OTHER: OtherValue,
}

# 宽松模式转换：允许 "true" -> True、ISO 字符串 -> datetime 等
_ADAPTERS: dict[FieldKind, TypeAdapter] = {
    FieldKind.STRING: TypeAdapter(str),
    FieldKind.BOOL: TypeAdapter(bool),
    FieldKind.DATE: TypeAdapter(datetime),
    FieldKind.INT: TypeAdapter(int),
    FieldKind.FLOAT: TypeAdapter(float),
    FieldKind.ID: TypeAdapter(str),
    FieldKind.BINARY: TypeAdapter(bytes),
}


def wrap_value(kind: FieldKind, raw: Any) -> FieldValue | None:
    """将记录中读取的原始值包装为属性值（不做转换）"""
    if raw is None:
        return None
    return _VALUE_TYPES[kind](value=raw)  # type: ignore[return-value]


def coerce_value(kind: FieldKind, raw: Any, field: str | None = None) -> FieldValue | None:
    """按字段类型转换用户输入

    Args:
        kind: 字段类型
        raw: 输入值，None 表示清空
        field: 字段名（仅用于错误信息）

    Returns:
        转换后的属性值或 None

    Raises:
        ValidationError: 输入无法转换为该字段类型
    """
    if raw is None:
        return None

    if isinstance(raw, _BaseValue):
        if raw.kind != kind:  # type: ignore[attr-defined]
            raise ValidationError(
                f"字段类型不匹配: 期望 {kind}，实际 {raw.kind}",  # type: ignore[attr-defined]
                field=field,
            )
        return raw  # type: ignore[return-value]

    if kind == FieldKind.OTHER:
        raise ValidationError("该字段不支持编辑", field=field)

    if kind == FieldKind.FLOAT and isinstance(raw, str):
        # 兼容逗号小数点
        raw = raw.strip().replace(",", ".")

    try:
        converted = _ADAPTERS[kind].validate_python(raw)
    except PydanticValidationError as e:
        raise ValidationError(
            f"无法转换为 {kind}: {raw!r}",
            field=field,
        ) from e
    return _VALUE_TYPES[kind](value=converted)  # type: ignore[return-value]


def values_equal(left: FieldValue | None, right: FieldValue | None) -> bool:
    """按字段类型判等"""
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    return left.matches(right)


def preview(value: FieldValue | None) -> str:
    """属性值的单行展示文本"""
    if value is None:
        return "nil"
    if isinstance(value, DateValue):
        return value.value.isoformat(sep=" ", timespec="minutes")
    if isinstance(value, BinaryValue):
        return f"<{len(value.value)} bytes>"
    return str(value.value)
