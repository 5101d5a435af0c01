"""通用属性编辑 -- 字段描述表、属性值类型与差异编辑器"""

from .editor import AttributeDiffEditor, AttributeFilter, AttributeRow
from .schema import STANDARD_FIELDS, TASK_SCHEMA, FieldDescriptor, build_task_schema
from .values import (
    BinaryValue,
    BoolValue,
    DateValue,
    FieldValue,
    FloatValue,
    IdValue,
    IntValue,
    OtherValue,
    StringValue,
    coerce_value,
    preview,
    values_equal,
    wrap_value,
)

__all__ = [
    # 编辑器
    "AttributeDiffEditor",
    "AttributeFilter",
    "AttributeRow",
    # 描述表
    "FieldDescriptor",
    "TASK_SCHEMA",
    "STANDARD_FIELDS",
    "build_task_schema",
    # 属性值
    "FieldValue",
    "StringValue",
    "BoolValue",
    "DateValue",
    "IntValue",
    "FloatValue",
    "IdValue",
    "BinaryValue",
    "OtherValue",
    "coerce_value",
    "wrap_value",
    "values_equal",
    "preview",
]
