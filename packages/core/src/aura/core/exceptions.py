"""Core 异常体系

纯计算（状态引擎、标签归一化）不抛异常；只有提交校验与持久化可能失败。
"""


class CoreError(Exception):
    """Core 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 调用方是否可以修正输入或重试
        """
        super().__init__(message)
        self.recoverable = recoverable


class ValidationError(CoreError):
    """提交前校验失败（标题为空、字段类型无法转换、只读字段等）"""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, recoverable=True)
        self.field = field


class StorageError(CoreError):
    """持久化失败

    事务已回滚；调用方不应推进编辑器快照，重试时看到相同的变更集合。
    """

    def __init__(self, operation: str, original_error: Exception) -> None:
        """
        Args:
            operation: 失败的存储操作（save / delete / fetch）
            original_error: 原始异常
        """
        super().__init__(
            f"存储操作失败: {operation} -- {original_error}",
            recoverable=True,
        )
        self.operation = operation
        self.original_error = original_error


class DecodeError(CoreError):
    """存储的标签数据格式错误

    仅在解码内部使用，调用方拿到的是空标签序列。
    """

    def __init__(self, message: str = "标签数据解码失败") -> None:
        super().__init__(message, recoverable=True)
