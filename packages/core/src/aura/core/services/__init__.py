"""AURA Core 业务服务层"""

from .action_service import ActionService
from .quick_add import ParsedQuickAdd, parse_quick_add

__all__ = ["ActionService", "ParsedQuickAdd", "parse_quick_add"]
