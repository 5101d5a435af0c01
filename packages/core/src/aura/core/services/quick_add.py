"""快速添加输入解析

按空格切分输入：
- "#xxx" 视为项目名（多个时取最后一个）
- today / tomorrow / nextweek / next-week（不区分大小写）视为截止时间
- 其余 token 拼接为标题
"""

from datetime import datetime, timedelta

from pydantic import BaseModel, Field

_DATE_WORDS: dict[str, timedelta] = {
    "today": timedelta(0),
    "tomorrow": timedelta(days=1),
    "nextweek": timedelta(days=7),
    "next-week": timedelta(days=7),
}


class ParsedQuickAdd(BaseModel):
    """快速添加解析结果"""

    title: str = Field(description="去除项目与日期 token 后的标题")
    project: str | None = Field(default=None, description="#project token")
    due_date: datetime | None = Field(default=None, description="日期词对应的时间")


def parse_quick_add(text: str, now: datetime) -> ParsedQuickAdd:
    """解析快速添加输入

    Args:
        text: 用户输入
        now: 日期词的参考时间
    """
    project: str | None = None
    due_date: datetime | None = None
    remainder: list[str] = []

    for token in text.split():
        if token.startswith("#") and len(token) > 1:
            project = token[1:]
            continue
        offset = _DATE_WORDS.get(token.lower())
        if offset is not None:
            due_date = now + offset
            continue
        remainder.append(token)

    return ParsedQuickAdd(
        title=" ".join(remainder),
        project=project,
        due_date=due_date,
    )
