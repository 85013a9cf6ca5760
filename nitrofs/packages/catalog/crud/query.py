"""查询构造：从一组可选的过滤条件与排序键组合出参数化的查询。

过滤值全部以绑定参数传入，LIKE 通配符（% 与 _）会被转义，调用方不会拼接 SQL 字符串。
新增一个过滤条件只需要在对应 CRUD 中多调用一次 ``QueryFilter`` 的方法。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import ColumnElement, or_
from sqlalchemy.orm import Query


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class QueryFilter:
    """按顺序收集的谓词列表，缺省值（None/空白）不产生任何条件。

    空白只用于判断是否提供了过滤值，绑定到查询中的始终是调用方传入的原值。
    """

    def __init__(self) -> None:
        self._conditions: list[ColumnElement[bool]] = []

    def equals(self, column: Any, value: Any) -> "QueryFilter":
        if value is not None:
            self._conditions.append(column == value)
        return self

    def contains(self, term: Optional[str], *columns: Any) -> "QueryFilter":
        """大小写不敏感的子串匹配，多个列之间为 OR。"""
        if _is_blank(term) or not columns:
            return self
        matches = [column.icontains(term, autoescape=True) for column in columns]
        self._conditions.append(or_(*matches) if len(matches) > 1 else matches[0])
        return self

    def startswith(self, column: Any, prefix: Optional[str]) -> "QueryFilter":
        if not _is_blank(prefix):
            self._conditions.append(column.startswith(prefix, autoescape=True))
        return self

    def apply(self, query: Query) -> Query:
        if self._conditions:
            query = query.filter(*self._conditions)
        return query


@dataclass(frozen=True)
class SortSpec:
    """排序键到 ORDER BY 子句的映射；未知或缺省的键使用 ``default``。"""

    options: Mapping[str, Sequence[Any]]
    default: Sequence[Any]
    tiebreak: Sequence[Any] = field(default_factory=tuple)

    def resolve(self, sort_key: Optional[str]) -> tuple[Any, ...]:
        key = _clean(sort_key)
        ordering = self.options.get(key, self.default) if key else self.default
        return (*ordering, *self.tiebreak)

    def apply(self, query: Query, sort_key: Optional[str]) -> Query:
        return query.order_by(*self.resolve(sort_key))
