"""
依赖注入：基于 typing.Annotated 与 Depends 标记，由 inject() 解析并返回配置等依赖。

用法：
    from core.config import inject, ScoringConfig

    scoring = inject(ScoringConfig)
"""

from __future__ import annotations

from typing import Annotated, Callable, get_args, get_origin


class Depends:
    """依赖标记：在 Annotated[T, Depends(getter)] 中保存解析函数 getter，由 inject() 调用。"""

    __slots__ = ("getter",)

    def __init__(self, getter: Callable[[], object]) -> None:
        self.getter = getter


def inject(typed: object) -> object:
    """
    解析 Annotated[T, Depends(getter)]，调用 getter() 并返回 T。
    若 typed 不是 Annotated 或没有 Depends 元数据，则抛出 TypeError。
    """
    if get_origin(typed) is not Annotated:
        raise TypeError(f"期望 Annotated 类型，得到: {typed}")
    for meta in get_args(typed)[1:]:
        if isinstance(meta, Depends):
            return meta.getter()
    raise TypeError(f"未找到 Depends 元数据: {typed}")
