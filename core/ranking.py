"""排序精炼：按组合分排序 -> 名次加成 -> 重排 -> 置信度过滤 -> 截断。"""

from __future__ import annotations

from typing import Sequence

from domain.category import MatchScore
from models.schemas import ScoringSection

_DEFAULT_SCORING = ScoringSection()


def position_factor(rank: int, bonus: float = 0.3) -> float:
    """名次（0 起）对应的系数 (1 - bonus) + bonus / (rank + 1)，恒 <= 1.0。"""
    return (1.0 - bonus) + bonus / (rank + 1)


def refine(
    scored: Sequence[MatchScore],
    settings: ScoringSection | None = None,
) -> list[MatchScore]:
    """
    对一次分类的全部品类得分做精炼，返回新列表（不修改输入）。

    1. 按 combined_score 降序稳定排序，同分保留目录顺序；
    2. 第 i 名 final_score = combined_score * (0.7 + 0.3 / (i + 1))；
    3. 按 final_score 降序稳定重排；
    4. 过滤 final_score < min_confidence；
    5. 截取前 max_results 条。结果可以为空列表。
    """
    s = settings or _DEFAULT_SCORING
    by_combined = sorted(scored, key=lambda m: m.combined_score, reverse=True)
    weighted = [
        m.model_copy(update={"final_score": m.combined_score * position_factor(i, s.position_bonus)})
        for i, m in enumerate(by_combined)
    ]
    weighted.sort(key=lambda m: m.final_score, reverse=True)
    kept = [m for m in weighted if m.final_score >= s.min_confidence]
    return kept[: s.max_results]
