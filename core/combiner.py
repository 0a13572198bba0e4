"""
三路得分加权组合：按有序规则表决定每个品类的有效权重，再做线性加权。

规则表按优先级排列，首条命中的规则生效，均未命中时使用调用方传入的基础权重。
新增权重档位只需在表中插入一条 WeightRule。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from domain.category import WeightVector
from models.schemas import ScoringSection


@dataclass(frozen=True)
class SignalScores:
    """单个品类的三路原始得分。"""

    keyword: float
    fuzzy: float
    embedding: float


@dataclass(frozen=True)
class WeightRule:
    """权重覆盖规则：predicate(scores) 为真时使用 weights。"""

    name: str
    predicate: Callable[[SignalScores], bool]
    weights: WeightVector


def build_weight_rules(settings: ScoringSection | None = None) -> tuple[WeightRule, ...]:
    """由打分参数生成规则表：关键词强命中优先，其次编辑距离强命中。"""
    s = settings or ScoringSection()
    return (
        WeightRule(
            name="keyword_dominant",
            predicate=lambda sc: sc.keyword >= s.keyword_override_threshold,
            weights=s.keyword_override_weights,
        ),
        WeightRule(
            name="fuzzy_dominant",
            predicate=lambda sc: sc.fuzzy >= s.fuzzy_override_threshold,
            weights=s.fuzzy_override_weights,
        ),
    )


DEFAULT_WEIGHT_RULES = build_weight_rules()


def select_weights(
    scores: SignalScores,
    base_weights: WeightVector,
    rules: tuple[WeightRule, ...] = DEFAULT_WEIGHT_RULES,
) -> tuple[str, WeightVector]:
    """返回 (命中规则名, 有效权重)；均未命中时为 ("base", base_weights)。不修改 base_weights。"""
    for rule in rules:
        if rule.predicate(scores):
            return rule.name, rule.weights
    return "base", base_weights


def combine(
    keyword_score: float,
    fuzzy_score: float,
    embedding_score: float,
    base_weights: WeightVector | None = None,
    rules: tuple[WeightRule, ...] = DEFAULT_WEIGHT_RULES,
) -> float:
    """combined = keyword * w.keyword + fuzzy * w.fuzzy + embedding * w.embedding，不做归一化。"""
    scores = SignalScores(keyword=keyword_score, fuzzy=fuzzy_score, embedding=embedding_score)
    _, w = select_weights(scores, base_weights or WeightVector(), rules)
    return (
        keyword_score * w.keyword
        + fuzzy_score * w.fuzzy
        + embedding_score * w.embedding
    )
