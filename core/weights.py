"""权重调节：归一化与单项滑块调整（其余两项按原比例分摊剩余权重）。"""

from __future__ import annotations

from domain.category import WeightVector

WEIGHT_NAMES = ("keyword", "fuzzy", "embedding")

# 另外两项权重之和低于此值时视为 0，剩余权重平分
_EPS = 0.001


def normalize_weights(weights: WeightVector) -> WeightVector:
    """缩放为和为 1.0；三项全为 0 时返回均分权重。"""
    total = weights.total
    if total <= 0.0:
        third = 1.0 / 3.0
        return WeightVector(keyword=third, fuzzy=third, embedding=third)
    return WeightVector(
        keyword=weights.keyword / total,
        fuzzy=weights.fuzzy / total,
        embedding=weights.embedding / total,
    )


def rebalance_weights(weights: WeightVector, name: str, value: float) -> WeightVector:
    """
    将 name 对应权重设为 value（截断到 [0, 1]），剩余 1 - value 按另外两项原比例分配。
    另外两项之和约为 0 时平分。
    """
    if name not in WEIGHT_NAMES:
        raise ValueError(f"未知权重项: {name}，可选 {WEIGHT_NAMES}")
    value = min(max(value, 0.0), 1.0)
    remaining = 1.0 - value
    first, second = (n for n in WEIGHT_NAMES if n != name)
    a = getattr(weights, first)
    b = getattr(weights, second)
    ratio = a / (a + b) if a + b > _EPS else 0.5
    return WeightVector(**{name: value, first: remaining * ratio, second: remaining * (1.0 - ratio)})
