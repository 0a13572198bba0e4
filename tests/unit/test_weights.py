"""core.weights 单元测试。"""

from __future__ import annotations

import pytest

from core.weights import normalize_weights, rebalance_weights
from domain.category import WeightVector


def test_normalize_scales_to_one() -> None:
    w = normalize_weights(WeightVector(keyword=2.0, fuzzy=1.0, embedding=1.0))
    assert (w.keyword, w.fuzzy, w.embedding) == pytest.approx((0.5, 0.25, 0.25))
    assert w.total == pytest.approx(1.0)


def test_normalize_all_zero_splits_equally() -> None:
    w = normalize_weights(WeightVector(keyword=0.0, fuzzy=0.0, embedding=0.0))
    assert (w.keyword, w.fuzzy, w.embedding) == pytest.approx((1 / 3, 1 / 3, 1 / 3))


def test_rebalance_keeps_ratio_of_others() -> None:
    w = rebalance_weights(WeightVector(), "keyword", 0.5)
    assert w.keyword == pytest.approx(0.5)
    assert w.fuzzy == pytest.approx(0.5 * 0.30 / 0.65)
    assert w.embedding == pytest.approx(0.5 * 0.35 / 0.65)
    assert w.total == pytest.approx(1.0)


def test_rebalance_others_zero_split_evenly() -> None:
    w = rebalance_weights(WeightVector(keyword=1.0, fuzzy=0.0, embedding=0.0), "keyword", 0.4)
    assert w.fuzzy == pytest.approx(0.3)
    assert w.embedding == pytest.approx(0.3)


def test_rebalance_clamps_value() -> None:
    w = rebalance_weights(WeightVector(), "embedding", 1.5)
    assert w.embedding == 1.0
    assert w.keyword == pytest.approx(0.0)
    assert w.fuzzy == pytest.approx(0.0)


def test_rebalance_unknown_name() -> None:
    with pytest.raises(ValueError, match="未知权重项"):
        rebalance_weights(WeightVector(), "semantic", 0.5)
