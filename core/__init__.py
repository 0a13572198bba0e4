"""
匹配核心：关键词 / 编辑距离 / 向量三路打分、加权组合、排序精炼与分类编排。
"""

from domain.category import Category, MatchScore, WeightVector
from .classifier import InvalidInputError, classify, classify_query
from .combiner import DEFAULT_WEIGHT_RULES, WeightRule, build_weight_rules, combine, select_weights
from .embedding import EmbeddingProvider
from .fuzzy import fuzzy_score
from .keyword import keyword_score
from .loaders import load_categories, load_test_cases
from .ranking import refine
from .weights import normalize_weights, rebalance_weights

__all__ = [
    "Category",
    "MatchScore",
    "WeightVector",
    "InvalidInputError",
    "classify",
    "classify_query",
    "DEFAULT_WEIGHT_RULES",
    "WeightRule",
    "build_weight_rules",
    "combine",
    "select_weights",
    "EmbeddingProvider",
    "fuzzy_score",
    "keyword_score",
    "load_categories",
    "load_test_cases",
    "refine",
    "normalize_weights",
    "rebalance_weights",
]
