"""分类编排：对每个品类计算关键词 / 编辑距离 / 向量三路得分，组合后交给排序精炼。"""

from __future__ import annotations

import logging
import math
import time
from typing import Protocol, Sequence

from domain.category import Category, MatchScore, WeightVector
from models.schemas import ScoringSection

from .combiner import DEFAULT_WEIGHT_RULES, WeightRule, build_weight_rules, combine
from .fuzzy import fuzzy_score
from .keyword import keyword_score
from .ranking import refine
from .utils.similarity import cosine_similarity

logger = logging.getLogger(__name__)

Vector = Sequence[float]


class InvalidInputError(ValueError):
    """分类输入不满足前置条件（品类数与向量数不一致、向量维度不一致）。"""


class QueryEmbedder(Protocol):
    """查询向量提供方：异步返回查询文本的向量。"""

    async def embed_query(self, text: str) -> list[float]: ...


def _validate_inputs(
    categories: Sequence[Category],
    category_vectors: Sequence[Vector],
    query_vector: Vector,
) -> None:
    """在任何打分之前校验数量与维度，不满足时抛出 InvalidInputError。"""
    if len(categories) != len(category_vectors):
        raise InvalidInputError(
            f"品类数与品类向量数不一致: {len(categories)} vs {len(category_vectors)}"
        )
    dim = len(query_vector)
    for i, vec in enumerate(category_vectors):
        if len(vec) != dim:
            raise InvalidInputError(f"第 {i} 个品类向量维度 {len(vec)} 与查询向量维度 {dim} 不一致")


def _embedding_score(query_vector: Vector, category_vector: Vector, category: Category) -> float:
    """余弦相似度；全零向量导致的 NaN 按 0 相似度处理。"""
    cos = cosine_similarity(query_vector, category_vector)
    if not math.isfinite(cos):
        logger.warning("品类 [%s] 向量退化（全零），语义相似度按 0 处理", category.name)
        return 0.0
    return cos


def score_category(
    index: int,
    query: str,
    category: Category,
    category_vector: Vector,
    query_vector: Vector,
    base_weights: WeightVector,
    settings: ScoringSection,
    rules: tuple[WeightRule, ...],
) -> MatchScore:
    """单个品类的三路得分与组合分；final_score 由 refine 填充。"""
    kw = keyword_score(query, category.synonyms, settings)
    fz = fuzzy_score(query, category.synonyms, settings)
    emb = _embedding_score(query_vector, category_vector, category)
    combined = combine(kw, fz, emb, base_weights, rules)
    return MatchScore(
        index=index,
        category=category.name,
        keyword_score=kw,
        fuzzy_score=fz,
        embedding_score=emb,
        combined_score=combined,
    )


def classify(
    query: str,
    categories: Sequence[Category],
    category_vectors: Sequence[Vector],
    query_vector: Vector,
    base_weights: WeightVector | None = None,
    settings: ScoringSection | None = None,
) -> list[MatchScore]:
    """
    对查询在整个品类目录上打分并返回排序结果（最多 max_results 条，可能为空）。

    Raises:
        InvalidInputError: 品类数与向量数不一致，或任一品类向量维度与查询向量不同。
    """
    _validate_inputs(categories, category_vectors, query_vector)
    s = settings or ScoringSection()
    weights = base_weights or s.default_weights
    rules = DEFAULT_WEIGHT_RULES if settings is None else build_weight_rules(s)

    start = time.perf_counter()
    scored = [
        score_category(i, query, category, category_vectors[i], query_vector, weights, s, rules)
        for i, category in enumerate(categories)
    ]
    results = refine(scored, s)
    logger.debug(
        "分类完成 [%s]：%d 个品类，返回 %d 条，耗时 %.2fms",
        query[:40],
        len(categories),
        len(results),
        (time.perf_counter() - start) * 1000,
    )
    for r in results[:3]:
        logger.debug(
            "  %s: final=%.1f%% keyword=%.1f%% fuzzy=%.1f%% embedding=%.1f%%",
            r.category,
            r.final_score * 100,
            r.keyword_score * 100,
            r.fuzzy_score * 100,
            r.embedding_score * 100,
        )
    return results


async def classify_query(
    query: str,
    categories: Sequence[Category],
    category_vectors: Sequence[Vector],
    embedder: QueryEmbedder,
    base_weights: WeightVector | None = None,
    settings: ScoringSection | None = None,
) -> list[MatchScore]:
    """
    端到端分类：获取一次查询向量后调用 classify。
    空白查询直接返回 []，不调用向量提供方。
    """
    if not query.strip():
        return []
    query_vector = await embedder.embed_query(query)
    return classify(query, categories, category_vectors, query_vector, base_weights, settings)
