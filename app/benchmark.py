"""批量准确率评测：逐条分类测试用例，统计 Top-1/3/5 命中、正确答案名次与推理耗时；支持多模型对比。"""

import asyncio
import logging
import time
from typing import Sequence

from tqdm import tqdm  # type: ignore[import-untyped]

from core import Category, MatchScore, WeightVector, classify_query
from core.classifier import QueryEmbedder, Vector
from core.embedding import EmbeddingProvider
from models.schemas import (
    BenchmarkCaseResult,
    BenchmarkStats,
    ModelComparisonResult,
    ScoringSection,
    TestCaseSchema,
)

logger = logging.getLogger(__name__)

# 每条用例保存的预测数
STORED_PREDICTIONS = 5


def evaluate_case(
    test_case: TestCaseSchema,
    predictions: Sequence[MatchScore],
    inference_ms: float = 0.0,
) -> BenchmarkCaseResult:
    """根据单条用例的预测结果计算 Top-K 命中与名次（1 起，不在结果中为 None）。"""
    acceptable = test_case.acceptable
    names = [p.category for p in predictions]
    rank = next((i + 1 for i, name in enumerate(names) if name in acceptable), None)
    return BenchmarkCaseResult(
        test_id=test_case.id,
        query=test_case.query,
        expected_category=test_case.expected_category,
        alternative_categories=list(test_case.alternative_categories),
        predictions=list(predictions[:STORED_PREDICTIONS]),
        top1=any(n in acceptable for n in names[:1]),
        top3=any(n in acceptable for n in names[:3]),
        top5=any(n in acceptable for n in names[:5]),
        rank=rank,
        inference_ms=inference_ms,
    )


def compute_stats(results: Sequence[BenchmarkCaseResult]) -> BenchmarkStats:
    """汇总准确率（百分比）与平均耗时；无结果时各项为 0。"""
    total = len(results)
    if total == 0:
        return BenchmarkStats()
    top1 = sum(1 for r in results if r.top1)
    top3 = sum(1 for r in results if r.top3)
    top5 = sum(1 for r in results if r.top5)
    return BenchmarkStats(
        total=total,
        top1_correct=top1,
        top3_correct=top3,
        top5_correct=top5,
        top1_accuracy=top1 / total * 100,
        top3_accuracy=top3 / total * 100,
        top5_accuracy=top5 / total * 100,
        average_inference_ms=sum(r.inference_ms for r in results) / total,
    )


async def run_benchmark(
    test_cases: Sequence[TestCaseSchema],
    categories: Sequence[Category],
    category_vectors: Sequence[Vector],
    embedder: QueryEmbedder,
    weights: WeightVector | None = None,
    settings: ScoringSection | None = None,
) -> list[BenchmarkCaseResult]:
    """
    逐条运行测试用例。单条用例失败时异常向上抛出，不做部分汇总。
    返回与 test_cases 顺序一致的评测结果。
    """
    results: list[BenchmarkCaseResult] = []
    for test_case in tqdm(test_cases, desc="评测用例", unit="条"):
        start = time.perf_counter()
        predictions = await classify_query(
            test_case.query, categories, category_vectors, embedder, weights, settings
        )
        result = evaluate_case(test_case, predictions, (time.perf_counter() - start) * 1000)
        logger.info(
            "用例 %d [%s]：期望 %s，Top1 %s，名次 %s",
            test_case.id,
            test_case.query[:40],
            test_case.expected_category,
            predictions[0].category if predictions else "-",
            result.rank,
        )
        results.append(result)
    return results


async def compare_models(
    model_ids: Sequence[str],
    test_cases: Sequence[TestCaseSchema],
    categories: Sequence[Category],
    provider: EmbeddingProvider,
    weights: WeightVector | None = None,
    settings: ScoringSection | None = None,
) -> list[ModelComparisonResult]:
    """
    依次切换到每个模型：加载、编码品类、跑完整测试集并汇总。
    同一时刻只保留一个模型在内存中；某个模型加载或编码失败时记录错误并继续下一个。
    """
    results: list[ModelComparisonResult] = []
    for model_id in model_ids:
        provider.select_model(model_id)
        model = provider.spec
        logger.info("对比评测模型: %s", model.id)
        start = time.perf_counter()
        try:
            category_vectors = await asyncio.to_thread(provider.encode_categories, categories)
        except RuntimeError as e:
            logger.warning("模型 %s 不可用，跳过: %s", model.id, e)
            results.append(ModelComparisonResult(model=model, error=str(e)))
            continue
        case_results = await run_benchmark(
            test_cases, categories, category_vectors, provider, weights, settings
        )
        results.append(
            ModelComparisonResult(
                model=model,
                stats=compute_stats(case_results),
                total_seconds=time.perf_counter() - start,
            )
        )
    provider.dispose()
    return results


def best_models(
    results: Sequence[ModelComparisonResult],
) -> tuple[ModelComparisonResult | None, ModelComparisonResult | None]:
    """返回 (Top-1 准确率最高, 平均耗时最短)；并列时取靠前者，失败的模型不参与。"""
    usable = [r for r in results if r.ok]
    if not usable:
        return None, None
    best = max(usable, key=lambda r: r.stats.top1_accuracy)
    fastest = min(usable, key=lambda r: r.stats.average_inference_ms)
    return best, fastest
