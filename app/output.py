"""结果展示与导出：终端表格、评测汇总、评测结果 Excel（Top-1 未命中行标红）、多模型对比与模型目录。"""

from pathlib import Path
from typing import Sequence

from core import MatchScore
from core.utils.excel_io import write_sheet
from models.schemas import BenchmarkCaseResult, BenchmarkStats, EmbeddingModelSchema, ModelComparisonResult

from .benchmark import best_models

BENCHMARK_HEADERS = ("用例", "查询", "期望品类", "备选品类", "Top1 预测", "Top1", "Top3", "Top5", "名次")
COMPARISON_HEADERS = (
    "模型",
    "模型 id",
    "Top1 准确率",
    "Top3 准确率",
    "Top5 准确率",
    "平均耗时(ms)",
    "总耗时(s)",
    "通过",
    "失败",
    "错误",
)


def _pct(value: float) -> str:
    return f"{value * 100:.1f}%"


def format_results(results: Sequence[MatchScore]) -> str:
    """将排序结果格式化为多行文本：名次、品类、最终得分及三路得分明细。"""
    if not results:
        return "未找到置信度足够的品类。"
    lines = []
    for i, r in enumerate(results, start=1):
        lines.append(
            f"{i:>2}. {r.category:<30} {_pct(r.final_score):>6}  "
            f"(关键词 {_pct(r.keyword_score)} / 模糊 {_pct(r.fuzzy_score)} / 语义 {_pct(r.embedding_score)})"
        )
    return "\n".join(lines)


def format_stats(stats: BenchmarkStats) -> str:
    """评测汇总文本。"""
    return (
        f"用例 {stats.total} 条："
        f"Top1 {stats.top1_accuracy:.1f}% ({stats.top1_correct}/{stats.total})，"
        f"Top3 {stats.top3_accuracy:.1f}% ({stats.top3_correct}/{stats.total})，"
        f"Top5 {stats.top5_accuracy:.1f}% ({stats.top5_correct}/{stats.total})，"
        f"平均耗时 {stats.average_inference_ms:.1f}ms"
    )


def _benchmark_row(result: BenchmarkCaseResult) -> tuple[object, ...]:
    top1_prediction = result.predictions[0].category if result.predictions else ""
    return (
        result.test_id,
        result.query,
        result.expected_category,
        "、".join(result.alternative_categories),
        top1_prediction,
        "是" if result.top1 else "否",
        "是" if result.top3 else "否",
        "是" if result.top5 else "否",
        result.rank if result.rank is not None else "",
    )


def write_benchmark_excel(results: Sequence[BenchmarkCaseResult], output_path: Path) -> None:
    """将评测结果写入 Excel，Top-1 未命中行标红。"""
    rows = [_benchmark_row(r) for r in results]
    write_sheet(
        output_path,
        "评测结果",
        BENCHMARK_HEADERS,
        rows,
        failed_row_predicate=lambda row: row[5] != "是",
    )


def format_model_catalog(models: Sequence[EmbeddingModelSchema], current_id: str = "") -> str:
    """模型目录文本：当前默认模型以 * 标记，推荐模型标注「推荐」。"""
    lines = []
    for m in models:
        mark = "*" if m.id == current_id else " "
        tags = [t for t in (m.size, f"{m.dimensions} 维" if m.dimensions else "", "推荐" if m.recommended else "") if t]
        lines.append(f"{mark} {m.id}  {m.name}  [{', '.join(tags)}]")
        if m.description:
            lines.append(f"    {m.description}")
    return "\n".join(lines)


def format_comparison(results: Sequence[ModelComparisonResult]) -> str:
    """多模型对比文本：每个模型一行，末尾给出准确率最高与速度最快的模型。"""
    if not results:
        return "没有可对比的模型。"
    lines = []
    for r in results:
        name = r.model.name or r.model.id
        if not r.ok:
            lines.append(f"{name:<32} 失败: {r.error}")
            continue
        s = r.stats
        lines.append(
            f"{name:<32} Top1 {s.top1_accuracy:5.1f}%  Top3 {s.top3_accuracy:5.1f}%  Top5 {s.top5_accuracy:5.1f}%  "
            f"平均 {s.average_inference_ms:.1f}ms  总计 {r.total_seconds:.1f}s  通过 {s.passed} / 失败 {s.failed}"
        )
    best, fastest = best_models(results)
    if best is not None and fastest is not None and len(results) > 1:
        lines.append(f"准确率最高: {best.model.name or best.model.id} ({best.stats.top1_accuracy:.1f}%)")
        lines.append(f"速度最快: {fastest.model.name or fastest.model.id} ({fastest.stats.average_inference_ms:.1f}ms)")
    return "\n".join(lines)


def _comparison_row(result: ModelComparisonResult) -> tuple[object, ...]:
    s = result.stats
    if not result.ok:
        return (result.model.name, result.model.id, "", "", "", "", "", "", "", result.error)
    return (
        result.model.name,
        result.model.id,
        round(s.top1_accuracy, 1),
        round(s.top3_accuracy, 1),
        round(s.top5_accuracy, 1),
        round(s.average_inference_ms, 1),
        round(result.total_seconds, 1),
        s.passed,
        s.failed,
        "",
    )


def write_comparison_excel(results: Sequence[ModelComparisonResult], output_path: Path) -> None:
    """将多模型对比写入 Excel，加载失败的模型行标红。"""
    rows = [_comparison_row(r) for r in results]
    write_sheet(
        output_path,
        "模型对比",
        COMPARISON_HEADERS,
        rows,
        failed_row_predicate=lambda row: bool(row[-1]),
    )
