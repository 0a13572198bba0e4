"""app.output 单元测试：结果文本、评测与模型对比 Excel 写出、模型目录。"""

from __future__ import annotations

from pathlib import Path

import openpyxl  # type: ignore[import-untyped]

from app.output import (
    BENCHMARK_HEADERS,
    COMPARISON_HEADERS,
    format_comparison,
    format_model_catalog,
    format_results,
    format_stats,
    write_benchmark_excel,
    write_comparison_excel,
)
from app.benchmark import compute_stats
from domain.category import MatchScore
from models.schemas import (
    BenchmarkCaseResult,
    BenchmarkStats,
    EmbeddingModelSchema,
    EmbeddingSection,
    ModelComparisonResult,
)


def test_format_results_empty() -> None:
    assert format_results([]) == "未找到置信度足够的品类。"


def test_format_results_lines() -> None:
    results = [
        MatchScore(index=1, category="Plomería", keyword_score=1.0, fuzzy_score=1.0, final_score=0.7),
        MatchScore(index=0, category="Electricidad", embedding_score=1.0, final_score=0.2975),
    ]
    text = format_results(results)
    lines = text.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith(" 1. Plomería")
    assert "70.0%" in lines[0]
    assert "语义 100.0%" in lines[1]


def test_format_stats() -> None:
    stats = compute_stats([BenchmarkCaseResult(top1=True, top3=True, top5=True, rank=1)])
    assert "Top1 100.0% (1/1)" in format_stats(stats)


def test_write_benchmark_excel(tmp_path: Path) -> None:
    results = [
        BenchmarkCaseResult(
            test_id=1,
            query="fuga de agua",
            expected_category="Plomería",
            predictions=[MatchScore(index=1, category="Plomería", final_score=0.7)],
            top1=True,
            top3=True,
            top5=True,
            rank=1,
        ),
        BenchmarkCaseResult(test_id=2, query="xyz", expected_category="Electricidad"),
    ]
    out = tmp_path / "sub" / "result.xlsx"
    write_benchmark_excel(results, out)
    wb = openpyxl.load_workbook(out)
    ws = wb.active
    assert tuple(c.value for c in ws[1]) == BENCHMARK_HEADERS
    assert ws.cell(row=2, column=5).value == "Plomería"
    assert ws.cell(row=2, column=9).value == 1
    assert ws.cell(row=3, column=6).value == "否"
    assert ws.cell(row=3, column=2).font.color.rgb.endswith("FF0000")
    wb.close()


def test_format_stats_includes_timing() -> None:
    stats = compute_stats([BenchmarkCaseResult(top1=True, rank=1, inference_ms=12.0)])
    assert "平均耗时 12.0ms" in format_stats(stats)


def _comparison_results() -> list[ModelComparisonResult]:
    return [
        ModelComparisonResult(
            model=EmbeddingModelSchema(id="org/a", name="Model A"),
            stats=BenchmarkStats(total=4, top1_correct=3, top1_accuracy=75.0, average_inference_ms=20.0),
            total_seconds=3.0,
        ),
        ModelComparisonResult(
            model=EmbeddingModelSchema(id="org/b", name="Model B"),
            stats=BenchmarkStats(total=4, top1_correct=2, top1_accuracy=50.0, average_inference_ms=5.0),
            total_seconds=1.0,
        ),
        ModelComparisonResult(model=EmbeddingModelSchema(id="org/c", name="Model C"), error="加载向量模型失败: org/c"),
    ]


def test_format_comparison() -> None:
    lines = format_comparison(_comparison_results()).splitlines()
    assert "通过 3 / 失败 1" in lines[0]
    assert "失败: 加载向量模型失败" in lines[2]
    assert lines[3] == "准确率最高: Model A (75.0%)"
    assert lines[4] == "速度最快: Model B (5.0ms)"


def test_format_comparison_empty() -> None:
    assert format_comparison([]) == "没有可对比的模型。"


def test_write_comparison_excel(tmp_path: Path) -> None:
    out = tmp_path / "compare.xlsx"
    write_comparison_excel(_comparison_results(), out)
    wb = openpyxl.load_workbook(out)
    ws = wb.active
    assert tuple(c.value for c in ws[1]) == COMPARISON_HEADERS
    assert ws.cell(row=2, column=2).value == "org/a"
    assert ws.cell(row=2, column=3).value == 75.0
    assert ws.cell(row=2, column=8).value == 3
    assert ws.cell(row=2, column=9).value == 1
    assert ws.cell(row=4, column=1).font.color.rgb.endswith("FF0000")
    wb.close()


def test_format_model_catalog() -> None:
    section = EmbeddingSection()
    text = format_model_catalog(section.models, section.model_id)
    lines = text.splitlines()
    assert lines[0].startswith("* intfloat/multilingual-e5-small")
    assert "推荐" in lines[0]
    assert "384 维" in lines[0]
    assert any(line.startswith("  sentence-transformers/") for line in lines)
