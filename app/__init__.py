"""应用层：批量评测、多模型对比、结果展示与导出。"""

from .benchmark import best_models, compare_models, compute_stats, evaluate_case, run_benchmark
from .output import (
    format_comparison,
    format_model_catalog,
    format_results,
    format_stats,
    write_benchmark_excel,
    write_comparison_excel,
)

__all__ = [
    "best_models",
    "compare_models",
    "compute_stats",
    "evaluate_case",
    "run_benchmark",
    "format_comparison",
    "format_model_catalog",
    "format_results",
    "format_stats",
    "write_benchmark_excel",
    "write_comparison_excel",
]
