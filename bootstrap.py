"""
依赖组装：为 CLI 提供统一入口，仅做依赖汇集，不包含业务逻辑与算法。
"""

from __future__ import annotations

from app import (
    compare_models,
    compute_stats,
    format_comparison,
    format_model_catalog,
    format_results,
    format_stats,
    run_benchmark,
    write_benchmark_excel,
    write_comparison_excel,
)
from core import (
    Category,
    EmbeddingProvider,
    MatchScore,
    WeightVector,
    classify_query,
    load_categories,
    load_test_cases,
    normalize_weights,
    rebalance_weights,
)
from core.config import (
    AppSectionConfig,
    EmbeddingConfig,
    ScoringConfig,
    get_data_dir,
    get_log_dir,
    get_model_dir,
    get_output_dir,
    inject,
    load_app_config,
    normalize_input_path,
)
from models.schemas import RunConfigSchema, TestCaseSchema

__all__ = [
    "AppSectionConfig",
    "Category",
    "EmbeddingConfig",
    "EmbeddingProvider",
    "MatchScore",
    "RunConfigSchema",
    "ScoringConfig",
    "TestCaseSchema",
    "WeightVector",
    "classify_query",
    "compare_models",
    "compute_stats",
    "format_comparison",
    "format_model_catalog",
    "format_results",
    "format_stats",
    "get_data_dir",
    "get_log_dir",
    "get_model_dir",
    "get_output_dir",
    "inject",
    "load_app_config",
    "load_categories",
    "load_test_cases",
    "normalize_input_path",
    "normalize_weights",
    "rebalance_weights",
    "run_benchmark",
    "write_benchmark_excel",
    "write_comparison_excel",
]
