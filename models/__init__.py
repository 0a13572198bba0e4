"""Pydantic 模型与 Schema：配置、输入文件、基准测试结果。"""

from .schemas import (
    AppConfigSchema,
    AppSection,
    BenchmarkCaseResult,
    BenchmarkStats,
    CategoryCatalogSchema,
    EmbeddingModelSchema,
    EmbeddingSection,
    ModelComparisonResult,
    RunConfigSchema,
    ScoringSection,
    TestCaseFileSchema,
    TestCaseSchema,
)

__all__ = [
    "AppConfigSchema",
    "AppSection",
    "BenchmarkCaseResult",
    "BenchmarkStats",
    "CategoryCatalogSchema",
    "EmbeddingModelSchema",
    "EmbeddingSection",
    "ModelComparisonResult",
    "RunConfigSchema",
    "ScoringSection",
    "TestCaseFileSchema",
    "TestCaseSchema",
]
