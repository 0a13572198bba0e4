"""
Pydantic V2 Schema：统一配置、品类目录、测试用例与基准测试结果。

- AppConfigSchema: app_config.yaml 根结构（scoring / embedding / app 三节）。
- ScoringSection: 打分引擎全部可调常量，默认值即标准算法参数。
- EmbeddingSection / EmbeddingModelSchema: 向量模型目录与运行参数。
- CategoryCatalogSchema / TestCaseSchema: JSON 输入文件解析。
- BenchmarkCaseResult / BenchmarkStats: 批量准确率测试输出。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from domain.category import Category, MatchScore, WeightVector


# ----- 打分参数 -----


class ScoringSection(BaseModel):
    """打分引擎参数：关键词、编辑距离、权重覆盖规则、位置加权与置信度过滤。"""

    min_word_length: int = Field(default=3, ge=1, description="参与逐词匹配的最短词长")
    keyword_word_weight: float = Field(default=0.7, ge=0.0, description="部分关键词得分中命中词比例的系数")
    keyword_length_weight: float = Field(default=0.1, ge=0.0, description="部分关键词得分中最长命中词长度的系数")
    keyword_length_norm: float = Field(default=10.0, gt=0.0, description="最长命中词长度的归一化分母")
    keyword_partial_cap: float = Field(default=0.85, ge=0.0, le=1.0, description="部分关键词得分上限")
    fuzzy_threshold: float = Field(default=80.0, ge=0.0, le=100.0, description="编辑距离相似比阈值（0-100，需严格大于）")
    fuzzy_word_discount: float = Field(default=0.8, ge=0.0, le=1.0, description="逐词编辑距离命中的折扣")
    keyword_override_threshold: float = Field(default=0.8, ge=0.0, le=1.0, description="关键词强命中阈值")
    fuzzy_override_threshold: float = Field(default=0.85, ge=0.0, le=1.0, description="编辑距离强命中阈值")
    keyword_override_weights: WeightVector = Field(
        default_factory=lambda: WeightVector(keyword=0.50, fuzzy=0.20, embedding=0.30),
        description="关键词强命中时的有效权重",
    )
    fuzzy_override_weights: WeightVector = Field(
        default_factory=lambda: WeightVector(keyword=0.25, fuzzy=0.45, embedding=0.30),
        description="编辑距离强命中时的有效权重",
    )
    default_weights: WeightVector = Field(default_factory=WeightVector, description="默认基础权重")
    position_bonus: float = Field(default=0.3, ge=0.0, le=1.0, description="名次加成占比，第 1 名获得全部加成")
    min_confidence: float = Field(default=0.15, ge=0.0, description="最终得分低于此值的结果被过滤")
    max_results: int = Field(default=10, ge=0, description="最多返回条数")


# ----- 向量模型 -----


class EmbeddingModelSchema(BaseModel):
    """模型目录中的单个向量模型。"""

    id: str = Field(description="模型标识（sentence-transformers / Hugging Face 名称）")
    name: str = Field(default="", description="展示名称")
    requires_prefixes: bool = Field(default=False, description="是否需要 query: / passage: 前缀（E5 系列）")
    dimensions: int = Field(default=0, ge=0, description="向量维度，0 表示未知")
    size: str = Field(default="", description="模型体积说明")
    description: str = Field(default="", description="模型说明")
    recommended: bool = Field(default=False, description="是否推荐")

    @field_validator("id", "name", "size", "description", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()


def _default_models() -> list[EmbeddingModelSchema]:
    return [
        EmbeddingModelSchema(
            id="intfloat/multilingual-e5-small",
            name="Multilingual E5 Small",
            requires_prefixes=True,
            dimensions=384,
            size="118MB",
            description="多语言 E5，需 query:/passage: 前缀",
            recommended=True,
        ),
        EmbeddingModelSchema(
            id="sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2",
            name="Paraphrase Multilingual MiniLM",
            requires_prefixes=False,
            dimensions=384,
            size="118MB",
            description="多语言句向量，无需前缀",
        ),
    ]


class EmbeddingSection(BaseModel):
    """向量模型运行参数与模型目录。"""

    model_id: str = Field(default="intfloat/multilingual-e5-small", description="默认选用的模型")
    device: str = Field(default="cpu", description="cpu | cuda | auto")
    encode_batch_size: int = Field(default=64, ge=1, description="编码批大小")
    encode_chunk_size: int = Field(default=256, ge=1, description="品类向量分块编码的块大小")
    query_prefix: str = Field(default="query: ", description="需要前缀时查询文本的前缀")
    passage_prefix: str = Field(default="passage: ", description="需要前缀时品类文本的前缀")
    models: list[EmbeddingModelSchema] = Field(default_factory=_default_models, description="可选模型目录")

    @field_validator("device", mode="after")
    @classmethod
    def lower_device(cls, v: str) -> str:
        return v.strip().lower() if v else "cpu"

    def find_model(self, model_id: str | None = None) -> EmbeddingModelSchema:
        """按 id 查找模型；目录中不存在时返回一个无前缀的临时条目。"""
        target = model_id or self.model_id
        for model in self.models:
            if model.id == target:
                return model
        return EmbeddingModelSchema(id=target, name=target)


# ----- 应用 -----


class AppSection(BaseModel):
    """应用级配置：数据文件名。"""

    catalog_filename: str = Field(default="categories.json", description="品类目录 JSON 文件名")
    test_cases_filename: str = Field(default="test_cases.json", description="测试用例 JSON 文件名")


class AppConfigSchema(BaseModel):
    """app_config.yaml 根结构；各节均有默认值。"""

    scoring: ScoringSection = Field(default_factory=ScoringSection)
    embedding: EmbeddingSection = Field(default_factory=EmbeddingSection)
    app: AppSection = Field(default_factory=AppSection)


class RunConfigSchema(BaseModel):
    """运行时路径配置：数据目录、输出目录、日志目录。"""

    data_dir: Path = Field(description="品类目录与测试用例所在目录")
    output_dir: Path = Field(description="基准测试结果输出目录")
    log_dir: Path = Field(description="日志文件目录")
    catalog_filename: str = Field(default="categories.json", description="品类目录 JSON 文件名")
    test_cases_filename: str = Field(default="test_cases.json", description="测试用例 JSON 文件名")

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / self.catalog_filename

    @property
    def test_cases_path(self) -> Path:
        return self.data_dir / self.test_cases_filename


# ----- 输入文件 -----


class CategoryCatalogSchema(BaseModel):
    """categories.json 根结构：{"items": [{"name", "synonyms"}]}。"""

    items: list[Category] = Field(default_factory=list)


class TestCaseSchema(BaseModel):
    """单条测试用例：查询、期望品类及可接受的备选品类。"""

    __test__ = False

    id: int = Field(default=0, description="用例编号")
    query: str = Field(default="", description="查询文本")
    expected_category: str = Field(default="", alias="expectedCategory", description="期望品类")
    alternative_categories: list[str] = Field(
        default_factory=list, alias="alternativeCategories", description="同样视为正确的品类"
    )
    description: str = Field(default="", description="用例说明")

    @property
    def acceptable(self) -> set[str]:
        return {self.expected_category, *self.alternative_categories}

    model_config = {"populate_by_name": True}


class TestCaseFileSchema(BaseModel):
    """test_cases.json 根结构：{"testCases": [...]}。"""

    __test__ = False

    test_cases: list[TestCaseSchema] = Field(default_factory=list, alias="testCases")

    model_config = {"populate_by_name": True}


# ----- 基准测试结果 -----


class BenchmarkCaseResult(BaseModel):
    """单条用例的评测结果：前 5 个预测、Top-K 命中与正确答案名次。"""

    test_id: int = Field(default=0)
    query: str = Field(default="")
    expected_category: str = Field(default="")
    alternative_categories: list[str] = Field(default_factory=list)
    predictions: list[MatchScore] = Field(default_factory=list, description="前 5 个预测")
    top1: bool = Field(default=False)
    top3: bool = Field(default=False)
    top5: bool = Field(default=False)
    rank: int | None = Field(default=None, description="首个正确答案的名次（1 起），不在结果中为 None")
    inference_ms: float = Field(default=0.0, ge=0.0, description="单条查询分类耗时（毫秒，含查询编码）")


class BenchmarkStats(BaseModel):
    """评测汇总：Top-1/3/5 准确率（百分比）、命中数与平均推理耗时。"""

    total: int = Field(default=0)
    top1_correct: int = Field(default=0)
    top3_correct: int = Field(default=0)
    top5_correct: int = Field(default=0)
    top1_accuracy: float = Field(default=0.0)
    top3_accuracy: float = Field(default=0.0)
    top5_accuracy: float = Field(default=0.0)
    average_inference_ms: float = Field(default=0.0, description="单条查询平均耗时（毫秒）")

    @property
    def passed(self) -> int:
        """Top-1 命中即视为通过。"""
        return self.top1_correct

    @property
    def failed(self) -> int:
        return self.total - self.top1_correct


class ModelComparisonResult(BaseModel):
    """多模型对比中单个模型的评测汇总。"""

    model: EmbeddingModelSchema
    stats: BenchmarkStats = Field(default_factory=BenchmarkStats)
    total_seconds: float = Field(default=0.0, ge=0.0, description="含模型加载、品类编码与全部用例的总耗时（秒）")
    error: str = Field(default="", description="模型加载或编码失败时的错误信息")

    @property
    def ok(self) -> bool:
        return not self.error
