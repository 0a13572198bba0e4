"""服务品类分类相关数据模型（Pydantic V2）：品类、权重向量、单品类匹配得分。"""

from __future__ import annotations

from functools import cached_property
from typing import Any

from pydantic import BaseModel, Field, field_validator


def _strip_str(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip()


def _strip_list_str(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, (list, tuple)):
        return [str(x).strip() for x in v if str(x).strip()]
    return []


class Category(BaseModel):
    """单个服务品类：名称 + 同义短语（顺序保留）。加载后不可变。"""

    name: str = Field(default="", description="品类名称")
    synonyms: tuple[str, ...] = Field(default_factory=tuple, description="同义短语，按目录顺序")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> str:
        return _strip_str(v)

    @field_validator("synonyms", mode="before")
    @classmethod
    def normalize_synonyms(cls, v: Any) -> tuple[str, ...]:
        return tuple(_strip_list_str(v))

    @cached_property
    def label(self) -> str:
        """「名称: 同义1, 同义2, ...」，仅用于生成品类向量。"""
        return f"{self.name}: {', '.join(self.synonyms)}"

    model_config = {"frozen": True}


class WeightVector(BaseModel):
    """三路匹配权重：keyword / fuzzy / embedding，均非负，基础权重约定和为 1.0。"""

    keyword: float = Field(default=0.35, ge=0.0, description="关键词匹配权重")
    fuzzy: float = Field(default=0.30, ge=0.0, description="编辑距离匹配权重")
    embedding: float = Field(default=0.35, ge=0.0, description="向量语义匹配权重")

    @property
    def total(self) -> float:
        return self.keyword + self.fuzzy + self.embedding

    model_config = {"frozen": True}


class MatchScore(BaseModel):
    """
    单品类打分结果，每次分类请求新建。
    index 为品类在目录中的下标，作为稳定身份；category 仅用于展示。
    """

    index: int = Field(default=0, ge=0, description="品类在目录中的下标")
    category: str = Field(default="", description="品类名称")
    keyword_score: float = Field(default=0.0, description="关键词得分 [0, 1]")
    fuzzy_score: float = Field(default=0.0, description="编辑距离得分 [0, 1]")
    embedding_score: float = Field(default=0.0, description="余弦相似度 [-1, 1]")
    combined_score: float = Field(default=0.0, description="加权组合得分")
    final_score: float = Field(default=0.0, description="位置加权后的最终得分")

    model_config = {"frozen": True}
