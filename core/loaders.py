"""从 JSON 加载品类目录与测试用例。"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from domain.category import Category
from models.schemas import CategoryCatalogSchema, TestCaseFileSchema, TestCaseSchema


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"文件不存在: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON 解析失败: {path}") from e


def load_categories(json_path: str | Path) -> list[Category]:
    """
    解析品类目录：{"items": [{"name": ..., "synonyms": [...]}]}。
    名称为空的条目被丢弃，其余保持文件顺序。
    """
    path = Path(json_path)
    data = _read_json(path)
    try:
        catalog = CategoryCatalogSchema.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"品类目录格式错误: {path}") from e
    return [c for c in catalog.items if c.name]


def load_test_cases(json_path: str | Path) -> list[TestCaseSchema]:
    """解析测试用例：{"testCases": [{"id", "query", "expectedCategory", "alternativeCategories", "description"}]}。"""
    path = Path(json_path)
    data = _read_json(path)
    try:
        parsed = TestCaseFileSchema.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"测试用例格式错误: {path}") from e
    return [tc for tc in parsed.test_cases if tc.query.strip()]
