"""pytest 共享 fixture 与配置。"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# 保证项目根在 sys.path 中，便于导入 core / app / domain / models
_root = Path(__file__).resolve().parent.parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from domain.category import Category  # noqa: E402
from models.schemas import EmbeddingModelSchema, EmbeddingSection  # noqa: E402


class FakeEmbedder:
    """按文本查表返回向量的查询向量提供方，记录调用次数。"""

    def __init__(self, vectors: dict[str, list[float]], default: list[float]) -> None:
        self.vectors = vectors
        self.default = default
        self.calls: list[str] = []

    async def embed_query(self, text: str) -> list[float]:
        self.calls.append(text)
        return self.vectors.get(text, self.default)


class FakeModelProvider(FakeEmbedder):
    """可切换模型的假向量提供方：品类向量为单位向量，failing 中的模型编码时抛出 RuntimeError。"""

    def __init__(
        self,
        vectors: dict[str, list[float]],
        default: list[float],
        failing: tuple[str, ...] = (),
    ) -> None:
        super().__init__(vectors, default)
        self.section = EmbeddingSection()
        self.spec: EmbeddingModelSchema = self.section.find_model()
        self.failing = failing
        self.selected: list[str] = []
        self.disposed = 0

    def select_model(self, model_id: str) -> None:
        self.selected.append(model_id)
        self.spec = self.section.find_model(model_id)

    def encode_categories(self, categories: list[Category]) -> list[list[float]]:
        if self.spec.id in self.failing:
            raise RuntimeError(f"加载向量模型失败: {self.spec.id}")
        n = len(categories)
        return [[1.0 if i == j else 0.0 for j in range(n)] for i in range(n)]

    def dispose(self) -> None:
        self.disposed += 1


@pytest.fixture
def small_catalog() -> list[Category]:
    return [
        Category(name="Electricidad", synonyms=["electricista", "corto circuito"]),
        Category(name="Plomería", synonyms=["plomero", "fuga de agua"]),
        Category(name="Odontología", synonyms=["dolor de dientes", "dientes"]),
    ]


@pytest.fixture
def small_vectors() -> list[list[float]]:
    return [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]


@pytest.fixture(autouse=True)
def _reset_app_config():
    from core.config import reset_app_config

    reset_app_config()
    yield
    reset_app_config()
