"""core.embedding 单元测试：以假模型替代 sentence-transformers，不下载真实模型。"""

from __future__ import annotations

import asyncio
import sys
import types
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from core.embedding import EmbeddingProvider
from domain.category import Category
from models.schemas import EmbeddingSection


class FakeModel:
    def __init__(self) -> None:
        self.seen: list[list[str]] = []

    def encode(self, texts, normalize_embeddings=True, batch_size=32, show_progress_bar=False):
        self.seen.append(list(texts))
        return np.array([[float(len(t)), 1.0] for t in texts], dtype=np.float32)


def _provider(model_id: str | None = None, **section: object) -> tuple[EmbeddingProvider, FakeModel]:
    provider = EmbeddingProvider(EmbeddingSection(**section), model_id=model_id)
    fake = FakeModel()
    provider._model = fake
    return provider, fake


def test_passage_prefix_for_e5() -> None:
    provider, fake = _provider()
    categories = [Category(name="Plomería", synonyms=["plomero"])]
    vectors = provider.encode_categories(categories)
    assert fake.seen == [["passage: Plomería: plomero"]]
    assert len(vectors) == 1 and len(vectors[0]) == 2


def test_no_prefix_for_plain_model() -> None:
    provider, fake = _provider("sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2")
    provider.encode_categories([Category(name="A", synonyms=["b"])])
    assert fake.seen == [["A: b"]]


def test_encode_categories_chunked() -> None:
    provider, fake = _provider(encode_chunk_size=2)
    categories = [Category(name=f"c{i}") for i in range(5)]
    vectors = provider.encode_categories(categories)
    assert len(vectors) == 5
    assert [len(chunk) for chunk in fake.seen] == [2, 2, 1]


def test_encode_categories_empty() -> None:
    provider, fake = _provider()
    assert provider.encode_categories([]) == []
    assert fake.seen == []


def test_embed_query_prefixed() -> None:
    provider, fake = _provider()
    vector = asyncio.run(provider.embed_query("fuga de agua"))
    assert fake.seen == [["query: fuga de agua"]]
    assert vector == [float(len("query: fuga de agua")), 1.0]


def test_select_model_disposes() -> None:
    provider, _ = _provider()
    provider.select_model("sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2")
    assert provider.loaded is False
    assert provider.spec.requires_prefixes is False


def test_select_same_model_keeps_loaded() -> None:
    provider, _ = _provider()
    provider.select_model(provider.spec.id)
    assert provider.loaded is True


def test_load_failure_raises_runtime_error() -> None:
    fake_module = types.ModuleType("sentence_transformers")
    fake_module.SentenceTransformer = MagicMock(side_effect=OSError("no network"))
    provider = EmbeddingProvider(EmbeddingSection())
    with patch.dict(sys.modules, {"sentence_transformers": fake_module}):
        with pytest.raises(RuntimeError, match="加载向量模型失败"):
            provider.ensure_loaded()
    assert provider.loaded is False
