"""core.classifier 单元测试：前置校验、三路打分编排、退化向量与异步入口。"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from conftest import FakeEmbedder
from core.classifier import InvalidInputError, classify, classify_query
from domain.category import Category, WeightVector
from models.schemas import ScoringSection


class TestPreconditions:
    def test_count_mismatch(self, small_catalog, small_vectors) -> None:
        with pytest.raises(InvalidInputError, match="品类数与品类向量数不一致"):
            classify("fuga de agua", small_catalog, small_vectors[:2], [1.0, 0.0, 0.0])

    def test_dimension_mismatch(self, small_catalog) -> None:
        vectors = [[1.0, 0.0, 0.0], [0.0, 1.0], [0.0, 0.0, 1.0]]
        with pytest.raises(InvalidInputError, match="维度"):
            classify("fuga de agua", small_catalog, vectors, [1.0, 0.0, 0.0])

    def test_rejected_before_scoring(self, small_catalog, small_vectors) -> None:
        with patch("core.classifier.keyword_score") as mock_kw:
            with pytest.raises(InvalidInputError):
                classify("fuga de agua", small_catalog, small_vectors, [1.0, 0.0])
            mock_kw.assert_not_called()

    def test_is_value_error(self) -> None:
        assert issubclass(InvalidInputError, ValueError)


class TestClassify:
    def test_exact_synonym_ranks_first(self, small_catalog, small_vectors) -> None:
        # 查询向量最接近 Electricidad，但关键词精确命中 Plomería
        result = classify("fuga de agua", small_catalog, small_vectors, [1.0, 0.0, 0.0])
        assert result[0].category == "Plomería"
        assert result[0].index == 1
        assert result[0].keyword_score == 1.0
        assert result[0].combined_score == pytest.approx(0.7)
        assert [r.category for r in result] == ["Plomería", "Electricidad"]

    def test_partial_overlap_surfaces_via_fuzzy(self, small_catalog, small_vectors) -> None:
        result = classify("me duele un diente", small_catalog, small_vectors, [0.6, 0.0, 0.8])
        top = result[0]
        assert top.category == "Odontología"
        assert top.keyword_score < 0.8
        assert top.fuzzy_score > 0.0
        # 0.41 * 0.35 + (6/7 * 0.8) * 0.30 + 0.8 * 0.35
        assert top.combined_score == pytest.approx(0.41 * 0.35 + 6 / 7 * 0.8 * 0.30 + 0.8 * 0.35)

    def test_empty_catalog(self) -> None:
        assert classify("fuga de agua", [], [], [1.0, 0.0]) == []

    def test_unrelated_query_returns_empty(self, small_catalog, small_vectors) -> None:
        result = classify("xyz", small_catalog, small_vectors, [-1.0, -1.0, -1.0])
        assert result == []

    def test_zero_vector_scored_as_zero(self) -> None:
        categories = [Category(name="Plomería", synonyms=["fuga de agua"])]
        result = classify("fuga de agua", categories, [[0.0, 0.0, 0.0]], [1.0, 0.0, 0.0])
        assert len(result) == 1
        assert result[0].embedding_score == 0.0
        assert result[0].combined_score == pytest.approx(0.7)

    def test_idempotent(self, small_catalog, small_vectors) -> None:
        first = classify("me duele un diente", small_catalog, small_vectors, [0.6, 0.0, 0.8])
        second = classify("me duele un diente", small_catalog, small_vectors, [0.6, 0.0, 0.8])
        assert first == second

    def test_truncation_and_threshold(self) -> None:
        categories = [Category(name=f"c{i}", synonyms=["fuga de agua"]) for i in range(12)]
        vectors = [[1.0, 0.0] for _ in categories]
        result = classify("fuga de agua", categories, vectors, [1.0, 0.0])
        assert len(result) == 10
        assert [r.index for r in result] == list(range(10))
        assert all(r.final_score >= 0.15 for r in result)

    def test_base_weights_respected(self, small_catalog, small_vectors) -> None:
        weights = WeightVector(keyword=0.0, fuzzy=0.0, embedding=1.0)
        result = classify("xyz", small_catalog, small_vectors, [1.0, 0.0, 0.0], weights)
        assert [r.category for r in result] == ["Electricidad"]
        assert result[0].combined_score == pytest.approx(1.0)

    def test_settings_applied(self, small_catalog, small_vectors) -> None:
        settings = ScoringSection(max_results=1)
        result = classify("fuga de agua", small_catalog, small_vectors, [1.0, 0.0, 0.0], settings=settings)
        assert len(result) == 1


class TestClassifyQuery:
    def test_embeds_once_and_classifies(self, small_catalog, small_vectors) -> None:
        embedder = FakeEmbedder({}, default=[0.0, 1.0, 0.0])
        result = asyncio.run(classify_query("fuga de agua", small_catalog, small_vectors, embedder))
        assert embedder.calls == ["fuga de agua"]
        assert result[0].category == "Plomería"

    def test_blank_query_skips_embedder(self, small_catalog, small_vectors) -> None:
        embedder = FakeEmbedder({}, default=[0.0, 1.0, 0.0])
        result = asyncio.run(classify_query("   ", small_catalog, small_vectors, embedder))
        assert result == []
        assert embedder.calls == []

    def test_embedder_error_propagates(self, small_catalog, small_vectors) -> None:
        embedder = MagicMock()

        async def _boom(text: str) -> list[float]:
            raise RuntimeError("model unavailable")

        embedder.embed_query = _boom
        with pytest.raises(RuntimeError, match="model unavailable"):
            asyncio.run(classify_query("fuga", small_catalog, small_vectors, embedder))
