"""基于 sentence-transformers 的文本向量：懒加载模型、批量编码品类标签、异步编码查询。"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import numpy as np
from tqdm import tqdm  # type: ignore[import-untyped]

from domain.category import Category
from models.schemas import EmbeddingModelSchema, EmbeddingSection

logger = logging.getLogger(__name__)


def _suppress_third_party_logging() -> tuple[tuple[logging.Logger, ...], tuple[int, ...]]:
    """临时将 huggingface_hub / transformers / sentence_transformers 日志设为 WARNING。返回 (loggers, old_levels)。"""
    loggers = (
        logging.getLogger("huggingface_hub"),
        logging.getLogger("transformers"),
        logging.getLogger("sentence_transformers"),
    )
    old_levels = tuple(logger.level for logger in loggers)
    for logger_ in loggers:
        logger_.setLevel(logging.WARNING)
    return loggers, old_levels


def _restore_logging(
    loggers: tuple[logging.Logger, ...],
    old_levels: tuple[int, ...],
) -> None:
    """恢复第三方库日志级别。"""
    for logger_, level in zip(loggers, old_levels):
        logger_.setLevel(level)


def _resolve_device(device: str) -> str | None:
    """auto 交给 sentence-transformers 自行选择。"""
    return None if device == "auto" else device


class EmbeddingProvider:
    """
    单个向量模型的封装。模型在首次编码时加载；切换模型请调用 select_model()，旧模型随之释放。
    所有向量 L2 归一化，余弦即点积。
    """

    def __init__(
        self,
        config: EmbeddingSection,
        model_id: str | None = None,
        cache_dir: str | None = None,
    ) -> None:
        self._config = config
        self._spec: EmbeddingModelSchema = config.find_model(model_id)
        self._cache_dir = cache_dir
        self._model = None

    @property
    def spec(self) -> EmbeddingModelSchema:
        return self._spec

    @property
    def loaded(self) -> bool:
        return self._model is not None

    def _get_model(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer  # type: ignore[import-untyped]

            logger.info("加载向量模型: %s (device=%s)", self._spec.id, self._config.device)
            loggers, old_levels = _suppress_third_party_logging()
            try:
                self._model = SentenceTransformer(
                    self._spec.id,
                    device=_resolve_device(self._config.device),
                    cache_folder=self._cache_dir,
                )
            except Exception as e:
                raise RuntimeError(f"加载向量模型失败: {self._spec.id}") from e
            finally:
                _restore_logging(loggers, old_levels)
        return self._model

    def ensure_loaded(self) -> None:
        """启动时先下载并加载模型，后续编码直接使用。"""
        self._get_model()

    def select_model(self, model_id: str) -> None:
        """切换模型：释放当前模型，下次编码时加载新模型。"""
        if model_id == self._spec.id:
            return
        self.dispose()
        self._spec = self._config.find_model(model_id)

    def dispose(self) -> None:
        self._model = None

    def _query_text(self, text: str) -> str:
        return f"{self._config.query_prefix}{text}" if self._spec.requires_prefixes else text

    def _passage_text(self, text: str) -> str:
        return f"{self._config.passage_prefix}{text}" if self._spec.requires_prefixes else text

    def encode(self, texts: list[str]) -> np.ndarray:
        """批量编码文本为向量，返回 (n, dim)，L2 归一化。"""
        model = self._get_model()
        return model.encode(
            texts,
            normalize_embeddings=True,
            batch_size=self._config.encode_batch_size,
            show_progress_bar=False,
        )

    def encode_categories(self, categories: Sequence[Category]) -> list[list[float]]:
        """
        一次性编码全部品类标签（名称 + 同义短语），顺序与 categories 一致。
        超长目录分块编码避免 OOM。
        """
        if not categories:
            return []
        texts = [self._passage_text(c.label) for c in categories]
        chunk_size = self._config.encode_chunk_size
        total = len(texts)
        vectors: list[list[float]] = []
        for start in tqdm(
            range(0, total, chunk_size),
            desc="编码品类向量",
            unit="块",
            total=(total + chunk_size - 1) // chunk_size,
        ):
            embeddings = self.encode(texts[start : start + chunk_size])
            vectors.extend(row.tolist() for row in embeddings)
        logger.info("品类向量已生成: %d 条, 模型 %s", len(vectors), self._spec.id)
        return vectors

    async def embed_query(self, text: str) -> list[float]:
        """异步编码单条查询（在线程中执行模型前向）。"""
        embeddings = await asyncio.to_thread(self.encode, [self._query_text(text)])
        return embeddings[0].tolist()
