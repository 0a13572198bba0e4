"""相似度计算工具：编辑距离、编辑距离相似比、余弦相似度，与向量模型解耦便于单测与复用。"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from rapidfuzz.distance import Levenshtein


def normalize_text(text: str) -> str:
    """小写并去首尾空白。"""
    return (text or "").lower().strip()


def split_words(text: str) -> list[str]:
    """按空白切词（输入应已 normalize_text）。"""
    return text.split()


def edit_distance(text_a: str, text_b: str) -> int:
    """经典 Levenshtein 编辑距离：插入 / 删除 / 替换代价均为 1。"""
    return int(Levenshtein.distance(text_a, text_b))


def edit_ratio(text_a: str, text_b: str) -> float:
    """
    编辑距离相似比，返回值在 [0, 100]：(maxLen - distance) / maxLen * 100。
    两串均为空时返回 0.0（无可比内容）。
    """
    max_len = max(len(text_a), len(text_b))
    if max_len == 0:
        return 0.0
    return (max_len - edit_distance(text_a, text_b)) / max_len * 100.0


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    两个等长向量的余弦相似度，理论范围 [-1, 1]。
    长度不一致抛出 ValueError；任一向量全零时返回 NaN，由调用方决定如何处理。
    """
    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"向量维度不一致: {a.shape} vs {b.shape}")
    norm = float(np.linalg.norm(a) * np.linalg.norm(b))
    if norm == 0.0:
        return float("nan")
    return float(np.dot(a, b) / norm)
