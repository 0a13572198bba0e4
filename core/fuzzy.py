"""编辑距离模糊匹配：整句与逐词两种粒度，逐词命中打折。"""

from __future__ import annotations

from typing import Sequence

from models.schemas import ScoringSection

from .utils.similarity import edit_ratio, normalize_text, split_words

_DEFAULT_SCORING = ScoringSection()


def fuzzy_score(
    query: str,
    synonyms: Sequence[str],
    settings: ScoringSection | None = None,
) -> float:
    """
    查询与同义短语集合的编辑距离得分，返回值在 [0, 1]。

    对每个同义短语：整句相似比 > fuzzy_threshold 时候选分为 ratio / 100；
    每个长度 >= min_word_length 的查询词与同义短语的相似比 > fuzzy_threshold 时，
    候选分为 ratio / 100 * fuzzy_word_discount。返回所有候选分的最大值，无候选为 0。
    """
    s = settings or _DEFAULT_SCORING
    query_norm = normalize_text(query)
    if not query_norm:
        return 0.0
    words = [w for w in split_words(query_norm) if len(w) >= s.min_word_length]

    best = 0.0
    for synonym in synonyms:
        syn_norm = normalize_text(synonym)
        if not syn_norm:
            continue
        ratio = edit_ratio(query_norm, syn_norm)
        if ratio > s.fuzzy_threshold:
            best = max(best, ratio / 100.0)
        for word in words:
            word_ratio = edit_ratio(word, syn_norm)
            if word_ratio > s.fuzzy_threshold:
                best = max(best, word_ratio / 100.0 * s.fuzzy_word_discount)
    return best
