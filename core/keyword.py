"""关键词匹配：整句精确 / 子串命中优先，其次按逐词命中给出部分分。"""

from __future__ import annotations

from typing import Sequence

from models.schemas import ScoringSection

from .utils.similarity import normalize_text, split_words

EXACT_MATCH_SCORE = 1.0
SYNONYM_CONTAINS_QUERY_SCORE = 0.95
QUERY_CONTAINS_SYNONYM_SCORE = 0.9

_DEFAULT_SCORING = ScoringSection()


def keyword_score(
    query: str,
    synonyms: Sequence[str],
    settings: ScoringSection | None = None,
) -> float:
    """
    查询与某品类同义短语集合的关键词得分。

    按同义短语顺序逐一检查，首个命中即返回：
      同义短语 == 查询 -> 1.0；同义短语包含查询 -> 0.95；查询包含同义短语 -> 0.9。
    均未命中时，累计长度 >= min_word_length 的查询词在同义短语中的子串命中次数与最长命中词长，
    得分 = min(0.7 * 命中次数 / 查询词数 + 0.1 * 最长词长 / 10, 0.85)；无命中为 0。
    空查询或空同义短语集合返回 0。
    """
    s = settings or _DEFAULT_SCORING
    query_norm = normalize_text(query)
    if not query_norm:
        return 0.0
    query_words = split_words(query_norm)

    match_count = 0
    max_word_len = 0
    for synonym in synonyms:
        syn_norm = normalize_text(synonym)
        if not syn_norm:
            continue
        if syn_norm == query_norm:
            return EXACT_MATCH_SCORE
        if query_norm in syn_norm:
            return SYNONYM_CONTAINS_QUERY_SCORE
        if syn_norm in query_norm:
            return QUERY_CONTAINS_SYNONYM_SCORE
        for word in query_words:
            if len(word) >= s.min_word_length and word in syn_norm:
                match_count += 1
                max_word_len = max(max_word_len, len(word))

    if match_count == 0:
        return 0.0
    score = (
        s.keyword_word_weight * match_count / len(query_words)
        + s.keyword_length_weight * max_word_len / s.keyword_length_norm
    )
    return min(score, s.keyword_partial_cap)
