"""公共工具：相似度计算、Excel 写出。"""

from .excel_io import write_sheet
from .similarity import (
    cosine_similarity,
    edit_distance,
    edit_ratio,
    normalize_text,
    split_words,
)

__all__ = [
    "write_sheet",
    "cosine_similarity",
    "edit_distance",
    "edit_ratio",
    "normalize_text",
    "split_words",
]
