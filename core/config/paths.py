"""
路径解析：基准目录、配置目录、数据/输出/日志/模型缓存目录及用户输入路径规范化。

- 环境变量：SERVICE_CLASSIFIER_BASE_DIR / DATA_DIR / OUTPUT_DIR / LOG_DIR / MODEL_DIR
"""

from __future__ import annotations

import os
import re
from pathlib import Path

ENV_PREFIX = "SERVICE_CLASSIFIER_"


def _env_dir(name: str) -> Path | None:
    value = os.environ.get(f"{ENV_PREFIX}{name}")
    return Path(value).resolve() if value else None


def get_base_dir() -> Path:
    """基准目录：环境变量 SERVICE_CLASSIFIER_BASE_DIR，否则为项目根（core 的父目录）。"""
    env = _env_dir("BASE_DIR")
    if env is not None:
        return env
    return Path(__file__).resolve().parent.parent.parent


def get_config_dir_raw() -> Path:
    """配置文件目录（不触发加载）。"""
    return get_base_dir() / "config"


def get_data_dir() -> Path:
    """品类目录与测试用例 JSON 目录。"""
    return _env_dir("DATA_DIR") or get_base_dir() / "data"


def get_output_dir() -> Path:
    """基准测试结果输出目录。"""
    return _env_dir("OUTPUT_DIR") or get_base_dir() / "output"


def get_log_dir() -> Path:
    """日志文件目录。"""
    return _env_dir("LOG_DIR") or get_base_dir() / "logs"


def get_model_dir() -> Path:
    """向量模型缓存目录。"""
    return _env_dir("MODEL_DIR") or get_base_dir() / "model"


def normalize_input_path(raw: str) -> Path:
    """
    规范化用户输入的文件路径：去首尾引号/空白；WSL 下将 Windows 盘符路径转为可访问路径。
    例：'c:/Users/me/Desktop/cases.json' -> /mnt/c/Users/me/Desktop/cases.json
    """
    s = raw.strip().strip("\"'")
    if not s:
        return Path("")
    if os.name == "posix" and len(s) >= 2:
        m = re.match(r"^([a-zA-Z])\s*[:\\](.*)$", s)
        if m:
            drive = m.group(1).lower()
            rest = (m.group(2) or "").replace("\\", "/").strip("/")
            s = f"/mnt/{drive}/{rest}" if rest else f"/mnt/{drive}"
    return Path(s)
