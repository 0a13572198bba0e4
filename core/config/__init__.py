"""
core.config：整合路径、统一 YAML 配置 app_config.yaml 及加载。

- 配置：config/app_config.yaml（含 scoring、embedding、app 三节）。
- 路径：config 目录及 data/output/logs/model（见 .paths）
- 统一加载：load_app_config() 启动时调用一次；配置通过 inject(Annotated 类型) 获取。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

from models.schemas import AppConfigSchema, AppSection, EmbeddingSection, ScoringSection

from . import deps as _deps
from . import loader as _loader
from . import paths as _paths

Depends = _deps.Depends
inject = _deps.inject
logger = logging.getLogger(__name__)

# ----- 路径（直接转发） -----

get_config_dir_raw = _paths.get_config_dir_raw
get_app_config_path = _loader.get_app_config_path
get_base_dir = _paths.get_base_dir
get_data_dir = _paths.get_data_dir
get_output_dir = _paths.get_output_dir
get_log_dir = _paths.get_log_dir
get_model_dir = _paths.get_model_dir
normalize_input_path = _paths.normalize_input_path

# ----- 统一加载与缓存 -----

_app_config: AppConfigSchema | None = None


def load_app_config(path: Path | None = None, *, reload: bool = False) -> AppConfigSchema:
    """加载全部配置并缓存；已加载时直接返回缓存，reload=True 时强制重新读取。"""
    global _app_config
    if _app_config is not None and not reload:
        return _app_config
    config_path = path or get_app_config_path()
    _app_config = _loader.load_app_config_yaml(config_path)
    logger.debug("配置已加载: config_file=%s", config_path)
    return _app_config


def reset_app_config() -> None:
    """清除缓存（测试用）。"""
    global _app_config
    _app_config = None


def _resolve_app_config() -> AppConfigSchema:
    return load_app_config()


def _get_scoring_config() -> ScoringSection:
    return _resolve_app_config().scoring


def _get_embedding_config() -> EmbeddingSection:
    return _resolve_app_config().embedding


def _get_app_section() -> AppSection:
    return _resolve_app_config().app


# ----- 依赖注入：Annotated 类型别名（供 inject() 使用） -----

AppConfig = Annotated[AppConfigSchema, Depends(_resolve_app_config)]
ScoringConfig = Annotated[ScoringSection, Depends(_get_scoring_config)]
EmbeddingConfig = Annotated[EmbeddingSection, Depends(_get_embedding_config)]
AppSectionConfig = Annotated[AppSection, Depends(_get_app_section)]


__all__ = [
    "load_app_config",
    "reset_app_config",
    "get_config_dir_raw",
    "get_app_config_path",
    "get_base_dir",
    "get_data_dir",
    "get_output_dir",
    "get_log_dir",
    "get_model_dir",
    "normalize_input_path",
    "Depends",
    "inject",
    "AppConfig",
    "ScoringConfig",
    "EmbeddingConfig",
    "AppSectionConfig",
]
