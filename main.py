"""
服务品类分类入口：加载配置与品类目录、生成品类向量后，交互式输入需求文本并输出最相关的品类；
或以 --benchmark 对测试用例集做批量准确率评测，以 --compare 对比多个向量模型。

流程拆分为：init_config -> load_data -> build_provider -> (循环) run_query / run_benchmark_once / run_comparison_once，
便于单测与维护。
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from bootstrap import (
    AppSectionConfig,
    Category,
    EmbeddingConfig,
    EmbeddingProvider,
    MatchScore,
    RunConfigSchema,
    ScoringConfig,
    TestCaseSchema,
    WeightVector,
    classify_query,
    compare_models,
    compute_stats,
    format_comparison,
    format_model_catalog,
    format_results,
    format_stats,
    get_data_dir,
    get_log_dir,
    get_model_dir,
    get_output_dir,
    inject,
    load_app_config,
    load_categories,
    load_test_cases,
    normalize_input_path,
    normalize_weights,
    rebalance_weights,
    run_benchmark,
    write_benchmark_excel,
    write_comparison_excel,
)

logger = logging.getLogger(__name__)

RunConfig = RunConfigSchema

QUIT_WORDS = ("q", "quit", "exit")


def init_config(
    *,
    data_dir: Path | None = None,
    output_dir: Path | None = None,
    log_dir: Path | None = None,
) -> RunConfigSchema:
    """
    初始化配置与日志：加载应用配置、配置 logging，返回 RunConfig。

    Args:
        data_dir: 品类目录 / 测试用例目录，默认 get_data_dir()。
        output_dir: 评测结果输出目录，默认 get_output_dir()。
        log_dir: 日志目录，默认 get_log_dir()。
    """
    load_app_config()
    app_cfg = inject(AppSectionConfig)
    config = RunConfigSchema(
        data_dir=data_dir or get_data_dir(),
        output_dir=output_dir or get_output_dir(),
        log_dir=log_dir or get_log_dir(),
        catalog_filename=app_cfg.catalog_filename,
        test_cases_filename=app_cfg.test_cases_filename,
    )
    _setup_logging(config.log_dir)
    print(f"配置已加载: data_dir={config.data_dir}, output_dir={config.output_dir}")
    return config


def _setup_logging(log_dir: Path) -> None:
    """
    将日志按日期写入 log_dir，文件名 service_classifier_YYYYMMDD.log。
    若已存在指向当日日志文件的 FileHandler 则不再添加，避免重复。
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    today = datetime.now().strftime("%Y%m%d")
    log_file = log_dir / f"service_classifier_{today}.log"
    log_path = str(log_file.resolve())
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", "") == log_path:
            return
    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def load_data(config: RunConfigSchema) -> list[Category]:
    """
    加载品类目录。

    Raises:
        FileNotFoundError: 品类目录文件不存在。
        ValueError: 文件解析失败。
    """
    categories = load_categories(config.catalog_path)
    if not categories:
        print(f"品类目录为空: {config.catalog_path}")
    print(f"品类 {len(categories)} 个。")
    return categories


def resolve_weights(
    keyword: float | None = None,
    fuzzy: float | None = None,
    embedding: float | None = None,
) -> WeightVector:
    """
    以配置默认权重为基础应用命令行权重。
    只指定一项时按滑块处理：该项取指定值，其余两项按原比例分摊剩余权重；
    指定多项时合并后归一化为和 1.0。

    Raises:
        ValueError: 权重为负数，或只指定一项且大于 1。
    """
    base = normalize_weights(inject(ScoringConfig).default_weights)
    overrides = {
        name: value
        for name, value in (("keyword", keyword), ("fuzzy", fuzzy), ("embedding", embedding))
        if value is not None
    }
    try:
        merged = WeightVector.model_validate({**base.model_dump(), **overrides})
    except ValidationError as e:
        raise ValueError(f"权重无效（须为非负数）: {overrides}") from e
    if len(overrides) == 1:
        ((name, value),) = overrides.items()
        if value > 1.0:
            raise ValueError(f"单项权重须在 0 到 1 之间: {name}={value}")
        return rebalance_weights(base, name, value)
    return normalize_weights(merged)


def build_provider(model_id: str | None = None) -> EmbeddingProvider:
    """按配置构造向量提供方（模型在首次编码时加载）。"""
    return EmbeddingProvider(inject(EmbeddingConfig), model_id=model_id, cache_dir=str(get_model_dir()))


def run_query(
    query: str,
    categories: list[Category],
    category_vectors: list[list[float]],
    provider: EmbeddingProvider,
    weights: WeightVector,
) -> list[MatchScore]:
    """对单条需求文本分类并返回排序结果。"""
    return asyncio.run(
        classify_query(query, categories, category_vectors, provider, weights, inject(ScoringConfig))
    )


def run_benchmark_once(
    config: RunConfigSchema,
    categories: list[Category],
    category_vectors: list[list[float]],
    provider: EmbeddingProvider,
    weights: WeightVector,
    test_cases: list[TestCaseSchema] | None = None,
) -> Path:
    """
    运行一次评测并写出 Excel，返回结果文件路径。

    Raises:
        RuntimeError: 写入结果文件失败。
    """
    if test_cases is None:
        test_cases = load_test_cases(config.test_cases_path)
    results = asyncio.run(
        run_benchmark(test_cases, categories, category_vectors, provider, weights, inject(ScoringConfig))
    )
    print(format_stats(compute_stats(results)))
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    model_stem = provider.spec.id.replace("/", "_")
    output_path = config.output_dir / f"评测结果_{model_stem}_{stamp}.xlsx"
    try:
        write_benchmark_excel(results, output_path)
    except Exception as e:
        raise RuntimeError(f"写入结果文件失败: {output_path}") from e
    return output_path


def run_comparison_once(
    config: RunConfigSchema,
    categories: list[Category],
    provider: EmbeddingProvider,
    weights: WeightVector,
    model_ids: list[str],
    test_cases: list[TestCaseSchema] | None = None,
) -> Path:
    """
    依次用 model_ids 中的每个模型跑完整测试集，打印对比并写出 Excel，返回结果文件路径。

    Raises:
        RuntimeError: 写入结果文件失败。
    """
    if test_cases is None:
        test_cases = load_test_cases(config.test_cases_path)
    results = asyncio.run(
        compare_models(model_ids, test_cases, categories, provider, weights, inject(ScoringConfig))
    )
    print(format_comparison(results))
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_path = config.output_dir / f"模型对比_{stamp}.xlsx"
    try:
        write_comparison_excel(results, output_path)
    except Exception as e:
        raise RuntimeError(f"写入结果文件失败: {output_path}") from e
    return output_path


def _load_test_cases_arg(raw: str | None) -> list[TestCaseSchema] | None:
    """--test-cases 指定时加载该文件，失败则退出；未指定返回 None（使用默认数据目录）。"""
    if not raw:
        return None
    try:
        return load_test_cases(normalize_input_path(raw))
    except (FileNotFoundError, ValueError) as e:
        print(f"加载测试用例失败，退出: {e}")
        sys.exit(1)


def _parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """解析命令行参数；args 为 None 时使用 sys.argv，便于单测注入。"""
    parser = argparse.ArgumentParser(
        description="服务品类分类：输入需求文本，按关键词 / 模糊 / 语义三路匹配给出最相关的品类。",
    )
    parser.add_argument("query", nargs="?", default=None, help="需求文本；不指定则进入交互式输入。")
    parser.add_argument("--model", default=None, help="向量模型 id，默认取配置 embedding.model_id。")
    parser.add_argument("--benchmark", action="store_true", help="对测试用例集做批量准确率评测后退出。")
    parser.add_argument(
        "--compare",
        nargs="*",
        default=None,
        metavar="MODEL",
        help="用测试用例集对比多个模型后退出；不跟模型 id 时对比配置中的全部模型。",
    )
    parser.add_argument("--list-models", action="store_true", help="列出配置中的向量模型后退出。")
    parser.add_argument("--test-cases", default=None, help="测试用例 JSON 路径，默认 data/test_cases.json。")
    parser.add_argument("--no-loop", action="store_true", help="指定 query 时仅分类一次后退出。")
    parser.add_argument("--keyword", type=float, default=None, help="关键词匹配权重")
    parser.add_argument("--fuzzy", type=float, default=None, help="模糊匹配权重")
    parser.add_argument("--embedding", type=float, default=None, help="语义匹配权重")
    return parser.parse_args(args)


def main(args: list[str] | None = None) -> None:
    """
    入口：初始化配置 -> 加载品类 -> 加载模型与品类向量 -> 评测或循环分类。

    支持命令行：
      python main.py                           # 交互式输入
      python main.py "fuga de agua"            # 分类该文本后继续交互
      python main.py "fuga de agua" --no-loop  # 仅分类一次
      python main.py --benchmark               # 批量评测
      python main.py --compare                 # 对比配置中的全部模型
      python main.py --list-models             # 列出可选模型
    """
    parsed = _parse_args(args)
    config = init_config()

    if parsed.list_models:
        embedding_cfg = inject(EmbeddingConfig)
        print(format_model_catalog(embedding_cfg.models, parsed.model or embedding_cfg.model_id))
        return

    try:
        categories = load_data(config)
    except (FileNotFoundError, ValueError) as e:
        print(f"加载数据失败，退出: {e}")
        sys.exit(1)

    try:
        weights = resolve_weights(parsed.keyword, parsed.fuzzy, parsed.embedding)
    except ValueError as e:
        print(f"{e}，退出。")
        sys.exit(1)
    provider = build_provider(parsed.model)

    if parsed.compare is not None:
        model_ids = parsed.compare or [m.id for m in inject(EmbeddingConfig).models]
        test_cases = _load_test_cases_arg(parsed.test_cases)
        try:
            out_path = run_comparison_once(config, categories, provider, weights, model_ids, test_cases)
        except (FileNotFoundError, ValueError, RuntimeError) as e:
            print(f"模型对比失败: {e}")
            sys.exit(1)
        print(f"已写入: {out_path}")
        return

    try:
        provider.ensure_loaded()
    except RuntimeError as e:
        print(f"{e}，退出。")
        sys.exit(1)
    print(f"模型: {provider.spec.name or provider.spec.id}")
    category_vectors = provider.encode_categories(categories)

    if parsed.benchmark:
        test_cases = _load_test_cases_arg(parsed.test_cases)
        try:
            out_path = run_benchmark_once(config, categories, category_vectors, provider, weights, test_cases)
        except (FileNotFoundError, ValueError, RuntimeError) as e:
            print(f"评测失败: {e}")
            sys.exit(1)
        print(f"已写入: {out_path}")
        return

    pending: str | None = parsed.query.strip() if parsed.query else None
    if not parsed.no_loop or not pending:
        print("请输入需求描述（如「me duele un diente」），输入 q 退出。\n")

    while True:
        query = pending if pending else input("需求: ").strip()
        pending = None

        if not query:
            continue
        if query.lower() in QUIT_WORDS:
            print("退出。")
            break

        results = run_query(query, categories, category_vectors, provider, weights)
        print(format_results(results))
        print()

        if parsed.no_loop and parsed.query:
            break


if __name__ == "__main__":
    main()
