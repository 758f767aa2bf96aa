"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import click
import toml
import yaml
from loguru import logger

from assetsync.engine import SyncEngine
from assetsync.exceptions import AssetSyncError, ConfigError
from assetsync.listeners import ProgressListener
from assetsync.logger import setup_logger
from assetsync.models import AssetResult, AssetStatus, SyncConfig


def load_config(config_path: str) -> dict:
    """加载配置文件"""
    path = Path(config_path)

    if not path.exists():
        raise click.ClickException(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            return toml.load(config_path)
        elif suffix == ".json":
            return json.loads(path.read_text())
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text()) or {}
    except (toml.TomlDecodeError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(
            f"配置文件解析失败: {config_path}", context={"error": str(e)}
        ) from e

    raise click.ClickException(f"不支持的配置文件格式: {suffix}")


def build_config(
    config_path: Optional[str],
    cdn: Optional[str],
    algorithm: Optional[str],
    fail_fast: bool,
    timeout: Optional[float],
) -> SyncConfig:
    """合并配置文件与命令行参数，命令行优先"""
    data = load_config(config_path) if config_path else {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"配置文件顶层必须是键值对象: {config_path}",
            context={"type": type(data).__name__},
        )
    if cdn:
        data["cdn_base_url"] = cdn
    if algorithm:
        data["hash_algorithm"] = algorithm
    if fail_fast:
        data["fail_fast"] = True
    if timeout is not None:
        data["request_timeout"] = timeout
    return SyncConfig.from_dict(data)


async def run_async(
    index: str, destination: str, config: SyncConfig
) -> List[AssetResult]:
    """异步运行"""
    async with SyncEngine(config, [ProgressListener()]) as engine:
        return await engine.sync_from_index(index, destination)


def summarize(results: List[AssetResult]) -> dict:
    """按状态统计结果"""
    counts = {status: 0 for status in AssetStatus}
    for result in results:
        counts[result.status] += 1
    return counts


@click.command()
@click.argument("index")
@click.argument("destination", type=click.Path(file_okay=False))
@click.option("--cdn", help="CDN 基础地址")
@click.option("-c", "--config", "config_path", help="配置文件 (toml/json/yaml)")
@click.option("--algorithm", help="哈希算法 (默认 sha1)")
@click.option("--fail-fast", is_flag=True, help="首个下载失败时终止")
@click.option("--timeout", type=float, help="单个请求超时秒数")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.option("-q", "--quiet", is_flag=True, help="只输出警告和错误")
@click.option("--log-file", type=click.Path(dir_okay=False), help="将完整日志写入文件")
@click.version_option(version="0.1.0")
def main(
    index: str,
    destination: str,
    cdn: Optional[str],
    config_path: Optional[str],
    algorithm: Optional[str],
    fail_fast: bool,
    timeout: Optional[float],
    debug: bool,
    quiet: bool,
    log_file: Optional[str],
):
    """AssetSync - 按资产索引同步本地资源目录"""
    setup_logger(level="DEBUG" if debug else None, quiet=quiet, log_file=log_file)

    try:
        config = build_config(config_path, cdn, algorithm, fail_fast, timeout)
        results = asyncio.run(run_async(index, destination, config))
    except AssetSyncError as e:
        logger.error(f"同步失败: {e}")
        raise click.ClickException(str(e))

    counts = summarize(results)
    click.echo(f"处理了 {len(results)} 个资产")
    click.echo(
        f"下载 {counts[AssetStatus.DOWNLOADED]} 个, "
        f"替换 {counts[AssetStatus.REPLACED]} 个, "
        f"跳过 {counts[AssetStatus.SKIPPED]} 个, "
        f"失败 {counts[AssetStatus.FAILED]} 个"
    )

    if counts[AssetStatus.FAILED]:
        raise click.ClickException(f"{counts[AssetStatus.FAILED]} 个资产同步失败")


if __name__ == "__main__":
    main()
