"""
CLI 模块

命令行接口实现。
"""

import asyncio
from typing import Optional

import click
from loguru import logger

from modbundle import __version__
from modbundle.manifest import DEFAULT_MANIFEST, ManifestLoader
from modbundle.models import AssetType, BundleSettings, ModDescriptor
from modbundle.orchestrator import BundleOrchestrator
from modbundle.exceptions import ManifestError, ModBundleError
from modbundle.logger import setup_logger


async def dry_run_async(loader: ManifestLoader, settings: BundleSettings):
    """只验证清单并输出计划"""
    entries = await loader.load()
    if entries is None:
        logger.info("[干运行模式] 没有模组清单")
        return

    logger.info(f"[干运行模式] 模组数量: {len(entries)}")
    for index, entry in enumerate(entries):
        try:
            mod = ModDescriptor.from_dict(entry)
        except ManifestError as e:
            logger.warning(f"  #{index} 无效: {e}")
            continue
        if mod.asset_type == AssetType.ZIP:
            target = settings.output_dir
        else:
            target = settings.relocation_dir(mod)
        logger.info(f"  {mod.name} [{mod.source.value}] {mod.url} -> {target}")
    logger.info(f"  输出压缩包: {settings.archive_path}")


async def run_async(
    manifest_path: str,
    root: Optional[str],
    skip_failed: bool,
    dry_run: bool = False,
):
    """异步运行"""
    loader = ManifestLoader(manifest_path)
    try:
        settings = BundleSettings.from_dict(
            await loader.load_settings(),
            root=root,
            skip_failed=skip_failed or None,
        )

        if dry_run:
            await dry_run_async(loader, settings)
            return

        orchestrator = BundleOrchestrator(settings, loader)
        report = await orchestrator.run()

        if report.packaged:
            logger.success(f"完成! 输出: {report.archive_path}")
        else:
            logger.warning("完成，但未能生成输出压缩包")

    except ModBundleError as e:
        logger.error(f"清单错误: {e}")
        raise click.ClickException(str(e))


@click.command()
@click.argument("manifest", type=click.Path(dir_okay=False), default=DEFAULT_MANIFEST)
@click.option("--root", type=click.Path(file_okay=False), help="工作根目录（默认为当前目录）")
@click.option("--skip-failed", is_flag=True, help="下载失败的模组不再尝试解压/移动")
@click.option("--dry-run", is_flag=True, help="干运行模式（只验证清单）")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
def main(
    manifest: str,
    root: Optional[str],
    skip_failed: bool,
    dry_run: bool,
    debug: bool,
):
    """ModBundle - BepInEx 模组下载打包工具"""
    setup_logger(level="DEBUG" if debug else None)

    asyncio.run(run_async(manifest, root, skip_failed, dry_run))


if __name__ == "__main__":
    main()
