"""
主协调器

按清单顺序完成下载、解压、移动，最后打包输出目录。
"""

import os
from typing import Any, Awaitable, Callable, List, Optional

import aiohttp
from loguru import logger

from modbundle.models import (
    AssetType,
    BundleSettings,
    ModDescriptor,
    RunReport,
    Stage,
    StageResult,
)
from modbundle.manifest import ManifestLoader
from modbundle.download import Fetcher
from modbundle.processer import ArchiveExtractor, PluginRelocator
from modbundle.packager import ZipBuilder
from modbundle.exceptions import ManifestError, ModBundleError


class BundleOrchestrator:
    """ModBundle 主协调器"""

    def __init__(
        self,
        settings: BundleSettings,
        loader: ManifestLoader,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings
        self.loader = loader
        self._session = session
        self._owned_session = session is None
        self.fetcher: Optional[Fetcher] = None
        self.extractor = ArchiveExtractor(settings)
        self.relocator = PluginRelocator(settings)
        self.zip_builder = ZipBuilder(compress_level=settings.compress_level)

    async def run(self) -> RunReport:
        """
        运行完整流程

        Returns:
            各阶段结果汇总

        Raises:
            ManifestError: 清单文件无法解析
        """
        logger.info("开始 ModBundle 任务...")
        report = RunReport()

        entries = await self.loader.load()
        if entries is None:
            logger.warning("没有可处理的模组清单，跳过下载")
            entries = []

        mods = self._build_descriptors(entries, report)

        if mods:
            try:
                await self._process_mods(mods, report)
            finally:
                await self.close()

        await self._package(report)

        stats = report.summary()
        logger.info(
            f"下载 {stats['fetch_ok']} 成功 / {stats['fetch_failed']} 失败, "
            f"解压 {stats['extract_ok']} 成功 / {stats['extract_failed']} 失败, "
            f"移动 {stats['relocate_ok']} 成功 / {stats['relocate_failed']} 失败"
        )
        if report.bytes_downloaded:
            logger.info(f"共下载 {report.bytes_downloaded / (1024 * 1024):.2f} MB")
        return report

    def _build_descriptors(
        self, entries: List[Any], report: RunReport
    ) -> List[ModDescriptor]:
        mods = []
        for index, entry in enumerate(entries):
            try:
                mods.append(ModDescriptor.from_dict(entry))
            except ManifestError as e:
                name = entry.get("name") if isinstance(entry, dict) else None
                report.invalid.append(name or f"#{index}")
                logger.error(f"跳过无效的模组条目 #{index}: {e}")
        logger.info(f"共 {len(mods)} 个模组")
        return mods

    async def _process_mods(self, mods: List[ModDescriptor], report: RunReport):
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owned_session = True
        if self.fetcher is None:
            self.fetcher = Fetcher(self.settings, self._session)

        os.makedirs(self.settings.staging_dir, exist_ok=True)

        for mod in mods:
            logger.info(f"正在下载 {mod.name}...")
            result = await self._run_stage(
                mod.name, Stage.FETCH, lambda mod=mod: self.fetcher.fetch(mod)
            )
            report.add(result)
            if result.ok:
                logger.success(f"{mod.name} 下载成功")
        report.bytes_downloaded = self.fetcher.bytes_downloaded

        fetch_failed = set(report.failed(Stage.FETCH))

        for mod in self._filter(mods, AssetType.ZIP):
            if self.settings.skip_failed and mod.name in fetch_failed:
                report.add(StageResult.skip(mod.name, Stage.EXTRACT))
                logger.warning(f"{mod.name} 下载失败，跳过解压")
                continue
            logger.info(f"正在解压 {mod.name}...")
            result = await self._run_stage(
                mod.name, Stage.EXTRACT, lambda mod=mod: self.extractor.extract(mod)
            )
            report.add(result)
            if result.ok:
                logger.success(f"{mod.name} 解压成功")

        for mod in self._filter(mods, AssetType.DLL):
            if self.settings.skip_failed and mod.name in fetch_failed:
                report.add(StageResult.skip(mod.name, Stage.RELOCATE))
                logger.warning(f"{mod.name} 下载失败，跳过移动")
                continue
            logger.info(f"正在移动 {mod.name}...")
            result = await self._run_stage(
                mod.name,
                Stage.RELOCATE,
                lambda mod=mod: self.relocator.relocate(mod),
            )
            report.add(result)
            if result.ok:
                logger.success(f"{mod.name} 移动成功")

    async def _package(self, report: RunReport):
        logger.info("正在打包输出目录...")
        result = await self._run_stage(
            os.path.basename(self.settings.archive_path),
            Stage.PACKAGE,
            lambda: self.zip_builder.build(
                self.settings.output_dir, self.settings.archive_path
            ),
        )
        report.add(result)
        if result.ok:
            report.archive_path = self.settings.archive_path
            logger.success(f"ZIP 生成成功: {self.settings.archive_path}")

    @staticmethod
    def _filter(mods: List[ModDescriptor], asset_type: AssetType):
        return [mod for mod in mods if mod.asset_type == asset_type]

    @staticmethod
    async def _run_stage(
        name: str, stage: Stage, action: Callable[[], Awaitable[Any]]
    ) -> StageResult:
        """执行单个阶段，把异常转换为结果"""
        try:
            await action()
        except ModBundleError as e:
            logger.error(f"{name} {stage.value} 失败: {e}")
            return StageResult.failure(name, stage, e)
        except Exception as e:
            logger.exception(f"{name} {stage.value} 时发生意外错误: {e}")
            return StageResult.failure(name, stage, e)
        return StageResult.success(name, stage)

    async def close(self):
        """关闭网络会话"""
        if self.fetcher is not None:
            await self.fetcher.close()
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()
