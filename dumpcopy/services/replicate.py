import time
from typing import Callable, Optional
from loguru import logger
from dumpcopy.connectors.base import BaseConnector
from dumpcopy.connectors.mysql import MySQLConnector
from dumpcopy.models.config import DumpConfig, ServerConfig
from dumpcopy.services import pipe
from dumpcopy.services.commands import build_dump_command, build_restore_command
from dumpcopy.services.progress import ProgressReporter

ConnectorFactory = Callable[[ServerConfig], BaseConnector]

class ReplicationService:
    def __init__(self, config: DumpConfig, use_empty_tables: bool = True,
                 connector_factory: ConnectorFactory = MySQLConnector,
                 reporter: Optional[ProgressReporter] = None):
        self.config = config
        self.use_empty_tables = use_empty_tables
        self.connector_factory = connector_factory
        self.reporter = reporter or ProgressReporter()

    @property
    def has_empty_tables(self) -> bool:
        return self.use_empty_tables and bool(self.config.empty_tables)

    async def create_target_database(self, source: ServerConfig, target: ServerConfig,
                                     source_db: str, target_db: str) -> None:
        """确认源库存在后, 删除并重建目标库"""
        async with self.connector_factory(source) as connector:
            await connector.check_database(source_db)
        async with self.connector_factory(target) as connector:
            await connector.recreate_database(target_db)

    async def replicate_tables(self, source: ServerConfig, target: ServerConfig,
                               source_db: str, target_db: str, with_data: bool) -> None:
        dump_command = build_dump_command(
            source, source_db, with_data, self.config.empty_tables, self.use_empty_tables
        )
        restore_command = build_restore_command(target, target_db)
        await pipe.pipe_commands(dump_command, restore_command)

    async def clean_target_database(self, target: ServerConfig, target_db: str) -> None:
        """在目标库执行配置的后处理语句"""
        async with self.connector_factory(target) as connector:
            await connector.execute_in_database(target_db, self.config.post_process_queries)

    async def replicate_database(self, source: ServerConfig, target: ServerConfig,
                                 source_db: str, target_db: str) -> None:
        """
        把源服务器上的数据库复制到目标服务器

        任意步骤失败时输出 ✖ 并向上抛出异常, 后续步骤不再执行.
        """
        self.reporter.header(source.name, source_db, target.name, target_db)
        logger.info(f"Replicating {source.name}:{source_db} -> {target.name}:{target_db}")
        start = time.time()

        with self.reporter.step("Creating target database"):
            await self.create_target_database(source, target, source_db, target_db)

        # 空表在这一步被忽略
        with self.reporter.step("Replicating tables with data"):
            await self.replicate_tables(source, target, source_db, target_db, with_data=True)

        if self.has_empty_tables:
            with self.reporter.step("Replicating tables without data"):
                await self.replicate_tables(source, target, source_db, target_db, with_data=False)

        if self.use_empty_tables:
            with self.reporter.step("Clear user data"):
                await self.clean_target_database(target, target_db)

        self.reporter.done(start)
        logger.success(f"Replicated {source.name}:{source_db} -> {target.name}:{target_db} "
                       f"in {time.time() - start:.2f}s")
