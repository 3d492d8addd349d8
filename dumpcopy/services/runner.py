import time
from typing import Optional
from loguru import logger
from dumpcopy.models.config import DumpConfig, RunOptions
from dumpcopy.services.archive import ArchiveService
from dumpcopy.services.progress import ProgressReporter, format_elapsed
from dumpcopy.services.replicate import ConnectorFactory, ReplicationService
from dumpcopy.connectors.mysql import MySQLConnector

class DumpRunner:
    """根据命令行参数执行 copy / bulk"""

    def __init__(self, config: DumpConfig, options: RunOptions,
                 connector_factory: ConnectorFactory = MySQLConnector,
                 reporter: Optional[ProgressReporter] = None):
        self.config = config
        self.options = options
        self.reporter = reporter or ProgressReporter()
        self.replication = ReplicationService(
            config,
            use_empty_tables=options.use_empty_tables,
            connector_factory=connector_factory,
            reporter=self.reporter
        )
        self.archive = ArchiveService(connector_factory=connector_factory, reporter=self.reporter)

    async def run(self) -> bool:
        """执行命令, bulk 未全部完成时返回 False"""
        if self.options.command == "bulk":
            return await self.run_bulk() == len(self.config.transactions)
        await self.run_copy()
        return True

    async def run_copy(self) -> None:
        if not self.options.database:
            raise ValueError("copy requires the DB argument")
        if self.options.is_zip_target:
            await self.copy_to_zip()
        else:
            await self.copy_to_db()

    async def copy_to_zip(self) -> None:
        source = self.config.find_server(self.options.source, "source")
        await self.archive.copy_to_zip(
            source,
            self.options.database,
            zip_filename=self.options.zip_filename,
            output_folder=self.options.output_folder
        )

    async def copy_to_db(self) -> None:
        source = self.config.find_server(self.options.source, "source")
        target = self.config.find_server(self.options.target, "target")
        await self.replication.replicate_database(
            source, target, self.options.database, self.options.target_database
        )

    async def run_bulk(self) -> int:
        """
        依次复制配置中的所有 transaction

        任意一个失败后输出错误并停止, 返回已完成的数量.
        """
        source = self.config.find_server(self.options.source, "source")
        target = self.config.find_server(self.options.target, "target")

        start = time.time()
        self.reporter.line("\nStart bulk dump")

        counter = 0
        for transaction in self.config.transactions:
            try:
                await self.replication.replicate_database(
                    source, target, transaction.source, transaction.target
                )
            except Exception as e:
                logger.error(f"Bulk dump stopped at {transaction.source} -> {transaction.target}: {str(e)}")
                self.reporter.line(str(e))
                break
            counter += 1

        self.reporter.line(f"{counter} databases done in {format_elapsed(time.time() - start)}m")
        return counter
