import os
import time
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
from loguru import logger
from dumpcopy.connectors.base import BaseConnector
from dumpcopy.connectors.mysql import MySQLConnector
from dumpcopy.models.config import ServerConfig
from dumpcopy.services import pipe
from dumpcopy.services.commands import build_dump_command
from dumpcopy.services.progress import ProgressReporter, format_elapsed

TIMESTAMP_FORMAT = "%Y_%m_%d_%H_%M_%S"

def timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)

def default_zip_filename(database: str, now: Optional[datetime] = None) -> str:
    """默认压缩包名: <db>_<时间戳>.zip"""
    return f"{database}_{timestamp(now)}.zip"

def write_zip(sql_path: Path, zip_path: Path) -> None:
    """以最高压缩级别把 SQL 文件写入压缩包"""
    with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        archive.write(sql_path, arcname=sql_path.name)

class ArchiveService:
    def __init__(self, connector_factory: Callable[[ServerConfig], BaseConnector] = MySQLConnector,
                 reporter: Optional[ProgressReporter] = None):
        self.connector_factory = connector_factory
        self.reporter = reporter or ProgressReporter()

    async def copy_to_zip(self, source: ServerConfig, database: str,
                          zip_filename: Optional[str] = None,
                          output_folder: Optional[str] = None) -> Path:
        """
        整库导出并压缩为 zip 文件 (不做空表处理)

        Args:
            source: 源服务器
            database: 要导出的数据库
            zip_filename: 压缩包文件名, 默认 <db>_<时间戳>.zip
            output_folder: 输出目录, 默认当前目录

        Returns:
            生成的压缩包路径
        """
        folder = Path(output_folder) if output_folder else Path(".")
        zip_path = folder / (zip_filename or default_zip_filename(database))
        sql_path = folder / f"{database}_{timestamp()}.sql"
        message = f"Zipping {database} from {source.name} to {zip_path} ..."

        start = time.time()
        self.reporter.write(message)
        try:
            folder.mkdir(parents=True, exist_ok=True)

            async with self.connector_factory(source) as connector:
                await connector.check_database(database)

            command = build_dump_command(source, database, with_data=True, empty_tables=[], use_empty_tables=False)
            await pipe.dump_to_file(command, str(sql_path))
            write_zip(sql_path, zip_path)
        except BaseException:
            self.reporter.write(f"\r{message} ✖.\n\n")
            raise
        finally:
            if sql_path.exists():
                os.remove(sql_path)

        self.reporter.write(f"\r{message} ✔. Elapsed time: {format_elapsed(time.time() - start)}m\n\n")
        logger.success(f"Archived {source.name}:{database} to {zip_path}")
        return zip_path
