from typing import List
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, URL
from sqlalchemy.exc import SQLAlchemyError
from dumpcopy.connectors.base import BaseConnector
from dumpcopy.models.config import ServerConfig
from loguru import logger

def quote_identifier(name: str) -> str:
    """用反引号包裹标识符"""
    return "`" + name.replace("`", "``") + "`"

class MySQLConnector(BaseConnector):
    def __init__(self, config: ServerConfig):
        super().__init__(config)
        self._engine: Engine = None

    def _url(self) -> URL:
        # 不指定默认库, 连接到服务器级别
        return URL.create(
            "mysql+pymysql",
            username=self.config.user,
            password=self.config.password or None,
            host=self.config.host,
            port=self.config.port,
        )

    async def connect(self) -> None:
        try:
            # 查询中的 % 不作为参数占位符处理
            self._engine = create_engine(
                self._url(),
                pool_pre_ping=True,
                execution_options={"no_parameters": True}
            )
            # 测试连接
            with self._engine.connect() as conn:
                conn.exec_driver_sql("SELECT 1")
            logger.info(f"Successfully connected to MySQL server: {self.config.name} ({self.config.host}:{self.config.port})")
        except SQLAlchemyError as e:
            logger.error(f"Failed to connect to MySQL server {self.config.name}: {str(e)}")
            raise

    async def disconnect(self) -> None:
        if self._engine:
            self._engine.dispose()
            self._engine = None
            logger.info(f"Disconnected from MySQL server: {self.config.name}")

    async def check_database(self, name: str) -> None:
        try:
            with self._engine.connect() as conn:
                conn.exec_driver_sql(f"USE {quote_identifier(name)}")
            logger.debug(f"Database {name} exists on {self.config.name}")
        except SQLAlchemyError as e:
            logger.error(f"Database {name} is not usable on {self.config.name}: {str(e)}")
            raise

    async def recreate_database(self, name: str) -> None:
        try:
            with self._engine.connect() as conn:
                conn.exec_driver_sql(f"DROP DATABASE IF EXISTS {quote_identifier(name)}")
                conn.exec_driver_sql(f"CREATE DATABASE {quote_identifier(name)}")
                conn.commit()
            logger.info(f"Recreated database {name} on {self.config.name}")
        except SQLAlchemyError as e:
            logger.error(f"Failed to recreate database {name} on {self.config.name}: {str(e)}")
            raise

    async def execute_in_database(self, name: str, queries: List[str]) -> None:
        try:
            # USE 只对当前连接有效, 所有语句必须在同一连接上执行
            with self._engine.connect() as conn:
                conn.exec_driver_sql(f"USE {quote_identifier(name)}")
                for query in queries:
                    conn.exec_driver_sql(query)
                    logger.debug(f"Successfully executed SQL on {name}: {query}")
                conn.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to execute post-process queries on {name}: {str(e)}")
            raise
