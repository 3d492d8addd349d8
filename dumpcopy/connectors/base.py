from abc import ABC, abstractmethod
from typing import List
from dumpcopy.models.config import ServerConfig

class BaseConnector(ABC):
    def __init__(self, config: ServerConfig):
        self.config = config

    async def __aenter__(self) -> "BaseConnector":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    @abstractmethod
    async def connect(self) -> None:
        """建立服务器连接"""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """关闭服务器连接"""
        pass

    @abstractmethod
    async def check_database(self, name: str) -> None:
        """确认数据库存在, 不存在时抛出异常"""
        pass

    @abstractmethod
    async def recreate_database(self, name: str) -> None:
        """删除并重新创建数据库"""
        pass

    @abstractmethod
    async def execute_in_database(self, name: str, queries: List[str]) -> None:
        """
        在指定数据库中依次执行SQL语句

        Args:
            name: 数据库名
            queries: SQL语句列表, 任意一条失败即中止
        """
        pass
