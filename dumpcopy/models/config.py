from typing import List, Optional
from dataclasses import dataclass, field

@dataclass
class ServerConfig:
    name: str
    host: str
    user: str
    password: str = ""
    port: int = 3306

@dataclass
class Transaction:
    source: str
    target: str

@dataclass
class DumpConfig:
    servers: List[ServerConfig]
    empty_tables: List[str] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
    post_process_queries: List[str] = field(default_factory=list)

    def find_server(self, name: str, role: str = "source") -> ServerConfig:
        """
        按名称查找服务器配置

        Args:
            name: 服务器名称
            role: 在错误信息中使用的角色 (source / target)

        Raises:
            ValueError: 配置文件中没有该服务器
        """
        for server in self.servers:
            if server.name == name:
                return server
        raise ValueError(f"{role} '{name}' not found in config file")

@dataclass
class RunOptions:
    command: str
    source: str
    target: str
    database: Optional[str] = None
    database_rename: Optional[str] = None
    use_empty_tables: bool = True
    zip_filename: Optional[str] = None
    output_folder: Optional[str] = None
    config_path: str = "config.json"
    verbose: bool = False
    log_file: str = "dump.log"

    @property
    def is_zip_target(self) -> bool:
        return self.target == "zip"

    @property
    def target_database(self) -> Optional[str]:
        return self.database_rename or self.database
