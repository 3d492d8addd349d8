import shutil
from typing import List, Sequence
from dumpcopy.models.config import ServerConfig

MAX_ALLOWED_PACKET = "2GB"

def _connection_args(server: ServerConfig) -> List[str]:
    return [
        f"--host={server.host}",
        f"--port={server.port}",
        f"--user={server.user}",
    ]

def build_dump_command(server: ServerConfig, database: str, with_data: bool,
                       empty_tables: Sequence[str], use_empty_tables: bool = True) -> List[str]:
    """
    构建 mysqldump 命令

    Args:
        server: 源服务器
        database: 要导出的数据库
        with_data: True 时导出数据并忽略空表, False 时只导出空表的结构
        empty_tables: 只复制结构的表
        use_empty_tables: 为 False 时不做空表处理, 整库导出

    Returns:
        命令参数列表
    """
    args = ["mysqldump"] + _connection_args(server) + [
        "--skip-lock-tables",
        "--default-character-set=utf8mb4",
        f"--max-allowed-packet={MAX_ALLOWED_PACKET}",
        "--single-transaction",
        "--set-gtid-purged=OFF",
    ]

    if server.password:
        args.append(f"--password={server.password}")

    args.append(database)

    if use_empty_tables and empty_tables:
        if with_data:
            args.extend(f"--ignore-table={database}.{table}" for table in empty_tables)
        else:
            args.extend(["--no-data", "--no-create-db", "--no-tablespaces", "--tables"])
            args.extend(empty_tables)

    return args

def build_restore_command(server: ServerConfig, database: str) -> List[str]:
    """构建 mysql 导入命令"""
    args = ["mysql"] + _connection_args(server) + [
        f"--database={database}",
        f"--max-allowed-packet={MAX_ALLOWED_PACKET}",
        "--ssl-mode=DISABLED",
    ]

    if server.password:
        args.append(f"--password={server.password}")

    args.append(database)
    return args

def redact(args: Sequence[str]) -> str:
    """日志输出用, 隐藏密码"""
    return " ".join("--password=***" if arg.startswith("--password=") else arg for arg in args)

def missing_tools(tools: Sequence[str]) -> List[str]:
    return [tool for tool in tools if shutil.which(tool) is None]
