import json
from typing import Any, Dict, List
from dumpcopy.models.config import DumpConfig, ServerConfig, Transaction
from loguru import logger

def _lower_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """配置键不区分大小写 (兼容 Servers / Empty_tables 这类写法)"""
    return {str(key).lower(): value for key, value in data.items()}

def _masked(data: Dict[str, Any]) -> Dict[str, Any]:
    servers = []
    for server in data.get('servers', []):
        if isinstance(server, dict):
            server = {k: ('***' if str(k).lower() == 'password' and v else v) for k, v in server.items()}
        servers.append(server)
    return {**data, 'servers': servers}

def _parse_server(entry: Dict[str, Any]) -> ServerConfig:
    entry = _lower_keys(entry)
    host = entry.get('host') or entry.get('ip')
    if not host:
        raise KeyError('servers[].ip')
    return ServerConfig(
        name=entry['name'],
        host=host,
        user=entry['user'],
        password=entry.get('password') or '',
        port=int(entry.get('port') or 3306)
    )

def _parse_transaction(entry: Any) -> Transaction:
    if (not isinstance(entry, (list, tuple)) or len(entry) != 2
            or not all(isinstance(name, str) and name for name in entry)):
        raise ValueError(f"配置文件中的 transaction 必须是 [source, target] 形式: {entry!r}")
    return Transaction(source=entry[0], target=entry[1])

def _string_list(data: Dict[str, Any], key: str) -> List[str]:
    values = data.get(key) or []
    if not isinstance(values, list):
        raise ValueError(f"配置文件字段 {key} 必须是数组")
    return [str(value) for value in values]

def load_config(config_path: str) -> DumpConfig:
    """
    从JSON文件加载服务器与批量复制配置

    Args:
        config_path: 配置文件路径

    Returns:
        DumpConfig对象

    Raises:
        FileNotFoundError: 配置文件不存在
        ValueError: JSON格式错误或配置内容无效
    """
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = _lower_keys(json.load(f))

        logger.debug(f"读取配置文件内容: {json.dumps(_masked(data), indent=2)}")

        servers = [_parse_server(server) for server in data['servers']]
        transactions = [_parse_transaction(entry) for entry in data.get('transactions') or []]

        config = DumpConfig(
            servers=servers,
            empty_tables=_string_list(data, 'empty_tables'),
            transactions=transactions,
            post_process_queries=_string_list(data, 'post_process_queries')
        )
        logger.debug(f"已加载 {len(config.servers)} 个服务器, {len(config.transactions)} 个 transaction")

        return config

    except FileNotFoundError:
        raise FileNotFoundError(f"配置文件不存在: {config_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"配置文件JSON格式错误: {str(e)}")
    except KeyError as e:
        raise ValueError(f"配置文件缺少必要字段: {str(e)}")
    except (TypeError, AttributeError) as e:
        raise ValueError(f"配置文件加载失败: {str(e)}")
