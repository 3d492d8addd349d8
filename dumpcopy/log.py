import sys
from loguru import logger

FILE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <level>{message}</level>"

def setup_logging(verbose: bool = False, log_file: str = "dump.log") -> None:
    # 移除默认的处理器
    logger.remove()

    # 添加文件处理器
    logger.add(
        log_file,
        rotation="500 MB",
        level="INFO",
        format=FILE_FORMAT
    )

    # 控制台只输出警告和错误, 进度信息走标准输出
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format=CONSOLE_FORMAT
    )
