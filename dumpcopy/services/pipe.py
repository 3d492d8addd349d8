import asyncio
import os
from typing import List, Optional
from loguru import logger
from dumpcopy.services.commands import redact

class CommandError(RuntimeError):
    """外部命令启动失败或返回非零退出码"""

    def __init__(self, binary: str, returncode: Optional[int] = None, stderr: str = "", message: str = ""):
        self.binary = binary
        self.returncode = returncode
        self.stderr = stderr.strip()
        if not message:
            message = f"{binary} exited with code {returncode}"
            if self.stderr:
                message += f": {self.stderr}"
        super().__init__(message)

def _decode(data: Optional[bytes]) -> str:
    return data.decode("utf-8", errors="ignore") if data else ""

def _check(binary: str, returncode: int, stderr: str) -> None:
    if returncode != 0:
        raise CommandError(binary, returncode, stderr)
    if stderr.strip():
        logger.warning(f"{binary}: {stderr.strip()}")

async def _spawn(args: List[str], **kwargs) -> asyncio.subprocess.Process:
    logger.debug(f"Executing command: {redact(args)}")
    try:
        return await asyncio.create_subprocess_exec(
            *args,
            stderr=asyncio.subprocess.PIPE,
            **kwargs
        )
    except OSError as e:
        raise CommandError(args[0], message=f"Failed to start {args[0]}: {e}") from e

async def pipe_commands(producer: List[str], consumer: List[str]) -> None:
    """
    把 producer 的标准输出通过管道接到 consumer 的标准输入

    两端都由子进程持有后父进程立即关闭自己的句柄,
    producer 退出时 consumer 才能读到 EOF.

    Raises:
        CommandError: 任一进程启动失败或返回非零退出码
    """
    read_fd, write_fd = os.pipe()
    try:
        try:
            dump = await _spawn(producer, stdin=asyncio.subprocess.DEVNULL, stdout=write_fd)
        finally:
            os.close(write_fd)

        try:
            restore = await _spawn(consumer, stdin=read_fd)
        except CommandError:
            try:
                dump.kill()
            except ProcessLookupError:
                # 已经退出
                pass
            await dump.wait()
            raise
    finally:
        os.close(read_fd)

    (_, dump_err), (_, restore_err) = await asyncio.gather(
        dump.communicate(),
        restore.communicate()
    )

    # consumer 的错误更能说明问题, 先检查
    _check(consumer[0], restore.returncode, _decode(restore_err))
    _check(producer[0], dump.returncode, _decode(dump_err))

async def dump_to_file(command: List[str], path: str) -> None:
    """把命令输出写入文件"""
    with open(path, "wb") as f:
        process = await _spawn(command, stdin=asyncio.subprocess.DEVNULL, stdout=f)
        _, stderr = await process.communicate()

    _check(command[0], process.returncode, _decode(stderr))
    logger.info(f"Dump written to {path} ({os.path.getsize(path):,} bytes)")
