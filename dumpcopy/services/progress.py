import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

def format_elapsed(seconds: float) -> str:
    """把秒数格式化为 MM:SS"""
    minutes, seconds = divmod(int(seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"

class ProgressReporter:
    """在终端输出步骤进度, 每个步骤完成后原地改写为 ✔ 或 ✖"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def line(self, text: str = "") -> None:
        self.write(text + "\n")

    def header(self, source_name: str, source_db: str, target_name: str, target_db: str) -> None:
        self.line(f"  {source_name}:{source_db} ━━━▶ {target_name}:{target_db}")

    @contextmanager
    def step(self, label: str) -> Iterator[None]:
        self.write(f"  ┗━ {label} ...")
        try:
            yield
        except BaseException:
            self.write(f"\r  ┗━ {label} ... ✖\n\n")
            raise
        self.write(f"\r  ┣━ {label} ... ✔\n")

    def done(self, started: float) -> None:
        self.write(f"\r  ┗━ Done in {format_elapsed(time.time() - started)}m\n\n")
