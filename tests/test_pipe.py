import os
import sys
import tempfile
import unittest
from dumpcopy.services.pipe import CommandError, dump_to_file, pipe_commands

PRODUCER = [sys.executable, "-c", "import sys; sys.stdout.write('CREATE TABLE t (id INT);\\n' * 1000)"]
CONSUMER_CHECK = (
    "import sys\n"
    "data = sys.stdin.read()\n"
    "sys.exit(0 if data.count('CREATE TABLE') == 1000 else 3)\n"
)

class TestPipeCommands(unittest.IsolatedAsyncioTestCase):
    async def test_stream_reaches_consumer(self):
        """consumer 读到完整输出并在 producer 退出后收到 EOF"""
        await pipe_commands(PRODUCER, [sys.executable, "-c", CONSUMER_CHECK])

    async def test_consumer_failure(self):
        consumer = [sys.executable, "-c", "import sys; sys.stdin.read(); sys.stderr.write('boom'); sys.exit(2)"]
        with self.assertRaises(CommandError) as ctx:
            await pipe_commands(PRODUCER, consumer)
        self.assertEqual(ctx.exception.returncode, 2)
        self.assertEqual(ctx.exception.stderr, "boom")
        self.assertIn("boom", str(ctx.exception))

    async def test_producer_failure(self):
        producer = [sys.executable, "-c", "import sys; sys.exit(5)"]
        consumer = [sys.executable, "-c", "import sys; sys.stdin.read()"]
        with self.assertRaises(CommandError) as ctx:
            await pipe_commands(producer, consumer)
        self.assertEqual(ctx.exception.returncode, 5)

    async def test_missing_binary(self):
        with self.assertRaises(CommandError) as ctx:
            await pipe_commands(PRODUCER, ["surely-not-a-real-binary-xyz"])
        self.assertEqual(ctx.exception.binary, "surely-not-a-real-binary-xyz")
        self.assertIsNone(ctx.exception.returncode)

class TestDumpToFile(unittest.IsolatedAsyncioTestCase):
    async def test_writes_output(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "dump.sql")
            await dump_to_file([sys.executable, "-c", "print('SELECT 1;')"], path)
            with open(path, encoding="utf-8") as f:
                self.assertEqual(f.read().strip(), "SELECT 1;")

    async def test_failure(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "dump.sql")
            with self.assertRaises(CommandError):
                await dump_to_file([sys.executable, "-c", "import sys; sys.exit(1)"], path)

if __name__ == '__main__':
    unittest.main()
