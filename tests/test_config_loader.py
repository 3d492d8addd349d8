import json
import os
import tempfile
import unittest
from loguru import logger
from dumpcopy.config.loader import load_config

class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "config.json")

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, data):
        with open(self.path, "w", encoding="utf-8") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)

    def test_capitalised_keys(self):
        """兼容首字母大写的配置键与 Ip 字段"""
        self.write({
            "Servers": [
                {"Name": "prod", "Ip": "10.0.0.5", "User": "root", "Password": "secret"},
                {"Name": "local", "Ip": "127.0.0.1", "User": "root", "Password": ""}
            ],
            "Empty_tables": ["sessions"],
            "Transactions": [["shop", "shop_copy"], ["blog", "blog"]],
            "Post_process_queries": ["UPDATE users SET email = CONCAT(id, '@example.com')"]
        })
        config = load_config(self.path)

        self.assertEqual([s.name for s in config.servers], ["prod", "local"])
        self.assertEqual(config.servers[0].host, "10.0.0.5")
        self.assertEqual(config.servers[0].port, 3306)
        self.assertEqual(config.servers[1].password, "")
        self.assertEqual(config.empty_tables, ["sessions"])
        self.assertEqual(config.transactions[0].source, "shop")
        self.assertEqual(config.transactions[0].target, "shop_copy")
        self.assertEqual(len(config.post_process_queries), 1)

    def test_host_and_port(self):
        self.write({"servers": [{"name": "a", "host": "db", "user": "u", "port": 3307}]})
        config = load_config(self.path)
        self.assertEqual(config.servers[0].host, "db")
        self.assertEqual(config.servers[0].port, 3307)
        self.assertEqual(config.empty_tables, [])
        self.assertEqual(config.transactions, [])
        self.assertEqual(config.post_process_queries, [])

    def test_find_server(self):
        self.write({"servers": [{"name": "a", "host": "db", "user": "u"}]})
        config = load_config(self.path)
        self.assertEqual(config.find_server("a").host, "db")
        with self.assertRaises(ValueError) as ctx:
            config.find_server("missing", "target")
        self.assertIn("target 'missing' not found", str(ctx.exception))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config(os.path.join(self.tmpdir.name, "nope.json"))

    def test_invalid_json(self):
        self.write("{not json")
        with self.assertRaises(ValueError):
            load_config(self.path)

    def test_missing_servers(self):
        self.write({"transactions": []})
        with self.assertRaises(ValueError) as ctx:
            load_config(self.path)
        self.assertIn("servers", str(ctx.exception))

    def test_server_without_host(self):
        self.write({"servers": [{"name": "a", "user": "u"}]})
        with self.assertRaises(ValueError):
            load_config(self.path)

    def test_passwords_masked_in_debug_log(self):
        self.write({"servers": [{"name": "a", "host": "db", "user": "u", "password": "hunter2"}]})
        messages = []
        handler_id = logger.add(messages.append, level="DEBUG", format="{message}")
        try:
            config = load_config(self.path)
        finally:
            logger.remove(handler_id)

        text = "".join(messages)
        self.assertEqual(config.servers[0].password, "hunter2")
        self.assertNotIn("hunter2", text)
        self.assertIn("***", text)

    def test_null_transaction_name(self):
        """transaction 中的 null 或空字符串不能当作库名"""
        for entry in (["shop", None], [None, "shop"], ["shop", 1], ["", "shop"]):
            self.write({"servers": [], "transactions": [entry]})
            with self.assertRaises(ValueError):
                load_config(self.path)

    def test_malformed_transaction(self):
        self.write({"servers": [], "transactions": [["only_source"]]})
        with self.assertRaises(ValueError):
            load_config(self.path)

if __name__ == '__main__':
    unittest.main()
