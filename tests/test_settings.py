"""
设置与提交图配置的单元测试
"""

import json
import os
import shutil
import tempfile
import unittest

from git_graph_config import BRANCH_COLORS, DEFAULT_CONFIG, GraphConfig
from settings import Settings


class TestGraphConfig(unittest.TestCase):
    """提交图配置测试"""

    def test_defaults(self):
        self.assertEqual(DEFAULT_CONFIG.row_height, 48)
        self.assertEqual(DEFAULT_CONFIG.column_width, 24)
        self.assertEqual(DEFAULT_CONFIG.left_margin, 40)
        self.assertEqual(DEFAULT_CONFIG.legend_cap, 8)
        self.assertEqual(len(DEFAULT_CONFIG.palette), 10)

    def test_palette_cycles(self):
        self.assertEqual(DEFAULT_CONFIG.color_for_column(0), BRANCH_COLORS[0])
        self.assertEqual(DEFAULT_CONFIG.color_for_column(12), BRANCH_COLORS[2])

    def test_from_dict(self):
        """测试未知字段被忽略"""
        config = GraphConfig.from_dict({"row_height": 30, "palette": ["#fff"], "unknown": 1})
        self.assertEqual(config.row_height, 30)
        self.assertEqual(config.palette, ("#fff",))
        self.assertEqual(config.column_width, 24)

    def test_from_empty_dict(self):
        self.assertEqual(GraphConfig.from_dict(None), DEFAULT_CONFIG)
        self.assertEqual(GraphConfig.from_dict({}), DEFAULT_CONFIG)

    def test_invalid_values(self):
        for values in ({"row_height": 0}, {"column_width": -1}, {"left_margin": -5}, {"palette": []}, {"legend_cap": 0}):
            with self.assertRaises(ValueError, msg=str(values)):
                GraphConfig.from_dict(values)

    def test_round_trip(self):
        config = GraphConfig(row_height=32, palette=("#123456", "#abcdef"))
        self.assertEqual(GraphConfig.from_dict(config.to_dict()), config)
        # to_dict 的结果需要能写入 JSON
        json.dumps(config.to_dict())


class TestSettings(unittest.TestCase):
    """设置读写测试"""

    def setUp(self):
        self.config_dir = os.path.join(tempfile.mkdtemp(), "gitlanes")

    def tearDown(self):
        shutil.rmtree(os.path.dirname(self.config_dir))

    def write_settings(self, data):
        os.makedirs(self.config_dir, exist_ok=True)
        with open(os.path.join(self.config_dir, "settings.json"), "w", encoding="utf-8") as f:
            json.dump(data, f)

    def test_defaults(self):
        """测试没有配置文件时使用默认值"""
        settings = Settings(self.config_dir)
        self.assertIsNone(settings.get_last_repository())
        self.assertEqual(settings.get_page_size(), 100)
        self.assertEqual(settings.get_search_page_size(), 50)
        self.assertEqual(settings.get_graph_config(), DEFAULT_CONFIG)
        self.assertFalse(os.path.exists(settings.config_file))

    def test_last_repository_persisted(self):
        """测试上次打开的仓库被保存"""
        Settings(self.config_dir).set_last_repository("/tmp/some-repo")
        self.assertEqual(Settings(self.config_dir).get_last_repository(), "/tmp/some-repo")

    def test_graph_config_persisted(self):
        settings = Settings(self.config_dir)
        settings.set_graph_config(GraphConfig(row_height=30, legend_cap=4))

        loaded = Settings(self.config_dir).get_graph_config()
        self.assertEqual(loaded.row_height, 30)
        self.assertEqual(loaded.legend_cap, 4)

    def test_page_sizes_from_file(self):
        self.write_settings({"page_size": 25, "search_page_size": 0})
        settings = Settings(self.config_dir)
        self.assertEqual(settings.get_page_size(), 25)
        self.assertEqual(settings.get_search_page_size(), 1)

    def test_invalid_graph_config_falls_back(self):
        """测试无效的提交图配置回退到默认值"""
        self.write_settings({"graph": {"row_height": -1}})
        settings = Settings(self.config_dir)
        with self.assertLogs(level="ERROR"):
            self.assertEqual(settings.get_graph_config(), DEFAULT_CONFIG)

    def test_corrupt_file(self):
        """测试损坏的配置文件不影响启动"""
        os.makedirs(self.config_dir, exist_ok=True)
        with open(os.path.join(self.config_dir, "settings.json"), "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertLogs(level="ERROR"):
            settings = Settings(self.config_dir)
        self.assertEqual(settings.get_page_size(), 100)


if __name__ == "__main__":
    unittest.main()
