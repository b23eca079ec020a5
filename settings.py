import json
import logging
import os
from pathlib import Path
from typing import Optional

from git_graph_config import DEFAULT_CONFIG, GraphConfig


class Settings:
    def __init__(self, config_dir: Optional[str] = None):
        # 配置目录，默认在用户主目录下
        self.config_dir = config_dir or os.path.join(str(Path.home()), ".gitlanes")

        # 配置文件路径
        self.config_file = os.path.join(self.config_dir, "settings.json")

        # 默认设置
        self.settings = {
            "last_repository": None,  # 上次打开的仓库
            "page_size": 100,  # 每次加载的提交数量
            "search_page_size": 50,  # 搜索结果的最大数量
            "graph": DEFAULT_CONFIG.to_dict(),  # 提交图的间距、配色、图例
        }

        # 加载已有设置
        self.load_settings()

    def load_settings(self):
        """加载设置"""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, "r", encoding="utf-8") as f:
                    saved_settings = json.load(f)
                    self.settings.update(saved_settings)
        except (OSError, ValueError):
            logging.exception("加载设置失败：%s", self.config_file)

    def save_settings(self):
        """保存设置"""
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.settings, f, ensure_ascii=False, indent=2)
        except OSError:
            logging.exception("保存设置失败：%s", self.config_file)

    def get_graph_config(self) -> GraphConfig:
        """获取提交图配置，配置无效时使用默认值"""
        try:
            return GraphConfig.from_dict(self.settings.get("graph"))
        except (TypeError, ValueError):
            logging.exception("提交图配置无效，使用默认配置")
            return DEFAULT_CONFIG

    def set_graph_config(self, config: GraphConfig):
        self.settings["graph"] = config.to_dict()
        self.save_settings()

    def get_page_size(self) -> int:
        """获取每页加载的提交数量"""
        return max(int(self.settings.get("page_size", 100)), 1)

    def get_search_page_size(self) -> int:
        return max(int(self.settings.get("search_page_size", 50)), 1)

    def get_last_repository(self) -> Optional[str]:
        """获取上次打开的仓库"""
        return self.settings.get("last_repository")

    def set_last_repository(self, repo_path: str):
        self.settings["last_repository"] = repo_path
        self.save_settings()


# 创建全局settings实例
settings = Settings()
