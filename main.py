import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from git_manager_window import GitManagerWindow


def main():
    app = QApplication(sys.argv)

    # 命令行可以指定仓库路径，否则打开上次的仓库
    repo_path = sys.argv[1] if len(sys.argv) > 1 else None
    window = GitManagerWindow(repo_path)
    window.show()

    # 尝试解决失焦问题，启动后窗口为灰色
    window.activateWindow()
    window.raise_()

    sys.exit(app.exec())


if __name__ == "__main__":
    # 根据环境变量设置日志级别
    log_level = logging.DEBUG if os.getenv("DEBUG") == "1" else logging.INFO

    # 配置日志
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"
    )
    # add file handler
    if os.getenv("LOG_TO_FILE") == "1":
        file_handler = logging.FileHandler("gitlanes.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s")
        )
        logging.getLogger().addHandler(file_handler)
    main()
