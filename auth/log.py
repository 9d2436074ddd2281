# 此库使用的 logger。
# 格式化器的原始代码来自：https://github.com/moesnow/March7thAssistant/blob/main/utils/logger/logger.py
import logging
import os
import re
import time

import platformdirs
from colorama import init

APP_NAME = "neust"

# 初始化colorama以支持在不同平台上的颜色显示
init(autoreset=True)


class ColorCodeFilter(logging.Formatter):
    """
    自定义日志格式化器，用于移除日志消息中的ANSI颜色代码。
    写入文件的日志使用此格式化器。
    """

    color_pattern = re.compile(r'\033\[[0-9;]+m')

    def format(self, record):
        record.msg = self.color_pattern.sub('', record.getMessage())
        record.args = None
        record.levelname = self.color_pattern.sub('', record.levelname)
        return super().format(record)


class ColoredFormatter(logging.Formatter):
    """给不同级别的日志信息添加颜色。"""

    COLORS = {
        'DEBUG': '\033[94m',  # 蓝色
        'INFO': '\033[92m',   # 绿色
        'WARNING': '\033[93m',  # 黄色
        'ERROR': '\033[91m',   # 红色
        'CRITICAL': '\033[95m',  # 紫色
        'RESET': '\033[0m'
    }

    def format(self, record):
        # 复制一份，避免颜色代码影响同一条记录的其他 handler
        record = logging.makeLogRecord(record.__dict__)
        color_start = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        record.levelname = f"{color_start}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def get_logger(name, level=logging.WARNING):
    log = logging.getLogger(name)
    log.setLevel(level)
    if not log.handlers:
        ch = logging.StreamHandler()
        ch.setFormatter(ColoredFormatter(FORMAT))
        log.addHandler(ch)
    return log


def enable_file_log(log=None, path=None) -> str:
    """
    把日志同时写入文件。默认写入系统推荐的日志目录下，以当天日期命名的文件。
    :param log: 需要写入文件的 logger，默认为此库的 logger
    :param path: 日志文件路径
    :return: 日志文件路径
    """
    if log is None:
        log = logger
    if path is None:
        directory = platformdirs.user_log_dir(APP_NAME, ensure_exists=True)
        path = os.path.join(directory, f"{time.strftime('%Y-%m-%d', time.localtime())}.log")

    file = logging.FileHandler(path, encoding="utf-8")
    file.setFormatter(ColorCodeFilter(FORMAT))
    log.addHandler(file)
    return path


logger = get_logger(APP_NAME)
