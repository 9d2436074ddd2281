import json
import logging
import os
from dataclasses import dataclass, asdict, fields

import platformdirs

from webvpn import WEBVPN_HOST, DEFAULT_KEY, DEFAULT_IV, WebVpnKeyMaterial, derive_key_material
from .error import ConfigError
from .log import APP_NAME, logger

CONFIG_FILE = "config.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_config_path() -> str:
    return os.path.join(platformdirs.user_config_dir(APP_NAME), CONFIG_FILE)


@dataclass
class Config:
    """
    库的配置项。可以直接构造，也可以通过 Config.load 从 JSON 文件中读取。
    文件中缺少的项使用默认值，未知的项会被忽略。
    """
    # 每个网络请求的超时时间（秒）
    timeout: float = 10.0
    # 是否只生成当前操作系统上浏览器的 UA
    fit_system_ua: bool = False
    # webvpn 网关的主机名
    webvpn_host: str = WEBVPN_HOST
    # webvpn 网关加密主机名使用的密钥与 IV
    webvpn_key: str = DEFAULT_KEY
    webvpn_iv: str = DEFAULT_IV
    log_level: str = "WARNING"

    def validate(self) -> "Config":
        """
        检查每个配置项是否合法。
        :raise ConfigError: 某个配置项不合法
        :return: 自身，方便链式调用
        """
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ConfigError("timeout", "必须是正数")
        if not isinstance(self.fit_system_ua, bool):
            raise ConfigError("fit_system_ua", "必须是布尔值")
        if not isinstance(self.webvpn_host, str) or not self.webvpn_host or "/" in self.webvpn_host:
            raise ConfigError("webvpn_host", "必须是不含路径的主机名")
        if not isinstance(self.webvpn_key, str) or len(self.webvpn_key.encode("utf-8")) not in (16, 24, 32):
            raise ConfigError("webvpn_key", "长度必须为 16、24 或 32 字节")
        if not isinstance(self.webvpn_iv, str) or len(self.webvpn_iv.encode("utf-8")) != 16:
            raise ConfigError("webvpn_iv", "长度必须为 16 字节")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError("log_level", f"必须是 {', '.join(LOG_LEVELS)} 之一")
        return self

    def key_material(self) -> WebVpnKeyMaterial:
        """每次调用都根据当前配置重新生成 webvpn 的密钥与 IV"""
        return derive_key_material(self.webvpn_key, self.webvpn_iv)

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    def apply_logging(self):
        """按照 log_level 设置此库 logger 的级别"""
        logger.setLevel(self.logging_level)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known}).validate()

    @classmethod
    def load(cls, path: str = None) -> "Config":
        """
        从 JSON 文件读取配置。文件不存在时返回默认配置。
        :param path: 配置文件路径，默认为系统推荐的配置目录下的 config.json
        :raise ConfigError: 文件内容不是 JSON 对象，或某个配置项不合法
        """
        if path is None:
            path = default_config_path()
        if not os.path.exists(path):
            return cls()

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(path, f"不是合法的 JSON 文件: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(path, "顶层必须是 JSON 对象")
        return cls.from_dict(data)

    def save(self, path: str = None) -> str:
        """
        把配置写入 JSON 文件
        :return: 写入的文件路径
        """
        if path is None:
            path = default_config_path()
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, ensure_ascii=False, indent=4)
        return path
