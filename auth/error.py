class NeustError(Exception):
    """此库中所有错误的基类"""


class TransportError(NeustError):
    """
    网络请求没有完成：连接失败、超时、TLS 错误，或登录页面返回了非 2xx 的状态码。
    原始的 requests 异常保存在 __cause__ 中。此错误不会被自动重试，是否重试由调用者决定。
    """
    def __init__(self, url: str, message: str = ""):
        self.url = url
        self.message = message

    def __str__(self):
        return f"TransportError: {self.url} {self.message}".rstrip()


class MalformedPage(NeustError):
    """登录页面中找不到必需的字段，一般说明学校更换了页面模板。"""
    def __init__(self, url: str, field: str):
        self.url = url
        self.field = field

    def __str__(self):
        return f"MalformedPage: can not find field {self.field} in page {self.url}"


class StatusConflict(NeustError):
    """请求登录页面时被重定向到了其他页面，说明当前会话已经登录。"""
    def __init__(self, url: str):
        self.url = url

    def __str__(self):
        return f"StatusConflict: login page redirected to {self.url}"


class LoginFailed(NeustError):
    """fast_login 在登录没有成功时抛出此错误，outcome 为具体的登录结果。"""
    def __init__(self, outcome):
        self.outcome = outcome

    def __str__(self):
        return f"LoginFailed: {self.outcome}"


class ConfigError(NeustError):
    """配置文件中的值不合法"""
    def __init__(self, key: str, message: str):
        self.key = key
        self.message = message

    def __str__(self):
        return f"ConfigError: {self.key} {self.message}"
