# 一次登录尝试的结果。登录结果是正常的返回值，而不是异常：
# 验证码、密码错误等都是预期之内、需要交给调用者（或用户）处理的情况。
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

from .constant import ACCOUNT_LOCKED_MARKERS, INVALID_CREDENTIALS_MARKERS, RESPONSE_EXCERPT_LENGTH


class LoginOutcome:
    """所有登录结果的基类。每次登录尝试恰好产生一个结果，结果创建后不可修改。"""
    name = "unknown"

    @property
    def is_success(self) -> bool:
        return isinstance(self, Success)

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Success(LoginOutcome):
    """登录成功，会话的 cookie 中已经包含有效的登录凭证"""
    name = "success"


@dataclass(frozen=True)
class InvalidCredentials(LoginOutcome):
    name = "invalid credentials"


@dataclass(frozen=True)
class CaptchaRequired(LoginOutcome):
    """登录页面要求输入验证码。此库不处理验证码，需要用户在浏览器中完成一次登录。"""
    name = "captcha required"


@dataclass(frozen=True)
class AccountLocked(LoginOutcome):
    name = "account locked"


@dataclass(frozen=True)
class UnexpectedResponse(LoginOutcome):
    """无法识别的响应。保留状态码、重定向地址与部分正文，方便排查页面模板的变化。"""
    status_code: int
    location: Optional[str] = None
    excerpt: str = ""
    name = "unexpected response"

    def __str__(self):
        return f"{self.name} (HTTP {self.status_code}, location={self.location}): {self.excerpt[:100]}"


def redirect_target(response) -> Optional[str]:
    """获得重定向响应的绝对目标地址。不是重定向时返回 None"""
    if not response.is_redirect:
        return None
    return urljoin(response.url or "", response.headers["Location"])


def classify_response(response, endpoint) -> LoginOutcome:
    """
    根据提交登录信息后（不跟随重定向）的响应判断登录结果。
    服务器不会返回结构化的数据，只能按照下面的顺序依次匹配，第一个匹配的结果即为最终结果：
    1. 重定向到登录成功后的页面：成功
    2. 正文中包含账号锁定的提示：账号锁定
    3. 正文中包含用户名或密码错误的提示：凭据错误
    4. 其他情况：无法识别的响应
    :param response: 登录请求的响应
    :param endpoint: 本次登录使用的入口
    """
    location = redirect_target(response)
    if location is not None and endpoint.is_landing(location):
        return Success()

    body = response.text or ""
    if any(marker in body for marker in ACCOUNT_LOCKED_MARKERS):
        return AccountLocked()
    if any(marker in body for marker in INVALID_CREDENTIALS_MARKERS):
        return InvalidCredentials()

    return UnexpectedResponse(response.status_code, location, body[:RESPONSE_EXCERPT_LENGTH])
