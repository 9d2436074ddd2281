import enum
import re
from typing import Optional

from lxml import html as lxml_html
from lxml.etree import ParserError

from .constant import TITLE_REJECTED, TITLE_NEED_RESET, TITLE_BANNED

_USERNAME_RE = re.compile(r'var id_number = "(.+?)"')


class UserStatus:
    """
    访问登录页面时，当前会话的登录状态。
    ACTIVE: 已登录，包含用户名与登录凭证 cookie
    NEED_RESET: 已登录，但需要修改密码
    BANNED: 账号被禁用
    REJECTED: 未登录
    """
    class State(enum.Enum):
        ACTIVE = 0
        NEED_RESET = 1
        BANNED = 2
        REJECTED = 3

    ACTIVE = State.ACTIVE
    NEED_RESET = State.NEED_RESET
    BANNED = State.BANNED
    REJECTED = State.REJECTED

    def __init__(self, state: State, cookie: Optional[str] = None, username: Optional[str] = None):
        self.state = state
        self.cookie = cookie
        self.username = username

    @property
    def is_active(self) -> bool:
        return self.state == self.ACTIVE

    @property
    def is_rejected(self) -> bool:
        return self.state == self.REJECTED

    def __eq__(self, other):
        if not isinstance(other, UserStatus):
            return NotImplemented
        return (self.state, self.cookie, self.username) == (other.state, other.cookie, other.username)

    def __repr__(self):
        # cookie 就是登录凭证，不能出现在日志中
        return f"{self.__class__.__name__}(state={self.state.name}, username={self.username})"

    def __str__(self):
        if self.state == self.ACTIVE:
            return f"active#{self.username}"
        return self.state.name.lower().replace("_", " ")

    @classmethod
    def from_response_html(cls, html: str, cookie: Optional[str] = None) -> "UserStatus":
        """
        根据登录页面的标题判断登录状态。
        :param html: 访问登录页面（跟随重定向）后得到的 HTML
        :param cookie: 当前会话中的登录凭证 cookie
        """
        title = extract_title(html)
        cookie = cookie or ""
        if title == TITLE_REJECTED:
            return cls(cls.REJECTED)
        elif title == TITLE_NEED_RESET:
            return cls(cls.NEED_RESET, cookie)
        elif title == TITLE_BANNED:
            return cls(cls.BANNED, cookie)

        match = _USERNAME_RE.search(html)
        return cls(cls.ACTIVE, cookie, match.group(1) if match else "")


def extract_title(html: str) -> Optional[str]:
    """提取页面的 <title>，没有标题时返回 None"""
    if not html or not html.strip():
        return None
    try:
        tree = lxml_html.fromstring(html)
    except (ParserError, ValueError):
        return None
    if tree.tag == "title":
        title = tree.text
    else:
        title = tree.findtext(".//title")
    return title.strip() if title else None
