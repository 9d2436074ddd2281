# 从统一身份认证登录页面中提取登录表单的隐藏字段。
# 登录页面由固定模板生成，因此这里只用正则表达式匹配 <input> 标签，不解析整个 DOM。
import re
from typing import Dict, Optional

from .constant import REQUIRED_FORM_FIELDS, CAPTCHA_FIELD_NAMES
from .error import MalformedPage

_INPUT_RE = re.compile(r"<input\b(?P<attrs>[^>]*)>", re.I)
# 属性值可以用双引号、单引号包裹，也可以不加引号；等号两侧允许空白
_ATTR_RE = re.compile(
    r"""(?P<key>[^\s=/>"']+)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'>/]+))""",
    re.S
)
# tpass 的登录票据有时只出现在页面脚本中
_LT_RE = re.compile(r"LT-[0-9a-zA-Z-]+-tpass")


def parse_attributes(attrs: str) -> Dict[str, str]:
    """把 <input> 标签中的属性解析为字典，属性名统一为小写"""
    result = {}
    for match in _ATTR_RE.finditer(attrs):
        value = match.group("dq")
        if value is None:
            value = match.group("sq")
        if value is None:
            value = match.group("bare")
        result[match.group("key").lower()] = value
    return result


def iter_inputs(html: str):
    """依次返回页面中每个 <input> 标签的属性字典"""
    for match in _INPUT_RE.finditer(html):
        yield parse_attributes(match.group("attrs"))


class LoginForm:
    """
    一次登录页面请求中提取出的表单内容，只在一次登录尝试中使用。
    fields 保存页面中全部隐藏字段（字段名 -> 值），提交时会原样带回。
    """

    def __init__(self, fields: Dict[str, str], captcha_required: bool = False, lt: Optional[str] = None):
        self.fields = dict(fields)
        self.captcha_required = captcha_required
        # 空字符串的 lt 等同于没有 lt
        self.lt = lt or self.fields.get("lt") or None

    @property
    def execution(self) -> str:
        return self.fields["execution"]

    @property
    def event_id(self) -> str:
        return self.fields["_eventId"]

    def to_payload(self, credential) -> Dict[str, str]:
        """
        生成提交登录信息的表单。
        :param credential: 登录凭据，只读取其中的用户名与密码，不会修改它
        """
        payload = dict(self.fields)
        payload["username"] = credential.username
        payload["password"] = credential.password
        if self.lt:
            # tpass 页面的前端会把用户名、密码与登录票据拼接后放在 rsa 字段中提交
            payload["rsa"] = credential.username + credential.password + self.lt
            payload["ul"] = str(len(credential.username))
            payload["pl"] = str(len(credential.password))
            payload["lt"] = self.lt
        return payload

    def __repr__(self):
        return f"{self.__class__.__name__}(fields={sorted(self.fields)}, captcha_required={self.captcha_required})"


def extract_login_form(html: str, url: str = None) -> LoginForm:
    """
    从登录页面中提取登录表单
    :param html: 登录页面的 HTML
    :param url: 登录页面的地址，仅用于错误信息
    :raise MalformedPage: 页面中缺少 execution 或 _eventId 字段
    :return: 登录表单
    """
    fields = {}
    captcha_required = False
    for attrs in iter_inputs(html):
        name = attrs.get("name")
        if name in CAPTCHA_FIELD_NAMES or attrs.get("id") in CAPTCHA_FIELD_NAMES:
            captcha_required = True
        if name and attrs.get("type", "").lower() == "hidden":
            fields.setdefault(name, attrs.get("value", ""))

    for field in REQUIRED_FORM_FIELDS:
        if field not in fields:
            raise MalformedPage(url or "<unknown>", field)

    lt = fields.get("lt")
    if not lt:
        match = _LT_RE.search(html)
        lt = match.group(0) if match else None

    return LoginForm(fields, captcha_required, lt)
