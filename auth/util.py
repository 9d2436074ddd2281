import platform
from typing import Optional

import requests
from fake_useragent import UserAgent
from requests.cookies import get_cookie_header

# 内部使用的对象，只获取桌面浏览器类型的 ua
_ua = UserAgent(platforms=['desktop'])


def get_session(fit_system=False) -> requests.Session:
    """
    获得一个修改了 UA 的 requests.Session 对象

    使用 requests 自带的 UA 发起请求可能导致连接拒绝、连接中断或 HTTP 502。
    :param fit_system: 是否根据当前操作系统生成一个该系统上浏览器的 UA。如果是，只会生成当前操作系统上浏览器的 UA；如果否，则会从所有桌面浏览器中随机选择一个。
    这样做的好处是可以让同一设备上生成的 UA 较为固定
    :return: requests.Session
    """
    session = requests.Session()
    if fit_system:
        ua_data = generate_user_agent()
    else:
        ua_data = _ua.random
    session.headers.update({"User-Agent": ua_data})
    return session


def generate_user_agent() -> str:
    """
    根据当前的操作系统，随机生成一个该系统上浏览器的 UA
    """
    os_name = platform.system()
    if not os_name:
        return _ua.random
    elif os_name == 'Darwin':
        os_name = "Mac OS X"

    return UserAgent(os=[os_name], browsers=['Chrome', 'Firefox', 'Edge']).random


def find_cookie_value(raw: str, name: str) -> Optional[str]:
    """
    从 Cookie 请求头的内容中找到某个 cookie 的值
    :param raw: 形如 "a=1; b=2" 的字符串
    :param name: cookie 名称
    :return: cookie 的值。没有这个 cookie 时返回 None
    """
    for item in raw.split(";"):
        key, sep, value = item.strip().partition("=")
        if sep and key == name:
            return value
    return None


def cookie_for_url(jar, url: str, name: str) -> Optional[str]:
    """
    获得访问 url 时浏览器会携带的某个 cookie 的值。
    和直接按名称读取 cookie 不同，此函数会按照域名与路径规则筛选，与实际发送请求时的行为一致。
    """
    request = requests.Request("GET", url).prepare()
    raw = get_cookie_header(jar, request)
    if not raw:
        return None
    return find_cookie_value(raw, name)
