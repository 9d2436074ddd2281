import re

from .cipher import WebVpnKeyMaterial, derive_key_material, getCiphertext, getPlaintext
from .error import InvalidUrlFormat, InvalidCiphertext

WEBVPN_HOST = "webvpn.neu.edu.cn"

# 主机部分到第一个 / ? # 为止，其后的内容（路径、查询参数、锚点）原样保留
_AUTHORITY_RE = re.compile(r"(?P<authority>[^/?#]*)(?P<rest>.*)", re.S)
# https://{网关}/{协议}[-{端口}]/{IV 的十六进制}{加密的主机名}{其余部分}
_PROXIED_RE = re.compile(
    r"^https?://[^/?#]+/(?P<scheme>[a-zA-Z][a-zA-Z0-9+.]*)(?:-(?P<port>\d+))?/"
    r"(?P<cipher>[0-9a-fA-F]+)(?P<rest>[/?#].*)?$",
    re.S
)


def _split_url(url: str):
    """把网址拆成协议、主机名、端口与其余部分"""
    lowered = url.lower()
    if lowered.startswith("https://"):
        scheme, remain = "https", url[len("https://"):]
    elif lowered.startswith("http://"):
        scheme, remain = "http", url[len("http://"):]
    elif url.startswith("//"):
        # 省略协议的网址按 http 处理，与浏览器在 http 页面中的行为一致
        scheme, remain = "http", url[len("//"):]
    else:
        raise InvalidUrlFormat(url, "只支持 http 与 https 的绝对网址")

    match = _AUTHORITY_RE.match(remain)
    authority, rest = match.group("authority"), match.group("rest")
    if "@" in authority:
        raise InvalidUrlFormat(url, "不支持包含用户信息的网址")

    if authority.startswith("[") and "]" in authority:
        # IPv6 地址连同方括号一起加密，与浏览器中 location.hostname 的值一致
        end = authority.index("]") + 1
        hostname, after = authority[:end], authority[end:]
        if hostname == "[]" or (after and not after.startswith(":")):
            raise InvalidUrlFormat(url, "主机名不合法")
        port = after[1:]
        if after and not port:
            raise InvalidUrlFormat(url, "端口号不合法")
    else:
        hostname, _, port = authority.partition(":")
        if ":" in authority and not port:
            raise InvalidUrlFormat(url, "端口号不合法")
        if not hostname or "[" in hostname or "]" in hostname:
            raise InvalidUrlFormat(url, "主机名不合法")
    if port and not port.isdigit():
        raise InvalidUrlFormat(url, "端口号不合法")

    return scheme, hostname, port, rest


def encode_url(url: str, key_material: WebVpnKeyMaterial = None, host: str = WEBVPN_HOST) -> str:
    """
    将常规的 url 加密为 webvpn 使用的 url。

    协议的判断规则：以 https:// 开头的为 https；以 http:// 或 // 开头的为 http；其他网址不支持。
    协议名不区分大小写，统一转为小写；// 开头的网址解密后会补上 http:。
    除此之外 decode_url(encode_url(url)) == url。IPv6 地址需要写在方括号中；端口号为空（如 http://host:/）的网址不支持。
    > encode_url("http://219.216.96.4/eams/homeExt.action")
    'https://webvpn.neu.edu.cn/http/77726476706e69737468656265737421a2a618d275613e1e275ec7f8/eams/homeExt.action'
    :param url: 需要通过 webvpn 访问的网址
    :param key_material: 密钥与 IV。默认使用网关的固定密钥。
    :param host: webvpn 网关的主机名
    :raise InvalidUrlFormat: 网址不是合法的绝对网址
    """
    if key_material is None:
        key_material = derive_key_material()

    scheme, hostname, port, rest = _split_url(url.strip())
    prefix = scheme + ("-" + port if port else "")
    return f"https://{host}/{prefix}/{key_material.iv_hex}{getCiphertext(hostname, key_material)}{rest}"


def decode_url(url: str, key_material: WebVpnKeyMaterial = None) -> str:
    """
    将 webvpn 使用的 url 解密为常规的 url。此函数是 encode_url 的逆操作。
    :param url: webvpn 格式的网址
    :param key_material: 密钥与 IV。必须与加密时使用的相同。
    :raise InvalidUrlFormat: 网址不是 webvpn 格式，或 IV 与密钥不匹配
    """
    if key_material is None:
        key_material = derive_key_material()

    match = _PROXIED_RE.match(url.strip())
    if match is None:
        raise InvalidUrlFormat(url, "不是 webvpn 格式的网址")

    key_cph = match.group("cipher").lower()
    iv_hex = key_material.iv_hex
    if not key_cph.startswith(iv_hex) or len(key_cph) == len(iv_hex):
        raise InvalidUrlFormat(url, "加密主机名前缀与 IV 不匹配")

    try:
        hostname = getPlaintext(key_cph[len(iv_hex):], key_material)
    except InvalidCiphertext as e:
        raise InvalidUrlFormat(url, e.reason) from e
    port = match.group("port")
    if port:
        hostname += ":" + port
    return match.group("scheme") + "://" + hostname + (match.group("rest") or "")
