# 统一身份认证目前有两个访问入口：直接访问 pass.neu.edu.cn，或通过 webvpn 访问。
# 通过 webvpn 访问校内服务时，webvpn 本身相当于一个「虚拟用户」，它也需要登录统一身份认证，
# 因此需要先直接登录统一身份认证，再通过 webvpn 入口登录一次。
from dataclasses import dataclass
from typing import Tuple

from webvpn import WebVpnKeyMaterial, WEBVPN_HOST, encode_url
from .constant import CAS_LOGIN_URL, CAS_COOKIE_NAME, CAS_COOKIE_URL, WECHAT_VERIFY_URL, CAS_LANDING_URL, \
    WEBVPN_COOKIE_NAME


@dataclass(frozen=True)
class Endpoint:
    """一个统一身份认证的访问入口"""
    name: str
    # 登录页面地址，GET 获得登录表单，POST 提交登录信息
    login_url: str
    # 登录凭证 cookie 的名称与所在地址
    cookie_name: str
    cookie_url: str
    # 扫码登录的确认接口
    wechat_verify_url: str
    # 登录成功后重定向目标的前缀
    landing_prefixes: Tuple[str, ...]

    def is_landing(self, url: str) -> bool:
        return any(url.startswith(prefix) for prefix in self.landing_prefixes)


ENDPOINT_DIRECT = Endpoint(
    name="direct",
    login_url=CAS_LOGIN_URL,
    cookie_name=CAS_COOKIE_NAME,
    cookie_url=CAS_COOKIE_URL,
    wechat_verify_url=WECHAT_VERIFY_URL,
    landing_prefixes=(CAS_LANDING_URL,),
)


def make_webvpn_endpoint(key_material: WebVpnKeyMaterial = None, host: str = WEBVPN_HOST) -> Endpoint:
    """
    生成通过 webvpn 访问统一身份认证的入口。所有地址都是直接入口地址加密后的 webvpn 地址。
    :param key_material: webvpn 的密钥与 IV，默认使用网关的固定密钥
    :param host: webvpn 网关的主机名
    """
    return Endpoint(
        name="webvpn",
        login_url=encode_url(CAS_LOGIN_URL, key_material, host),
        cookie_name=WEBVPN_COOKIE_NAME,
        cookie_url=f"https://{host}/",
        wechat_verify_url=encode_url(WECHAT_VERIFY_URL, key_material, host),
        landing_prefixes=(encode_url(CAS_LANDING_URL, key_material, host),),
    )


ENDPOINT_WEBVPN = make_webvpn_endpoint()
