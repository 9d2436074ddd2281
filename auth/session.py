from typing import Optional
from urllib.parse import urlsplit

import requests

from webvpn import encode_url, decode_url, decrypt_cookie_blob, WebVpnKeyMaterial
from .config import Config
from .endpoint import Endpoint, ENDPOINT_DIRECT, make_webvpn_endpoint
from .error import TransportError
from .log import logger
from .login import CasLogin, Credential
from .outcome import LoginOutcome
from .status import UserStatus
from .util import get_session, cookie_for_url


class Session:
    """
    一个登录会话，包含一个 requests.Session（即一个 cookie 存储）和统一身份认证的两个入口。
    所有操作都通过显式传入（或调用）的 Session 对象完成，不存在全局共享的状态，因此不同的 Session 可以在不同线程中同时登录。
    同一个 Session 中的请求是依次发出的：后一个请求总是依赖前一个请求得到的 cookie。

    > session = Session()
    > outcome = session.login(Credential("username", "password"))
    > if outcome.is_success and session.login_via_webvpn(credential).is_success:
    >     response = session.get_via_webvpn("http://219.216.96.4/eams/homeExt.action")
    """

    def __init__(self, client: requests.Session = None, config: Config = None,
                 endpoint: Endpoint = None, webvpn_endpoint: Endpoint = None):
        """
        :param client: 自定义的 requests.Session 对象。默认利用 get_session 函数生成一个修改了 UA 的空 Session。
        :param config: 配置。默认使用默认配置。日志级别是整个进程共享的，需要时请自行调用 config.apply_logging()。
        :param endpoint: 直接访问统一身份认证的入口
        :param webvpn_endpoint: 通过 webvpn 访问统一身份认证的入口。不传入时，每次使用都根据当前配置中的 webvpn 主机名与密钥重新生成。
        """
        if config is None:
            config = Config()
        else:
            config.validate()
        self.config = config

        if client is None:
            client = get_session(config.fit_system_ua)
        self.client = client

        self.endpoint = endpoint or ENDPOINT_DIRECT
        self._webvpn_endpoint = webvpn_endpoint

    @property
    def webvpn_endpoint(self) -> Endpoint:
        """通过 webvpn 访问的入口。入口中的地址都是加密后的地址，因此不做缓存，修改配置中的密钥后立刻生效"""
        if self._webvpn_endpoint is not None:
            return self._webvpn_endpoint
        return make_webvpn_endpoint(self.key_material(), self.config.webvpn_host)

    @property
    def cookies(self):
        return self.client.cookies

    # 登录

    def login(self, credential: Credential, endpoint: Endpoint = None) -> LoginOutcome:
        """
        使用用户名与密码登录统一身份认证。
        :param credential: 用户名与密码
        :param endpoint: 登录入口，默认为直接入口
        :return: 登录结果。验证码、密码错误等情况通过返回值表示，而不是异常。
        :raise TransportError: 网络错误
        :raise MalformedPage: 登录页面模板发生了变化
        :raise StatusConflict: 当前会话已经登录
        """
        return CasLogin(self, endpoint or self.endpoint).run(credential)

    def login_via_webvpn(self, credential: Credential) -> LoginOutcome:
        """
        通过 webvpn 入口登录统一身份认证。调用前需要先通过 login 直接登录一次。
        """
        return self.login(credential, self.webvpn_endpoint)

    def login_with_token(self, token: str, endpoint: Endpoint = None) -> UserStatus:
        """
        使用已有的登录凭证（比如之前登录保存下来的 CASTGC cookie）登录
        :param token: 登录凭证 cookie 的值
        :param endpoint: 登录入口，默认为直接入口
        :return: 设置凭证后的登录状态
        """
        endpoint = endpoint or self.endpoint
        self.set_token(token, endpoint)
        return self.check_status(endpoint)

    def check_status(self, endpoint: Endpoint = None) -> UserStatus:
        """
        访问登录页面，检查当前会话在某个入口下的登录状态
        :raise TransportError: 网络错误
        """
        endpoint = endpoint or self.endpoint
        response = self._get(endpoint.login_url, allow_redirects=True, raise_for_status=True)
        status = UserStatus.from_response_html(response.text, self.get_token(endpoint))
        logger.debug(f"{endpoint.name} 入口的登录状态: {status}")
        return status

    def get_token(self, endpoint: Endpoint = None) -> Optional[str]:
        """获得会话中某个入口的登录凭证 cookie，不存在时返回 None"""
        endpoint = endpoint or self.endpoint
        return cookie_for_url(self.client.cookies, endpoint.cookie_url, endpoint.cookie_name)

    def set_token(self, token: str, endpoint: Endpoint = None):
        """把登录凭证 cookie 保存到会话中"""
        endpoint = endpoint or self.endpoint
        parts = urlsplit(endpoint.cookie_url)
        self.client.cookies.set(endpoint.cookie_name, token, domain=parts.hostname, path=parts.path or "/")

    # webvpn

    def key_material(self) -> WebVpnKeyMaterial:
        """根据当前配置重新生成 webvpn 的密钥与 IV，不做缓存"""
        return self.config.key_material()

    def encode_webvpn_url(self, url: str) -> str:
        """将常规的 url 加密为 webvpn 使用的 url"""
        return encode_url(url, self.key_material(), self.config.webvpn_host)

    def decode_webvpn_url(self, url: str) -> str:
        """将 webvpn 使用的 url 解密为常规的 url"""
        return decode_url(url, self.key_material())

    def decode_webvpn_token(self, ciphertext_hex: str) -> bytes:
        """解密 webvpn 网关返回的十六进制密文，原样返回明文"""
        return decrypt_cookie_blob(ciphertext_hex, self.key_material())

    def get_via_webvpn(self, url: str, **kwargs) -> requests.Response:
        """
        通过 webvpn 访问网址。如果网址已经是 webvpn 网址，则不会再次加密。
        :raise TransportError: 网络错误
        """
        return self._get(self._to_webvpn(url), **kwargs)

    def post_via_webvpn(self, url: str, **kwargs) -> requests.Response:
        return self._post(self._to_webvpn(url), **kwargs)

    def _to_webvpn(self, url: str) -> str:
        if url.startswith(f"https://{self.config.webvpn_host}/"):
            return url
        return self.encode_webvpn_url(url)

    # 网络请求

    def _get(self, url, raise_for_status=False, **kwargs) -> requests.Response:
        """
        封装 client.get 方法，统一设置超时，并把 requests 的异常转换为 TransportError
        :param raise_for_status: 是否把非 2xx 的状态码也视为 TransportError
        """
        return self._send(self.client.get, url, raise_for_status, **kwargs)

    def _post(self, url, raise_for_status=False, **kwargs) -> requests.Response:
        """封装 client.post 方法，行为同 _get"""
        return self._send(self.client.post, url, raise_for_status, **kwargs)

    def _send(self, method, url, raise_for_status, **kwargs):
        kwargs.setdefault("timeout", self.config.timeout)
        try:
            response = method(url, **kwargs)
            if raise_for_status:
                response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"请求 {url} 失败: {e}")
            raise TransportError(url, str(e)) from e
        return response
