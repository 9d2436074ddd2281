# 企业微信扫码登录。
# 流程：生成一个 uuid，让用户在企业微信中打开 auth_url 并确认；随后轮询确认接口，直到确认、过期或取消。
import enum
import math
import random
import time

from .constant import WECHAT_AUTH_URL, WECHAT_EXPIRED_MARKERS, WECHAT_CANCELLED_MARKERS
from .log import logger
from .status import UserStatus


class WechatStatus(enum.Enum):
    PENDING = 0
    CONFIRMED = 1
    EXPIRED = 2
    CANCELLED = 3


TERMINAL_STATUSES = (WechatStatus.CONFIRMED, WechatStatus.EXPIRED, WechatStatus.CANCELLED)


def generate_uuid() -> str:
    """按照登录页面前端的方式生成 uuid：以当前时间戳和随机数为种子的 36 位十六进制字符串"""
    d = float(int(round(time.time() * 1000)))
    chars = []
    for i in range(36):
        if i in (8, 13, 18, 23):
            chars.append("-")
        else:
            r = int(d + random.random() * 16) % 16
            d = math.floor(d / 16)
            chars.append("0123456789abcdef"[r])
    return "".join(chars)


class Wechat:
    """
    > wechat = Wechat()
    > print(wechat.auth_url)  # 把这个网址做成二维码，让用户用企业微信扫码确认
    > status = wechat.wait(session, interval=2, timeout=60)
    > if status == WechatStatus.CONFIRMED:
    >     ...  # session 中已经保存了登录凭证
    """

    def __init__(self, uuid: str = None):
        """
        :param uuid: 已有的 uuid。不传入时会生成一个新的。
        """
        self.uuid = uuid or generate_uuid()
        # 最近一次确认后得到的登录状态
        self.user_status: UserStatus = None

    @property
    def auth_url(self) -> str:
        """二维码的内容：用户需要在企业微信中打开的网址"""
        return f"{WECHAT_AUTH_URL}?uuid={self.uuid}"

    def verify_url(self, base_url: str) -> str:
        return f"{base_url}?random={random.random()}&uuid={self.uuid}"

    def poll(self, session, endpoint=None) -> WechatStatus:
        """
        查询一次扫码状态。确认后，登录凭证会被保存到 session 中。
        :param session: Session 对象
        :param endpoint: 登录入口，默认为 session 的直接入口
        :raise TransportError: 网络错误
        """
        endpoint = endpoint or session.endpoint
        response = session._get(self.verify_url(endpoint.wechat_verify_url), raise_for_status=True)
        body = response.text.strip()
        # 用户还没有扫码确认时，接口返回空内容
        if not body:
            return WechatStatus.PENDING

        lowered = body.lower()
        if any(marker in lowered for marker in WECHAT_EXPIRED_MARKERS):
            return WechatStatus.EXPIRED
        if any(marker in lowered for marker in WECHAT_CANCELLED_MARKERS):
            return WechatStatus.CANCELLED

        status = session.check_status(endpoint)
        if status.is_rejected:
            return WechatStatus.PENDING

        self.user_status = status
        if status.cookie:
            session.set_token(status.cookie, endpoint)
        return WechatStatus.CONFIRMED

    def wait(self, session, interval: float = 2, timeout: float = 60, endpoint=None) -> WechatStatus:
        """
        每隔 interval 秒查询一次，直到确认、过期或取消。超过 timeout 秒仍未确认时，视为二维码过期。
        """
        deadline = time.monotonic() + timeout
        while True:
            status = self.poll(session, endpoint)
            if status in TERMINAL_STATUSES:
                logger.info(f"扫码登录结束: {status.name}")
                return status
            if time.monotonic() + interval > deadline:
                logger.warning(f"扫码登录在 {timeout} 秒内没有确认")
                return WechatStatus.EXPIRED
            time.sleep(interval)

    def __repr__(self):
        return f"Wechat(uuid={self.uuid!r})"

    def __str__(self):
        return f"wechat#{self.uuid}"
