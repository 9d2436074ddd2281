# 此软件包存放东北大学统一身份认证（tpass）登录相关的函数。
# 通过调用此包中的函数，可以利用 requests 实现统一身份认证登录的自动化
# 功能包含：用户名密码登录、登录凭证登录、企业微信扫码登录、WebVPN 登录与网址转换

from .config import Config
from .constant import *
from .endpoint import Endpoint, ENDPOINT_DIRECT, ENDPOINT_WEBVPN, make_webvpn_endpoint
from .error import NeustError, TransportError, MalformedPage, StatusConflict, LoginFailed, ConfigError
from .form import LoginForm, extract_login_form
from .log import logger, enable_file_log
from .login import Credential, CasLogin, fast_login
from .outcome import LoginOutcome, Success, InvalidCredentials, CaptchaRequired, AccountLocked, \
    UnexpectedResponse, classify_response
from .session import Session
from .status import UserStatus
from .util import get_session, find_cookie_value
from .wechat import Wechat, WechatStatus
