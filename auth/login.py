import enum

from .endpoint import Endpoint
from .error import StatusConflict, LoginFailed
from .form import LoginForm, extract_login_form
from .log import logger
from .outcome import LoginOutcome, CaptchaRequired, classify_response


class Credential:
    """
    用户名与密码。登录过程只会读取它，不会修改它。
    为了避免密码出现在日志中，repr 和 str 都不会包含密码。
    """
    __slots__ = ("_username", "_password")

    def __init__(self, username: str, password: str):
        self._username = username
        self._password = password

    @property
    def username(self) -> str:
        return self._username

    @property
    def password(self) -> str:
        return self._password

    def __eq__(self, other):
        if not isinstance(other, Credential):
            return NotImplemented
        return self._username == other._username and self._password == other._password

    def __hash__(self):
        return hash((self._username, self._password))

    def __repr__(self):
        return f"Credential(username={self._username!r})"

    def __str__(self):
        return f"credential#{self._username}"


class CasLogin:
    """
    通过用户名与密码登录统一身份认证。一次登录的流程为：

    INIT --fetch_form--> FORM_FETCHED --submit--> SUBMITTED --> DONE

    1. fetch_form: GET 登录页面并提取表单。网络错误会以 TransportError 抛出，不会重试。
    2. submit: 如果页面要求验证码，直接返回 CaptchaRequired，不提交登录信息（提交也不会成功，还会消耗登录次数）；
       否则 POST 登录信息，且不跟随重定向，根据这一步的响应判断登录结果。

    表单中的 execution 只能使用一次，因此每个 CasLogin 对象只能登录一次。需要重试时，请创建新的对象重新登录。
    > login = CasLogin(session)
    > outcome = login.run(Credential("username", "password"))
    > if outcome.is_success:
    >     ...
    """
    class State(enum.Enum):
        INIT = 0
        FORM_FETCHED = 1
        SUBMITTED = 2
        DONE = 3

    def __init__(self, session, endpoint: Endpoint = None):
        """
        :param session: 已经创建的 Session 对象，登录得到的 cookie 会保存在其中
        :param endpoint: 登录入口。默认使用 session 的直接入口。
        """
        self.session = session
        self.endpoint = endpoint or session.endpoint
        self.state = self.State.INIT
        self.form: LoginForm = None
        # 提交登录信息的地址，即登录页面最终的地址
        self.post_url = None
        self.outcome: LoginOutcome = None

    def fetch_form(self) -> LoginForm:
        """
        请求登录页面并提取登录表单
        :raise TransportError: 网络错误或登录页面返回了错误状态码
        :raise StatusConflict: 登录页面重定向到了其他页面，说明已经登录
        :raise MalformedPage: 页面中缺少必需的字段
        """
        if self.state != self.State.INIT:
            raise RuntimeError("已经获取过登录表单。请重新创建 CasLogin 对象以再次登录。")

        logger.debug(f"请求登录页面 {self.endpoint.login_url}")
        response = self.session._get(self.endpoint.login_url, allow_redirects=True, raise_for_status=True)
        if not response.url.startswith(self.endpoint.login_url):
            raise StatusConflict(response.url)

        self.post_url = response.url
        self.form = extract_login_form(response.text, response.url)
        self.state = self.State.FORM_FETCHED
        return self.form

    def submit(self, credential) -> LoginOutcome:
        """
        提交登录信息并判断登录结果
        :param credential: 用户名与密码
        :return: 登录结果
        :raise TransportError: 网络错误
        """
        if self.state != self.State.FORM_FETCHED:
            raise RuntimeError("请先调用 fetch_form 获取登录表单，且每个 CasLogin 对象只能提交一次。")

        if self.form.captcha_required:
            self.state = self.State.DONE
            self.outcome = CaptchaRequired()
            logger.warning(f"{credential} 登录需要验证码，请在浏览器中完成一次登录后再试")
            return self.outcome

        self.state = self.State.SUBMITTED
        logger.debug(f"提交 {credential} 的登录信息到 {self.post_url}")
        response = self.session._post(self.post_url, data=self.form.to_payload(credential), allow_redirects=False)

        self.outcome = classify_response(response, self.endpoint)
        self.state = self.State.DONE
        if self.outcome.is_success:
            logger.info(f"{credential} 通过 {self.endpoint.name} 入口登录成功")
        else:
            logger.warning(f"{credential} 通过 {self.endpoint.name} 入口登录失败: {self.outcome}")
        return self.outcome

    def run(self, credential) -> LoginOutcome:
        """一站式完成获取表单与提交登录信息"""
        self.fetch_form()
        return self.submit(credential)


def fast_login(username: str, password: str, webvpn: bool = False, session=None):
    """
    快速登录。此函数仅仅是为了方便的封装，如果需要定制，请自行使用 Session 与 CasLogin 的接口。
    通过 webvpn 登录时，会先直接登录统一身份认证，再通过 webvpn 入口登录一次。

    :param username: 用户名
    :param password: 密码
    :param webvpn: 是否同时登录 webvpn
    :param session: 自定义的 Session 对象。默认创建一个新的 Session。
    :raise LoginFailed: 任何一次登录没有成功
    :return: 登录成功后的 Session 对象
    """
    # 在函数内导入，避免与 session 模块循环导入
    from .session import Session

    if session is None:
        session = Session()

    credential = Credential(username, password)
    outcome = session.login(credential)
    if not outcome.is_success:
        raise LoginFailed(outcome)

    if webvpn:
        outcome = session.login_via_webvpn(credential)
        if not outcome.is_success:
            raise LoginFailed(outcome)

    return session
