# 东北大学统一身份认证（tpass）与 WebVPN 相关的地址与常量
# 这些值来自页面本身，学校更换页面模板后可能需要同步修改

# 统一身份认证登录地址
CAS_LOGIN_URL = "https://pass.neu.edu.cn/tpass/login"
# 统一身份认证的登录凭证 cookie 名称及其所在的地址
CAS_COOKIE_NAME = "CASTGC"
CAS_COOKIE_URL = "https://pass.neu.edu.cn/tpass/"
# 企业微信扫码登录相关地址
WECHAT_AUTH_URL = "https://pass.neu.edu.cn/tpass/qyQrLogin"
WECHAT_VERIFY_URL = "https://pass.neu.edu.cn/tpass/checkQRCodeScan"
# 不带 service 参数登录成功后，tpass 会重定向到信息门户
CAS_LANDING_URL = "https://portal.neu.edu.cn/tp_up/"

# webvpn 登录凭证 cookie 名称
WEBVPN_COOKIE_NAME = "wengine_vpn_ticketwebvpn_neu_edu_cn"

# 登录页面中必须存在的隐藏字段
REQUIRED_FORM_FIELDS = ("execution", "_eventId")
# 出现这些输入框时，说明当前需要输入验证码
CAPTCHA_FIELD_NAMES = ("captcha", "captchaResponse", "authcode")

# 登录请求返回页面中的错误提示。按照「账号锁定」优先于「密码错误」的顺序判断
ACCOUNT_LOCKED_MARKERS = ("账号已被锁定", "账户已被锁定", "账号已锁定", "账号被冻结")
INVALID_CREDENTIALS_MARKERS = ("用户名或密码错误", "用户名密码错误", "密码错误")
# UnexpectedResponse 中保留的响应正文长度
RESPONSE_EXCERPT_LENGTH = 500

# 登录状态检查页面的标题
TITLE_REJECTED = "智慧东大--统一身份认证"
TITLE_NEED_RESET = "智慧东大"
TITLE_BANNED = "系统提示"

# 扫码确认接口返回这些内容时，说明二维码已经失效或被取消
WECHAT_EXPIRED_MARKERS = ("expired", "过期", "失效")
WECHAT_CANCELLED_MARKERS = ("cancel", "取消")
