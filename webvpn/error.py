class WebVPNError(ValueError):
    """WebVPN 网址转换或密文解密时，调用者传入了不符合要求的参数。"""


class InvalidUrlFormat(WebVPNError):
    """传入的网址不是合法的绝对网址，或不是 WebVPN 格式的网址。"""
    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason

    def __str__(self):
        if self.reason:
            return f"InvalidUrlFormat: {self.url} ({self.reason})"
        return f"InvalidUrlFormat: {self.url}"


class InvalidCiphertext(WebVPNError):
    """密文无法进行十六进制解码，或长度不是分组长度的整数倍。"""
    def __init__(self, reason: str):
        self.reason = reason

    def __str__(self):
        return f"InvalidCiphertext: {self.reason}"


class InvalidKeyMaterial(WebVPNError):
    """配置的密钥或 IV 长度不符合 AES 的要求。"""
    def __init__(self, reason: str):
        self.reason = reason

    def __str__(self):
        return f"InvalidKeyMaterial: {self.reason}"
