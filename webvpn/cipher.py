import binascii
from binascii import hexlify, unhexlify
from dataclasses import dataclass
from typing import Union

from Crypto.Cipher import AES

from .error import InvalidCiphertext, InvalidKeyMaterial

# 网关（wrdvpn）在前端 JS 中写死的密钥，密钥与 IV 相同。
# 如果学校更换了网关的密钥，只需要通过配置文件修改 webvpn_key 与 webvpn_iv 即可。
DEFAULT_KEY = "wrdvpnisthebest!"
DEFAULT_IV = "wrdvpnisthebest!"

# 网关使用 128 位的分段大小，与 pycryptodome 默认的 8 位不同，必须显式指定
SEGMENT_SIZE = 128


@dataclass(frozen=True)
class WebVpnKeyMaterial:
    key: bytes
    iv: bytes

    @property
    def iv_hex(self) -> str:
        """网关把 IV 的十六进制形式放在加密后的主机名前面"""
        return hexlify(self.iv).decode("utf-8")

    def __repr__(self):
        # 不在日志里输出密钥本身
        return f"{self.__class__.__name__}(iv={self.iv_hex})"


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def derive_key_material(key: Union[str, bytes] = DEFAULT_KEY,
                        iv: Union[str, bytes] = DEFAULT_IV) -> WebVpnKeyMaterial:
    """
    根据配置得到一次加密/解密使用的密钥与 IV。
    每次转换网址时都应重新调用此函数，而不是缓存结果，这样配置变化后可以立刻生效。
    :param key: 密钥，长度必须为 16、24 或 32 字节
    :param iv: 初始向量，长度必须为 16 字节
    :raise InvalidKeyMaterial: 长度不符合要求
    """
    key = _to_bytes(key)
    iv = _to_bytes(iv)
    if len(key) not in (16, 24, 32):
        raise InvalidKeyMaterial(f"密钥长度应为 16、24 或 32 字节，实际为 {len(key)} 字节")
    if len(iv) != AES.block_size:
        raise InvalidKeyMaterial(f"IV 长度应为 {AES.block_size} 字节，实际为 {len(iv)} 字节")
    return WebVpnKeyMaterial(key, iv)


def encrypt(plaintext: bytes, key_material: WebVpnKeyMaterial = None) -> bytes:
    """CFB 模式加密，不做填充，密文与明文等长"""
    if key_material is None:
        key_material = derive_key_material()
    cipher = AES.new(key_material.key, AES.MODE_CFB, key_material.iv, segment_size=SEGMENT_SIZE)
    return cipher.encrypt(plaintext)


def decrypt(ciphertext: bytes, key_material: WebVpnKeyMaterial = None) -> bytes:
    """CFB 模式解密，不做填充"""
    if key_material is None:
        key_material = derive_key_material()
    cipher = AES.new(key_material.key, AES.MODE_CFB, key_material.iv, segment_size=SEGMENT_SIZE)
    return cipher.decrypt(ciphertext)


def getCiphertext(plaintext: str, key_material: WebVpnKeyMaterial = None) -> str:
    """From plaintext hostname to ciphertext"""
    return hexlify(encrypt(plaintext.encode("utf-8"), key_material)).decode()


def getPlaintext(ciphertext: str, key_material: WebVpnKeyMaterial = None) -> str:
    """From ciphertext hostname to plaintext"""
    try:
        message = unhexlify(ciphertext.encode("utf-8"))
    except binascii.Error as e:
        raise InvalidCiphertext(f"无法解码十六进制字符串: {e}") from e
    try:
        return decrypt(message, key_material).decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidCiphertext("解密结果不是合法的 UTF-8 字符串，密钥可能不正确") from e


def decrypt_cookie_blob(ciphertext_hex: str, key_material: WebVpnKeyMaterial = None) -> bytes:
    """
    解密网关返回的十六进制密文（比如某个目标站点的路由 token）。
    此函数只负责解密，不对结果做任何解释，原样返回明文字节。
    :param ciphertext_hex: 十六进制编码的密文
    :param key_material: 密钥与 IV。默认使用网关的固定密钥。
    :raise InvalidCiphertext: 不是合法的十六进制字符串，或长度不是 16 字节的整数倍
    """
    try:
        message = unhexlify(ciphertext_hex.strip().encode("utf-8"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise InvalidCiphertext(f"无法解码十六进制字符串: {e}") from e

    if not message:
        raise InvalidCiphertext("密文为空")
    if len(message) % AES.block_size != 0:
        raise InvalidCiphertext(f"密文长度 {len(message)} 字节不是 {AES.block_size} 字节的整数倍")

    return decrypt(message, key_material)
