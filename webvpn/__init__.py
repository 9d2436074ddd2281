# 此软件包实现东北大学 WebVPN 网关的网址转换。
# WebVPN 把目标站点的主机名用 AES-CFB 加密后放在路径中，通过网关访问加密后的网址即可访问校内站点。
# 功能包含：普通网址与 WebVPN 网址互转、解密网关返回的十六进制密文

from .cipher import WebVpnKeyMaterial, derive_key_material, decrypt_cookie_blob, getCiphertext, getPlaintext, \
    DEFAULT_KEY, DEFAULT_IV
from .codec import encode_url, decode_url, WEBVPN_HOST
from .error import WebVPNError, InvalidUrlFormat, InvalidCiphertext, InvalidKeyMaterial
