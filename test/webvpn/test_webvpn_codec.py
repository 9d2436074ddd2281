import unittest

from webvpn import encode_url, decode_url, derive_key_material, InvalidUrlFormat, WebVPNError

# 网关上实际使用的网址
ENCODE_TABLE = [
    ("http://219.216.96.4/eams/homeExt.action",
     "https://webvpn.neu.edu.cn/http/77726476706e69737468656265737421a2a618d275613e1e275ec7f8/eams/homeExt.action"),
    ("http://219.216.96.4/eams/",
     "https://webvpn.neu.edu.cn/http/77726476706e69737468656265737421a2a618d275613e1e275ec7f8/eams/"),
    ("https://portal.neu.edu.cn/",
     "https://webvpn.neu.edu.cn/https/77726476706e69737468656265737421e0f85388263c265e7b1dc7a99c406d369a/"),
    ("//ipgw.neu.edu.cn",
     "https://webvpn.neu.edu.cn/http/77726476706e69737468656265737421f9e7468b693e6d45300d8db9d6562d"),
    ("http://210.30.200.128:8080/system/caslogin.jsp",
     "https://webvpn.neu.edu.cn/http-8080/77726476706e69737468656265737421a2a611d2746026022e58c7fdca0d/system/caslogin.jsp"),
    ("http://202.118.8.7:8991/F/29DK3KT4SV9VBRI548R8UD3MBIT991BXE4HLXENCFEGE54551T-22111?func=find-b-0",
     "https://webvpn.neu.edu.cn/http-8991/77726476706e69737468656265737421a2a713d27661301e2646de/F/29DK3KT4SV9VBRI548R8UD3MBIT991BXE4HLXENCFEGE54551T-22111?func=find-b-0"),
]


class TestWebVPNCodec(unittest.TestCase):
    def test_encode(self):
        for url, expected in ENCODE_TABLE:
            with self.subTest(url=url):
                self.assertEqual(encode_url(url), expected)

    def test_encode_other_gateway(self):
        """同一套网关在其他学校使用相同的密钥，只有主机名不同"""
        url = "https://kns.cnki.net/KCMS/detail/detail.aspx?dbcode=CJFQ&dbname=CJFD2007&filename=JEXK200702000"
        self.assertEqual(encode_url(url, host="webvpn.xjtu.edu.cn"),
                         "https://webvpn.xjtu.edu.cn/https/77726476706e69737468656265737421fbf952d2243e635930068cb8"
                         "/KCMS/detail/detail.aspx?dbcode=CJFQ&dbname=CJFD2007&filename=JEXK200702000")

    def test_decode(self):
        for url, proxied in ENCODE_TABLE:
            if url.startswith("//"):
                continue
            with self.subTest(url=url):
                self.assertEqual(decode_url(proxied), url)

    def test_decode_protocol_relative(self):
        self.assertEqual(decode_url(ENCODE_TABLE[3][1]), "http://ipgw.neu.edu.cn")

    def test_round_trip(self):
        urls = [
            "http://219.216.96.4/eams/homeExt.action",
            "https://pass.neu.edu.cn/tpass/login?service=https%3A%2F%2Fportal.neu.edu.cn%2Ftp_up%2F",
            "http://202.118.8.7:8991/F/?func=find-b-0#top",
            "https://portal.neu.edu.cn",
            "https://portal.neu.edu.cn?m=up",
            "http://a.b.c.neu.edu.cn:8443/路径/文件.html",
            "https://library.neu.edu.cn/login?returnUrl=http://219.216.96.4/eams/",
            "http://[2001:da8:9000::7]/eams/",
            "https://[::1]:8443/tpass/login",
        ]
        for url in urls:
            with self.subTest(url=url):
                self.assertEqual(decode_url(encode_url(url)), url)

    def test_scheme_case(self):
        url = "HTTPS://portal.neu.edu.cn/tp_up/"
        self.assertEqual(encode_url(url), encode_url("https://portal.neu.edu.cn/tp_up/"))
        self.assertEqual(decode_url(encode_url(url)), "https://portal.neu.edu.cn/tp_up/")

    def test_ipv6_port(self):
        proxied = encode_url("http://[::1]:8080/x")
        self.assertTrue(proxied.startswith("https://webvpn.neu.edu.cn/http-8080/77726476706e69737468656265737421"))

    def test_round_trip_custom_key(self):
        key_material = derive_key_material("0123456789abcdef", "fedcba9876543210")
        url = "https://pass.neu.edu.cn/tpass/login"
        encoded = encode_url(url, key_material)
        self.assertNotEqual(encoded, encode_url(url))
        self.assertEqual(decode_url(encoded, key_material), url)
        # 使用网关默认的 IV 解密时，前缀对不上
        self.assertRaises(InvalidUrlFormat, decode_url, encoded)

    def test_encode_invalid(self):
        for url in ["ftp://219.216.96.4/", "219.216.96.4/eams/", "http://", "http://:8080/",
                    "http://219.216.96.4:port/", "http://user@219.216.96.4/", "", "mailto:someone@neu.edu.cn",
                    "http://219.216.96.4:/eams/", "http://[]/", "http://[::1/", "http://[::1]x/", "http://[::1]:/"]:
            with self.subTest(url=url):
                self.assertRaises(InvalidUrlFormat, encode_url, url)

    def test_decode_invalid(self):
        for url in ["https://webvpn.neu.edu.cn/",
                    "https://webvpn.neu.edu.cn/eams/homeExt.action",
                    "https://webvpn.neu.edu.cn/http/00000000000000000000000000000000a2a618d275613e1e275ec7f8/",
                    "https://webvpn.neu.edu.cn/http/77726476706e69737468656265737421/eams/"]:
            with self.subTest(url=url):
                self.assertRaises(WebVPNError, decode_url, url)

    def test_decode_odd_length_cipher(self):
        url = "https://webvpn.neu.edu.cn/http/77726476706e69737468656265737421a2a/eams/"
        self.assertRaises(InvalidUrlFormat, decode_url, url)


if __name__ == '__main__':
    unittest.main()
