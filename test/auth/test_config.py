import json
import logging
import os
import tempfile
import unittest

from auth import Config, ConfigError, Session, Credential, CaptchaRequired, ENDPOINT_WEBVPN, CAS_LOGIN_URL, logger
from webvpn import encode_url, derive_key_material
from fake_http import CAPTCHA_PAGE, fake_client, make_response


class TestConfig(unittest.TestCase):
    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.directory.name, "neust", "config.json")

    def tearDown(self):
        self.directory.cleanup()

    def test_default(self):
        config = Config().validate()
        self.assertEqual(config.timeout, 10.0)
        self.assertEqual(config.webvpn_host, "webvpn.neu.edu.cn")
        self.assertEqual(config.key_material().key, b"wrdvpnisthebest!")

    def test_load_missing_file(self):
        self.assertEqual(Config.load(self.path), Config())

    def test_save_load(self):
        config = Config(timeout=5, webvpn_host="webvpn.example.edu.cn", log_level="DEBUG")
        self.assertEqual(config.save(self.path), self.path)
        self.assertEqual(Config.load(self.path), config)

    def test_unknown_keys_ignored(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"timeout": 3, "theme": "dark"}, f)
        self.assertEqual(Config.load(self.path).timeout, 3)

    def test_invalid_values(self):
        for data in [{"timeout": 0}, {"timeout": True}, {"timeout": "10"}, {"fit_system_ua": "yes"},
                     {"webvpn_host": "webvpn.neu.edu.cn/"}, {"webvpn_key": "short"},
                     {"webvpn_iv": "wrdvpnisthebest!!"}, {"log_level": "VERBOSE"}]:
            with self.subTest(data=data):
                self.assertRaises(ConfigError, Config.from_dict, data)

    def test_invalid_file(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("[1, 2]")
        self.assertRaises(ConfigError, Config.load, self.path)
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        self.assertRaises(ConfigError, Config.load, self.path)

    def test_session_uses_config(self):
        config = Config(timeout=3, webvpn_host="webvpn.example.edu.cn")
        session = Session(client=fake_client(), config=config)
        self.assertTrue(session.webvpn_endpoint.login_url.startswith(
            "https://webvpn.example.edu.cn/https/77726476706e69737468656265737421"))
        self.assertEqual(session.webvpn_endpoint.cookie_url, "https://webvpn.example.edu.cn/")
        self.assertEqual(session.encode_webvpn_url("http://219.216.96.4/eams/"),
                         "https://webvpn.example.edu.cn/http/77726476706e69737468656265737421a2a618d275613e1e275ec7f8/eams/")


class TestSessionWebVPN(unittest.TestCase):
    def test_decode_token(self):
        session = Session(client=fake_client())
        self.assertEqual(session.decode_webvpn_token("c3c30cce776130012c5bdde196503674"), b"ST-20181234-neu!")

    def test_decode_url(self):
        session = Session(client=fake_client())
        url = "http://219.216.96.4/eams/homeExt.action"
        self.assertEqual(session.decode_webvpn_url(session.encode_webvpn_url(url)), url)

    def test_get_via_webvpn(self):
        session = Session(client=fake_client(get=[make_response("https://webvpn.neu.edu.cn/"),
                                                   make_response("https://webvpn.neu.edu.cn/")]))
        session.get_via_webvpn("http://219.216.96.4/eams/")
        proxied = "https://webvpn.neu.edu.cn/http/77726476706e69737468656265737421a2a618d275613e1e275ec7f8/eams/"
        self.assertEqual(session.client.get.call_args[0][0], proxied)
        self.assertEqual(session.client.get.call_args[1]["timeout"], 10.0)
        # 已经是 webvpn 地址时不再加密
        session.get_via_webvpn(proxied)
        self.assertEqual(session.client.get.call_args[0][0], proxied)

    def test_endpoint_follows_config(self):
        session = Session(client=fake_client())
        session.config.webvpn_key = "0123456789abcdef"
        session.config.webvpn_iv = "fedcba9876543210"
        login_url = encode_url(CAS_LOGIN_URL, derive_key_material("0123456789abcdef", "fedcba9876543210"))
        self.assertTrue(login_url.startswith("https://webvpn.neu.edu.cn/https/66656463626139383736353433323130"))
        self.assertEqual(session.webvpn_endpoint.login_url, login_url)
        self.assertEqual(session.webvpn_endpoint.login_url, session.encode_webvpn_url(CAS_LOGIN_URL))

        session.client.get.side_effect = [make_response(login_url, text=CAPTCHA_PAGE)]
        outcome = session.login_via_webvpn(Credential("20180000", "secret"))
        self.assertIsInstance(outcome, CaptchaRequired)
        self.assertEqual(session.client.get.call_args[0][0], login_url)

    def test_explicit_endpoint_kept(self):
        session = Session(client=fake_client(), webvpn_endpoint=ENDPOINT_WEBVPN)
        session.config.webvpn_key = "0123456789abcdef"
        self.assertIs(session.webvpn_endpoint, ENDPOINT_WEBVPN)


class TestLogLevel(unittest.TestCase):
    def setUp(self):
        self.level = logger.level

    def tearDown(self):
        logger.setLevel(self.level)

    def test_sessions_do_not_touch_logger(self):
        logger.setLevel(logging.WARNING)
        Session(client=fake_client(), config=Config(log_level="DEBUG"))
        Session(client=fake_client(), config=Config(log_level="ERROR"))
        self.assertEqual(logger.level, logging.WARNING)

    def test_apply_logging(self):
        Config(log_level="DEBUG").apply_logging()
        self.assertEqual(logger.level, logging.DEBUG)


if __name__ == '__main__':
    unittest.main()
