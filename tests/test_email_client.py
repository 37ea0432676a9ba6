import pytest

from nilhub.core import email_client
from nilhub.core.email_client import SmtpConfig, send_email

SMTP_VARS = (
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USERNAME",
    "SMTP_PASSWORD",
    "SMTP_FROM_EMAIL",
    "SMTP_FROM_NAME",
    "SMTP_USE_TLS",
    "SMTP_USE_SSL",
)


@pytest.fixture
def smtp_env(monkeypatch):
    for name in SMTP_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.sent = []
        FakeSMTP.instances.append(self)

    def starttls(self):
        self.started_tls = True

    def login(self, username, password):
        self.credentials = (username, password)

    def send_message(self, msg):
        self.sent.append(msg)

    def quit(self):
        pass


def test_config_defaults(smtp_env):
    smtp_env.setenv("SMTP_USERNAME", "bot@nilhub.xyz")
    config = SmtpConfig.from_env()
    assert config.port == 587
    assert config.from_email == "bot@nilhub.xyz"
    assert config.from_name == "NilHub"
    assert config.use_tls is True
    assert config.use_ssl is False
    assert not config.is_complete


def test_send_without_configuration_fails(smtp_env):
    with pytest.raises(RuntimeError):
        send_email("ana@example.com", "Hi", "Hello")


def test_send_over_starttls(smtp_env):
    smtp_env.setenv("SMTP_HOST", "smtp.test")
    smtp_env.setenv("SMTP_USERNAME", "bot@nilhub.xyz")
    smtp_env.setenv("SMTP_PASSWORD", "app-password")
    smtp_env.setattr(email_client.smtplib, "SMTP", FakeSMTP)
    FakeSMTP.instances.clear()

    send_email("ana@example.com", "Your code", "123456", "<b>123456</b>")

    server = FakeSMTP.instances[0]
    assert server.started_tls
    assert server.credentials == ("bot@nilhub.xyz", "app-password")
    msg = server.sent[0]
    assert msg["To"] == "ana@example.com"
    assert msg["From"] == "NilHub <bot@nilhub.xyz>"
    assert msg.is_multipart()
