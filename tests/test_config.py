# tests/test_config.py
import pytest

from org_registry.config import (
    AppConfig, ConfigError, OidcConfig, AdminCredentials, CONFIG_ENV_VAR, load_config, parse_config
)

VALID_OIDC = {
    "issuer": "https://idp.example.com",
    "client_id": "registry",
    "client_secret": "secret",
    "redirect_url": "https://registry.example.com/callback",
    "introspect_url": "https://idp.example.com/oauth2/introspect",
    "admin": {"username": "admin", "password": "admin-pass"},
}

def test_load_config_from_yaml(tmp_path):
    # === Arrange ===
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "server:\n"
        "  port: 9090\n"
        "db:\n"
        "  url: sqlite:///registry.db\n"
        "oidc:\n"
        "  issuer: https://idp.example.com\n"
        "  timeout_seconds: 2.5\n"
        "  admin:\n"
        "    username: admin\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  json: true\n",
        encoding="utf-8",
    )

    # === Act ===
    config = load_config(str(config_file))

    # === Assert ===
    assert config.server.port == 9090
    assert config.server.host == ""
    assert config.db.url == "sqlite:///registry.db"
    assert config.oidc.issuer == "https://idp.example.com"
    assert config.oidc.timeout_seconds == 2.5
    assert config.oidc.admin.username == "admin"
    assert config.oidc.admin.password == ""
    assert config.logging.level == "DEBUG"
    assert config.logging.json is True

def test_load_config_uses_env_var(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("server:\n  port: 7000\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

    assert load_config().server.port == 7000

def test_load_config_defaults_without_path(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

    config = load_config()

    assert config == AppConfig()
    assert config.server.port == 8081

def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yaml"))

def test_invalid_yaml_raises(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("server: [port: 1\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(config_file))

def test_section_must_be_mapping():
    with pytest.raises(ConfigError):
        parse_config({"server": ["not", "a", "mapping"]})

def test_unknown_keys_are_ignored():
    config = parse_config({"server": {"port": 1234, "workers": 4}, "extra": True})
    assert config.server.port == 1234

# ===================================================================
#  OIDC 설정 검증 테스트
# ===================================================================
class TestOidcConfigValidate:
    def test_complete_config_passes(self):
        parse_config({"oidc": VALID_OIDC}).oidc.validate()

    @pytest.mark.parametrize("missing_key, message", [
        ("issuer", "Identity provider not found in OIDC config"),
        ("client_id", "Client id not found in OIDC config"),
        ("client_secret", "Client Secret not found in OIDC config"),
        ("redirect_url", "Redirect Url not found in OIDC config"),
        ("introspect_url", "Introspect Url not found in OIDC config"),
    ])
    def test_missing_required_value(self, missing_key, message):
        raw = {k: v for k, v in VALID_OIDC.items() if k != missing_key}

        with pytest.raises(ConfigError, match=message):
            parse_config({"oidc": raw}).oidc.validate()

    def test_missing_admin_password(self):
        oidc = parse_config({"oidc": VALID_OIDC}).oidc
        oidc.admin = AdminCredentials(username="admin", password="")

        with pytest.raises(ConfigError, match="Admin password cannot be empty"):
            oidc.validate()

    def test_default_config_is_incomplete(self):
        with pytest.raises(ConfigError):
            OidcConfig().validate()
