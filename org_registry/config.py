import os
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# 설정 파일 경로를 지정하는 환경 변수
CONFIG_ENV_VAR = "ORG_REGISTRY_CONFIG"


class ConfigError(Exception):
    """설정 파일을 읽을 수 없거나 필수 값이 비어있을 때"""
    pass


@dataclass
class ServerConfig:
    host: str = ""
    port: int = 8081


@dataclass
class DBConfig:
    url: str = "sqlite:///org_registry.db"
    echo: bool = False


@dataclass
class AdminCredentials:
    username: str = ""
    password: str = ""


@dataclass
class OidcConfig:
    """
    토큰 검증(introspection)에 사용할 IdP 설정입니다.
    introspect 호출 시 admin 계정으로 Basic 인증을 수행합니다.
    """
    issuer: str = ""
    client_id: str = ""
    client_secret: str = ""
    redirect_url: str = ""
    token_url: str = ""
    authorization_url: str = ""
    introspect_url: str = ""
    timeout_seconds: float = 5.0
    admin: AdminCredentials = field(default_factory=AdminCredentials)

    def validate(self):
        """
        필수 설정 값이 모두 채워져 있는지 검사합니다.

        Raises:
            ConfigError: 첫 번째로 발견된 누락 항목을 메시지에 담아 발생합니다.
        """
        required = [
            (self.issuer, "Identity provider not found in OIDC config"),
            (self.client_id, "Client id not found in OIDC config"),
            (self.client_secret, "Client Secret not found in OIDC config"),
            (self.redirect_url, "Redirect Url not found in OIDC config"),
            (self.introspect_url, "Introspect Url not found in OIDC config"),
            (self.admin.username, "Admin username cannot be empty"),
            (self.admin.password, "Admin password cannot be empty"),
        ]
        for value, message in required:
            if not value:
                raise ConfigError(message)


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json: bool = False
    dump_request_body: bool = False


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    db: DBConfig = field(default_factory=DBConfig)
    oidc: OidcConfig = field(default_factory=OidcConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _build(cls, raw: Optional[Dict[str, Any]]):
    # 알 수 없는 키는 무시하고, 중첩된 dataclass는 재귀적으로 생성합니다.
    if not raw:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"Section for '{cls.__name__}' must be a mapping.")
    kwargs = {}
    for f in fields(cls):
        if f.name not in raw:
            continue
        value = raw[f.name]
        default = f.default_factory() if callable(f.default_factory) else None
        if default is not None and is_dataclass(default):
            value = _build(type(default), value)
        kwargs[f.name] = value
    return cls(**kwargs)


def parse_config(raw: Optional[Dict[str, Any]]) -> AppConfig:
    """YAML에서 읽은 딕셔너리를 AppConfig로 변환합니다."""
    return _build(AppConfig, raw)


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    YAML 설정 파일을 읽어 AppConfig를 생성합니다.

    Args:
        path: 설정 파일 경로. 없으면 ORG_REGISTRY_CONFIG 환경 변수를 사용하고,
            그것도 없으면 기본값으로 구성된 설정을 반환합니다.

    Raises:
        ConfigError: 파일을 찾을 수 없거나 YAML 형식이 잘못되었을 때.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return AppConfig()

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Cannot read config file: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file '{config_path}': {e}")

    return parse_config(raw)
