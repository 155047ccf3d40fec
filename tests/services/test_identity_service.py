# tests/services/test_identity_service.py
import pytest
import requests
from unittest.mock import MagicMock

from org_registry.config import OidcConfig, AdminCredentials
from org_registry.services.identity_service import IdentityService
from org_registry.services.exceptions import TokenInvalidError, InternalError

# ===================================================================
#  Fixture 설정
# ===================================================================

@pytest.fixture
def oidc_config() -> OidcConfig:
    return OidcConfig(
        issuer="https://idp.test/oauth2/token",
        client_id="client",
        client_secret="secret",
        redirect_url="https://registry.test/callback",
        introspect_url="https://idp.test/oauth2/introspect",
        timeout_seconds=3,
        admin=AdminCredentials(username="admin", password="pw"),
    )

@pytest.fixture
def mock_http() -> MagicMock:
    """requests.Session에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=requests.Session)

@pytest.fixture
def identity_service(oidc_config, mock_http) -> IdentityService:
    return IdentityService(oidc_config, session=mock_http)

def introspect_response(status_code=200, payload=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = payload
    return response

# ===================================================================
#  토큰 검증(verify) 테스트
# ===================================================================
class TestVerify:
    def test_active_token_with_scope(self, identity_service, mock_http):
        """활성 상태이고 org_reg scope를 가진 토큰은 검증에 성공합니다."""
        # === Arrange ===
        mock_http.post.return_value = introspect_response(payload={"active": True, "scope": "openid org_reg"})

        # === Act ===
        result = identity_service.verify("token-123")

        # === Assert ===
        assert result is True
        # 검증: admin 자격증명으로 Basic 인증하고 form body로 토큰을 전달했는지 확인
        mock_http.post.assert_called_once_with(
            "https://idp.test/oauth2/introspect",
            data={"token": "token-123"},
            auth=("admin", "pw"),
            timeout=3,
        )

    def test_inactive_token(self, identity_service, mock_http):
        mock_http.post.return_value = introspect_response(payload={"active": False})
        with pytest.raises(TokenInvalidError, match="not active"):
            identity_service.verify("token-123")

    def test_token_without_service_scope(self, identity_service, mock_http):
        mock_http.post.return_value = introspect_response(payload={"active": True, "scope": "openid profile"})
        with pytest.raises(TokenInvalidError, match="Scope Validation failed"):
            identity_service.verify("token-123")

    def test_missing_token(self, identity_service, mock_http):
        with pytest.raises(TokenInvalidError):
            identity_service.verify("")
        mock_http.post.assert_not_called()

    def test_introspect_transport_failure(self, identity_service, mock_http):
        mock_http.post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(InternalError, match="Introspect request call failed"):
            identity_service.verify("token-123")

    def test_introspect_non_200(self, identity_service, mock_http):
        mock_http.post.return_value = introspect_response(status_code=401)
        with pytest.raises(InternalError, match="Introspect validation failed"):
            identity_service.verify("token-123")

    def test_introspect_invalid_json(self, identity_service, mock_http):
        response = introspect_response()
        response.json.side_effect = ValueError("no json")
        mock_http.post.return_value = response
        with pytest.raises(InternalError, match="Response extraction failed"):
            identity_service.verify("token-123")
