from typing import Any, Dict

import requests
import structlog

from org_registry.config import OidcConfig
from org_registry.services.exceptions import InternalError, TokenInvalidError

logger = structlog.get_logger(__name__)

# 이 서비스를 호출하려면 토큰이 갖고 있어야 하는 scope
ORG_REG_SERVICE_SCOPE = "org_reg"


class IdentityService:
    """IdP의 토큰 introspection 엔드포인트를 호출하여 bearer 토큰을 검증합니다."""

    def __init__(self, oidc_config: OidcConfig, session: requests.Session = None):
        """
        IdentityService를 초기화합니다.

        Args:
            oidc_config: introspect URL과 admin 자격증명을 담은 IdP 설정.
            session: HTTP 호출에 사용할 requests 세션. 없으면 새로 생성합니다.
        """
        self.config = oidc_config
        self.http = session or requests.Session()

    def verify(self, token: str) -> bool:
        """
        토큰이 활성 상태이고 서비스 scope를 갖고 있는지 검증합니다.

        Returns:
            검증에 성공하면 True.

        Raises:
            TokenInvalidError: 토큰이 비어있거나, 비활성 상태이거나, scope 검증에 실패했을 때.
            InternalError: introspect 호출 자체가 실패했을 때.
        """
        if not token:
            raise TokenInvalidError("Token is missing.")

        introspect_data = self._introspect(token)
        if not introspect_data.get("active"):
            logger.warning("token is not active")
            raise TokenInvalidError("Token is not active")

        scopes = str(introspect_data.get("scope", "")).split()
        if ORG_REG_SERVICE_SCOPE not in scopes:
            logger.warning("token scope validation failed")
            raise TokenInvalidError("Scope Validation failed")
        return True

    def _introspect(self, token: str) -> Dict[str, Any]:
        try:
            response = self.http.post(
                self.config.introspect_url,
                data={"token": token},
                auth=(self.config.admin.username, self.config.admin.password),
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error("introspect request call failed", error=str(e))
            raise InternalError("Introspect request call failed") from e

        if response.status_code != 200:
            logger.error("introspect validation failed", status=response.status_code)
            raise InternalError("Introspect validation failed")

        try:
            data = response.json()
        except ValueError as e:
            logger.error("response extraction failed with introspect call")
            raise InternalError("Response extraction failed with introspect call") from e
        if not isinstance(data, dict):
            raise InternalError("Response extraction failed with introspect call")
        return data
