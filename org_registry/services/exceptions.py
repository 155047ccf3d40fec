# org_registry/services/exceptions.py

class ServiceError(Exception):
    """서비스 계층에서 발생하는 모든 예외의 기반 클래스. code는 API 응답에 포함됩니다."""
    code = 0

# --- Validation Exceptions ---
class InvalidRequestError(ServiceError):
    """이메일 또는 조직 이름의 형식이 잘못되었을 때"""
    code = 1002

# --- Lookup Exceptions ---
class NotFoundError(ServiceError):
    """조건에 맞는 예약 또는 소유 관계를 찾을 수 없을 때"""
    code = 1003

# --- Reservation Exceptions ---
class DuplicateReservationError(ServiceError):
    """다른 소유자가 이미 해당 조직 이름을 예약했을 때"""
    code = 1012

# --- Auth Exceptions ---
class TokenInvalidError(ServiceError):
    """토큰이 없거나, 비활성 상태이거나, 서비스 scope를 갖지 않을 때"""
    code = 1004

# --- Internal Exceptions ---
class InternalError(ServiceError):
    """영속성 게이트웨이나 IdP 호출 중 예기치 못한 오류가 발생했을 때"""
    code = 2002
