from wsgiref.simple_server import make_server
from urllib.parse import parse_qs, unquote
import json
import re
import sys
import time
import uuid

import structlog

from org_registry.config import AppConfig, ConfigError, load_config
from org_registry.database.database import make_engine, make_session_factory
from org_registry.database.db_init import initialize_db
from org_registry.log import setup_logging, bind_request_context, clear_request_context
from org_registry.repositories.exceptions import PersistenceError
from org_registry.repositories.sqlalchemy import SqlalchemyOwnerRepository, SqlalchemyReservationRepository
from org_registry.services.identity_service import IdentityService
from org_registry.services.reservation_service import ReservationService
from org_registry.services.exceptions import *

logger = structlog.get_logger(__name__)

# --------------------------------------------------------------------------
## 요청 처리 유틸리티 함수
# --------------------------------------------------------------------------

def get_request_data(environ):
    # 본문은 한 번만 읽을 수 있으므로 파싱 결과를 environ에 보관합니다.
    if "org_registry.body" in environ:
        return environ["org_registry.body"]
    try:
        content_length = int(environ.get("CONTENT_LENGTH") or 0)
        data = json.loads(environ["wsgi.input"].read(content_length)) if content_length > 0 else {}
    except (ValueError, json.JSONDecodeError):
        raise InvalidRequestError("Invalid or missing JSON body.")
    if not isinstance(data, dict):
        raise InvalidRequestError("JSON body must be an object.")
    environ["org_registry.body"] = data
    return data

def get_query_param(environ, name):
    values = parse_qs(environ.get("QUERY_STRING", "")).get(name)
    return values[0] if values else None

def authorize(environ):
    auth_header = environ.get('HTTP_AUTHORIZATION', '')
    if not auth_header:
        raise TokenInvalidError("Authorization header is not provided in the request")
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        raise TokenInvalidError("Authorization header format must be Bearer {token}")
    environ['identity'].verify(parts[1])

def handle_exception(e):
    error_map = {
        InvalidRequestError: "400 Bad Request",
        TokenInvalidError: "401 Unauthorized",
        NotFoundError: "404 Not Found",
        DuplicateReservationError: "409 Conflict",
        InternalError: "500 Internal Server Error",
    }
    if isinstance(e, ServiceError):
        status, code = error_map.get(type(e), "500 Internal Server Error"), e.code
    elif isinstance(e, PersistenceError):
        logger.error("persistence failure", error=str(e))
        status, code = "500 Internal Server Error", InternalError.code
    else:
        logger.exception("unhandled error")
        status, code = "500 Internal Server Error", InternalError.code
    return status, json.dumps({"code": code, "error": str(e)})

# --------------------------------------------------------------------------
## WSGI 애플리케이션 (의존성 주입 및 라우팅)
# --------------------------------------------------------------------------

def resolve_route(method, path):
    routes = [
        ('POST', r'^/org-reservations/?$', add_reservation_handler),
        ('GET', r'^/org-reservations/?$', check_reservation_handler),
        ('GET', r'^/owners/([^/]+)/org-mappings/?$', list_own_reservations_handler),
        ('GET', r'^/owners/([^/]+)/org-mappings/([^/]+)$', get_own_reservation_handler),
        ('PUT', r'^/owners/([^/]+)/org-mappings/?$', update_mapping_handler),
        ('DELETE', r'^/owners/([^/]+)/org-mappings/?$', delete_own_reservation_handler),
        ('PUT', r'^/owners/([^/]+)/?$', update_owner_handler),
    ]
    for route_method, pattern, route_handler in routes:
        if method == route_method and (match := re.match(pattern, path)):
            return route_handler, [unquote(arg) for arg in match.groups()]
    return None, []

def create_app(config: AppConfig, session_factory, identity_service):
    """
    WSGI 애플리케이션을 생성합니다.

    Args:
        config: 애플리케이션 설정.
        session_factory: 요청마다 새 DB 세션을 만들어주는 호출 가능 객체.
        identity_service: bearer 토큰을 검증하는 객체 (verify(token) 메서드 필요).
    """
    def application(environ, start_response):
        start = time.monotonic()
        request_id = environ.get('HTTP_X_REQUEST_ID') or str(uuid.uuid4())
        path = environ.get("PATH_INFO", "")
        method = environ.get("REQUEST_METHOD", "")
        bind_request_context(request_id=request_id, method=method, path=path)

        db_session = session_factory()
        try:
            # 1. 의존성 생성 (Repositories -> Services)
            owner_repo = SqlalchemyOwnerRepository(db_session)
            reservation_repo = SqlalchemyReservationRepository(db_session)
            reservation_service = ReservationService(owner_repo, reservation_repo)

            # 2. 생성된 서비스 객체들을 environ을 통해 핸들러에 전달
            environ['services'] = {'reservation': reservation_service}
            environ['identity'] = identity_service

            # 3. 라우팅 및 핸들러 실행
            handler, path_args = resolve_route(method, path)
            if handler:
                authorize(environ)
                if config.logging.dump_request_body and method in ('POST', 'PUT', 'DELETE'):
                    logger.debug("request body", body=get_request_data(environ))
                status, response_body = handler(environ, *path_args)
            else:
                status, response_body = '404 Not Found', json.dumps({'error': 'Not Found'})

        except Exception as e:
            status, response_body = handle_exception(e)
        finally:
            db_session.close()

        logger.info(
            "request handled",
            status=int(status.split()[0]),
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        clear_request_context()
        start_response(status, [("Content-Type", "application/json"), ("X-Request-Id", request_id)])
        return [response_body.encode("utf-8")]

    return application

# --------------------------------------------------------------------------
## 핸들러 함수
# --------------------------------------------------------------------------

def add_reservation_handler(environ, *args):
    data = get_request_data(environ)
    mapping = environ['services']['reservation'].create_or_extend_reservation(
        data.get('orgName'), data.get('ownerEmail'), data.get('cloudService')
    )
    return '200 OK', json.dumps(mapping.to_dict())

def check_reservation_handler(environ, *args):
    name = get_query_param(environ, 'name')
    if not name:
        raise InvalidRequestError("Missing query parameter: name")
    result = environ['services']['reservation'].search_reservation_by_name(name)
    return '200 OK', json.dumps(result)

def list_own_reservations_handler(environ, owner_email):
    names = environ['services']['reservation'].list_reservations_of_owner(owner_email)
    return '200 OK', json.dumps(names)

def get_own_reservation_handler(environ, owner_email, org_name):
    mapping = environ['services']['reservation'].lookup_own_reservation(org_name, owner_email)
    if not mapping:
        raise NotFoundError(f"{org_name} is not found in the registry with your ownership")
    return '200 OK', json.dumps(mapping.to_dict())

def update_mapping_handler(environ, owner_email):
    data = get_request_data(environ)
    mapping = environ['services']['reservation'].transfer_ownership(
        data.get('orgName'), owner_email, data.get('newEmail')
    )
    return '200 OK', json.dumps(mapping.to_dict())

def delete_own_reservation_handler(environ, owner_email):
    data = get_request_data(environ)
    environ['services']['reservation'].retract_cloud_flag(
        data.get('orgName'), owner_email, data.get('cloudService')
    )
    return '200 OK', ''

def update_owner_handler(environ, owner_email):
    data = get_request_data(environ)
    owner = environ['services']['reservation'].update_owner_email(owner_email, data.get('newEmail'))
    return '200 OK', json.dumps(owner.to_dict())

# --------------------------------------------------------------------------
## 서버 실행
# --------------------------------------------------------------------------

def main(config_path=None):
    try:
        config = load_config(config_path)
        config.oidc.validate()
    except ConfigError as e:
        print(f"Cannot load configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level, config.logging.json)
    engine = make_engine(config.db)
    initialize_db(engine)
    application = create_app(config, make_session_factory(engine), IdentityService(config.oidc))

    try:
        with make_server(config.server.host, config.server.port, application) as httpd:
            logger.info("serving org name registry", port=config.server.port)
            httpd.serve_forever()
    except OSError as e:
        logger.error("error starting server", error=str(e))
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else None))
