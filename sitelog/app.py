# sitelog/app.py
from wsgiref.simple_server import make_server
from urllib.parse import parse_qsl
import json
import logging
import re

# SQLAlchemy 및 의존성 임포트
from sitelog.config import settings
from sitelog.logging_config import configure_logging
from sitelog.database.database import SessionLocal
from sitelog.database.db_init import initialize_db
from sitelog.repositories.sqlalchemy import (
    SqlalchemyUserRepository, SqlalchemySessionRepository, SqlalchemyProjectRepository,
    SqlalchemyMembershipRepository, SqlalchemyReportRepository, SqlalchemyCommentRepository,
    SqlalchemyDocumentRepository, SqlalchemyEmergencyRepository, SqlalchemyLogisticRepository
)
from sitelog.services.identity_service import IdentityService
from sitelog.services.user_service import UserService
from sitelog.services.project_service import ProjectService
from sitelog.services.report_service import ReportService
from sitelog.services.comment_service import CommentService
from sitelog.services.document_service import DocumentService
from sitelog.services.emergency_service import EmergencyService
from sitelog.services.logistic_service import LogisticService
from sitelog.services.exceptions import *
from sitelog.api.procedures import build_procedures

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
## 요청 처리 유틸리티 함수
# --------------------------------------------------------------------------

def get_request_data(environ):
    try:
        content_length = int(environ.get("CONTENT_LENGTH") or 0)
        data = json.loads(environ["wsgi.input"].read(content_length)) if content_length > 0 else {}
    except (ValueError, json.JSONDecodeError):
        raise ValueError("Invalid or missing JSON body.")
    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object.")
    return data

def _coerce(value):
    return int(value) if isinstance(value, str) and value.isdigit() else value

def get_query_params(environ):
    return {key: _coerce(value) for key, value in parse_qsl(environ.get("QUERY_STRING", ""))}

def get_principal(environ):
    """X-Auth-Token 헤더로 호출자를 확인합니다. 토큰이 없거나 유효하지 않으면 None."""
    identity_service = environ['services']['identity']
    return identity_service.resolve_session(environ.get('HTTP_X_AUTH_TOKEN'))

KIND_STATUS = {
    ErrorKind.UNAUTHENTICATED: "401 Unauthorized",
    ErrorKind.BAD_REQUEST: "400 Bad Request",
    ErrorKind.NOT_FOUND: "404 Not Found",
}

def handle_exception(e):
    if isinstance(e, AuthorizationError):
        status = KIND_STATUS.get(e.kind, "403 Forbidden")
        return status, json.dumps({"error": e.message, "kind": e.kind.value})

    error_map = {
        AuthenticationError: "401 Unauthorized",
        ValueError: "400 Bad Request",
        DuplicateSlugError: "400 Bad Request",
        AlreadyMemberError: "400 Bad Request",
        RegistrationError: "400 Bad Request",
        InsufficientBalanceError: "400 Bad Request",
        TransactionAlreadyVerifiedError: "400 Bad Request",
    }
    status = error_map.get(type(e), "500 Internal Server Error")
    if status.startswith("500"):
        logger.exception("Unhandled error while processing request.")
        return status, json.dumps({"error": "Internal Server Error"})
    return status, json.dumps({"error": str(e)})

# --------------------------------------------------------------------------
## 라우팅 테이블
# --------------------------------------------------------------------------

P = r'^/v1/projects/(?P<project_id>[0-9]+)'

# (메서드, 경로 패턴, 작업 이름, 성공 시 상태)
# 경로의 이름 있는 그룹(project_id 등)은 요청 본문에 병합되어 작업의 입력이 됩니다.
ROUTES = [
    ('GET', r'^/v1/users$', 'user.list_all', '200 OK'),
    ('GET', r'^/v1/users/pending$', 'user.list_pending', '200 OK'),
    ('GET', r'^/v1/users/me$', 'user.get_current', '200 OK'),
    ('PATCH', r'^/v1/users/me$', 'user.update_profile', '200 OK'),
    ('POST', r'^/v1/users/(?P<user_id>[0-9]+)/approve$', 'user.approve', '200 OK'),
    ('POST', r'^/v1/users/(?P<user_id>[0-9]+)/deactivate$', 'user.deactivate', '200 OK'),
    ('PUT', r'^/v1/users/(?P<user_id>[0-9]+)/role$', 'user.update_role', '200 OK'),

    ('GET', r'^/v1/projects$', 'project.list', '200 OK'),
    ('POST', r'^/v1/projects$', 'project.create', '201 Created'),
    ('GET', P + r'$', 'project.get', '200 OK'),
    ('PATCH', P + r'$', 'project.update', '200 OK'),
    ('DELETE', P + r'$', 'project.delete', '204 No Content'),
    ('GET', P + r'/members$', 'project.list_members', '200 OK'),
    ('POST', P + r'/members$', 'project.add_member', '201 Created'),
    ('PUT', P + r'/members/(?P<member_id>[0-9]+)$', 'project.update_member_role', '200 OK'),
    ('DELETE', P + r'/members/(?P<member_id>[0-9]+)$', 'project.remove_member', '204 No Content'),

    ('GET', P + r'/reports$', 'report.list', '200 OK'),
    ('POST', P + r'/reports$', 'report.create', '201 Created'),
    ('GET', P + r'/reports/(?P<report_id>[0-9]+)$', 'report.get', '200 OK'),
    ('GET', P + r'/reports/by-slug/(?P<report_slug>[a-zA-Z0-9_-]+)$', 'report.get_by_slug', '200 OK'),
    ('PATCH', P + r'/reports/(?P<report_id>[0-9]+)$', 'report.update', '200 OK'),
    ('DELETE', P + r'/reports/(?P<report_id>[0-9]+)$', 'report.delete', '204 No Content'),
    ('POST', P + r'/reports/(?P<report_id>[0-9]+)/tasks$', 'report.add_task', '201 Created'),
    ('PATCH', P + r'/tasks/(?P<task_id>[0-9]+)$', 'report.update_task', '200 OK'),
    ('DELETE', P + r'/tasks/(?P<task_id>[0-9]+)$', 'report.delete_task', '204 No Content'),
    ('POST', P + r'/reports/(?P<report_id>[0-9]+)/media$', 'report.upload_media', '201 Created'),
    ('DELETE', P + r'/media/(?P<media_id>[0-9]+)$', 'report.delete_media', '204 No Content'),

    ('GET', P + r'/reports/(?P<report_id>[0-9]+)/comments$', 'comment.list', '200 OK'),
    ('POST', P + r'/reports/(?P<report_id>[0-9]+)/comments$', 'comment.create', '201 Created'),
    ('PATCH', P + r'/comments/(?P<comment_id>[0-9]+)$', 'comment.update', '200 OK'),
    ('DELETE', P + r'/comments/(?P<comment_id>[0-9]+)$', 'comment.delete', '204 No Content'),

    ('GET', P + r'/documents$', 'document.list', '200 OK'),
    ('POST', P + r'/documents$', 'document.upload', '201 Created'),
    ('GET', P + r'/documents/(?P<document_id>[0-9]+)$', 'document.get', '200 OK'),
    ('PATCH', P + r'/documents/(?P<document_id>[0-9]+)$', 'document.update', '200 OK'),
    ('DELETE', P + r'/documents/(?P<document_id>[0-9]+)$', 'document.delete', '204 No Content'),

    ('GET', P + r'/emergency-fund$', 'emergency.get_fund', '200 OK'),
    ('POST', P + r'/emergency-fund/deposits$', 'emergency.add_balance', '201 Created'),
    ('GET', P + r'/emergency-fund/transactions$', 'emergency.list_transactions', '200 OK'),
    ('POST', P + r'/emergency-fund/transactions$', 'emergency.request', '201 Created'),
    ('POST', P + r'/emergency-fund/transactions/(?P<transaction_id>[0-9]+)/verify$', 'emergency.verify', '200 OK'),

    ('GET', P + r'/logistic-items$', 'logistic.list_items', '200 OK'),
    ('POST', P + r'/logistic-items$', 'logistic.create_item', '201 Created'),
    ('GET', P + r'/logistic-items/summary$', 'logistic.stock_summary', '200 OK'),
    ('PATCH', P + r'/logistic-items/(?P<item_id>[0-9]+)$', 'logistic.update_item', '200 OK'),
    ('DELETE', P + r'/logistic-items/(?P<item_id>[0-9]+)$', 'logistic.delete_item', '204 No Content'),
    ('POST', P + r'/logistic-items/(?P<item_id>[0-9]+)/transactions$', 'logistic.record_transaction', '201 Created'),
    ('GET', P + r'/logistic-transactions$', 'logistic.list_transactions', '200 OK'),
]

# --------------------------------------------------------------------------
## WSGI 애플리케이션 (의존성 주입 및 라우팅)
# --------------------------------------------------------------------------

def application(environ, start_response):
    db_session = SessionLocal()
    try:
        # 1. 의존성 생성 (Repositories -> Services -> Procedures)
        user_repo = SqlalchemyUserRepository(db_session)
        session_repo = SqlalchemySessionRepository(db_session)
        project_repo = SqlalchemyProjectRepository(db_session)
        membership_repo = SqlalchemyMembershipRepository(db_session)
        report_repo = SqlalchemyReportRepository(db_session)

        services = {
            'identity': IdentityService(user_repo, session_repo),
            'user': UserService(user_repo),
            'project': ProjectService(project_repo, user_repo, membership_repo),
            'report': ReportService(report_repo),
            'comment': CommentService(SqlalchemyCommentRepository(db_session), report_repo),
            'document': DocumentService(SqlalchemyDocumentRepository(db_session)),
            'emergency': EmergencyService(SqlalchemyEmergencyRepository(db_session)),
            'logistic': LogisticService(SqlalchemyLogisticRepository(db_session)),
        }

        # 2. 생성된 서비스와 작업 레지스트리를 environ을 통해 핸들러에 전달
        environ['services'] = services
        environ['procedures'] = build_procedures(membership_repo, project_repo, services)

        # 3. 라우팅 및 핸들러 실행
        path = environ.get("PATH_INFO", "")
        method = environ.get("REQUEST_METHOD", "")

        auth_routes = [
            ('POST', r'^/v1/auth/register$', register_handler),
            ('POST', r'^/v1/auth/tokens$', auth_tokens_handler),
            ('DELETE', r'^/v1/auth/tokens$', logout_handler),
        ]

        status, response_body = '404 Not Found', json.dumps({'error': 'Not Found'})
        for route_method, pattern, route_handler in auth_routes:
            if method == route_method and re.match(pattern, path):
                status, response_body = route_handler(environ)
                break
        else:
            for route_method, pattern, procedure_name, success_status in ROUTES:
                if method == route_method and (match := re.match(pattern, path)):
                    status, response_body = procedure_handler(environ, procedure_name, match.groupdict(), success_status)
                    break

    except Exception as e:
        status, response_body = handle_exception(e)
    finally:
        db_session.close()

    start_response(status, [("Content-Type", "application/json")])
    return [response_body.encode("utf-8")]

# --------------------------------------------------------------------------
## 핸들러 함수
# --------------------------------------------------------------------------

def register_handler(environ):
    data = get_request_data(environ)
    user = environ['services']['identity'].register(data.get('name'), data.get('email'), data.get('password'))
    return '201 Created', json.dumps(user)

def auth_tokens_handler(environ):
    data = get_request_data(environ)
    token = environ['services']['identity'].authenticate(data.get('email'), data.get('password'))
    return '201 Created', json.dumps(token)

def logout_handler(environ):
    environ['services']['identity'].logout(environ.get('HTTP_X_AUTH_TOKEN'))
    return '204 No Content', ''

def procedure_handler(environ, procedure_name, path_params, success_status):
    """
    보호된 작업을 실행합니다.
    GET/DELETE는 쿼리 문자열을, 그 외 메서드는 JSON 본문을 입력으로 사용하며 경로 파라미터가 우선합니다.
    """
    if environ.get("REQUEST_METHOD") in ('GET', 'DELETE'):
        payload = get_query_params(environ)
    else:
        payload = get_request_data(environ)
    payload.update({key: _coerce(value) if key.endswith("_id") else value for key, value in path_params.items()})

    principal = get_principal(environ)
    result = environ['procedures'][procedure_name](principal, payload)
    if success_status.startswith('204'):
        return success_status, ''
    return success_status, json.dumps(result)

# --------------------------------------------------------------------------
## 서버 실행
# --------------------------------------------------------------------------

if __name__ == "__main__":
    configure_logging()
    initialize_db()
    try:
        with make_server(settings.host, settings.port, application) as httpd:
            logger.info("Serving SiteLog API on port %s...", settings.port)
            httpd.serve_forever()
    except Exception:
        logger.exception("Error starting server")
