# tests/test_app.py
import io
import json
import hashlib
import pytest
from datetime import datetime, timedelta
from unittest.mock import patch
from wsgiref.util import setup_testing_defaults
from sqlalchemy import create_engine, event, func
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sitelog import app as sitelog_app
from sitelog.database import models
from sitelog.database.database import Base, enable_sqlite_foreign_keys
from sitelog.services.exceptions import *

# ===================================================================
#  Fixture 설정
# ===================================================================

@pytest.fixture
def session_factory():
    """요청마다 새 세션을 열어도 같은 인메모리 DB를 보도록 StaticPool을 사용합니다."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with patch.object(sitelog_app, "SessionLocal", factory):
        yield factory
    engine.dispose()

@pytest.fixture
def tokens(session_factory):
    """ADMIN, CEO, 일반 사용자 계정과 로그인 세션을 만들고 토큰을 반환합니다."""
    db = session_factory()
    accounts = {
        "admin": models.GlobalRole.ADMIN,
        "ceo": models.GlobalRole.CEO,
        "mandor": models.GlobalRole.USER,
        "outsider": models.GlobalRole.USER,
    }
    result = {}
    for name, role in accounts.items():
        user = models.User(name=name, email=f"{name}@example.com",
                           password_hash=hashlib.sha256(b"secret").hexdigest(), role_global=role, is_active=True)
        db.add(user)
        db.flush()
        db.add(models.UserSession(token=f"token-{name}", user_id=user.id, expires_at=datetime.now() + timedelta(hours=1)))
        result[name] = f"token-{name}"
    db.commit()
    db.close()
    return result

def call(method, path, body=None, token=None, query=""):
    environ = {}
    setup_testing_defaults(environ)
    raw = json.dumps(body).encode("utf-8") if body is not None else b""
    environ.update({
        "REQUEST_METHOD": method,
        "PATH_INFO": path,
        "QUERY_STRING": query,
        "CONTENT_LENGTH": str(len(raw)),
        "wsgi.input": io.BytesIO(raw),
    })
    if token:
        environ["HTTP_X_AUTH_TOKEN"] = token

    captured = {}

    def start_response(status, headers):
        captured["status"] = status

    response = b"".join(sitelog_app.application(environ, start_response)).decode("utf-8")
    return captured["status"], (json.loads(response) if response else None)

def user_id_of(session_factory, name):
    db = session_factory()
    try:
        return db.query(models.User).filter(models.User.email == f"{name}@example.com").first().id
    finally:
        db.close()

# ===================================================================
#  오류 매핑 테스트
# ===================================================================
class TestHandleException:
    @pytest.mark.parametrize("error, status", [
        (UnauthenticatedError("Not authenticated"), "401 Unauthorized"),
        (BadRequestError("project_id is required in input"), "400 Bad Request"),
        (NotFoundError("Resource not found"), "404 Not Found"),
        (ReportNotFoundError("Report not found"), "404 Not Found"),
        (NotAMemberError("You are not a member of this project"), "403 Forbidden"),
        (CeoReadOnlyError("CEO has read-only access to project operations"), "403 Forbidden"),
        (NotOwnerError("You can only modify your own resources"), "403 Forbidden"),
    ])
    def test_authorization_errors_carry_kind(self, error, status):
        result_status, body = sitelog_app.handle_exception(error)

        assert result_status == status
        assert json.loads(body) == {"error": error.message, "kind": error.kind.value}

    @pytest.mark.parametrize("error, status", [
        (AuthenticationError("Invalid email or password."), "401 Unauthorized"),
        (DuplicateSlugError("exists"), "400 Bad Request"),
        (InsufficientBalanceError("Insufficient emergency fund balance"), "400 Bad Request"),
        (ValueError("bad"), "400 Bad Request"),
    ])
    def test_domain_errors(self, error, status):
        assert sitelog_app.handle_exception(error)[0] == status

    def test_programming_error_is_not_a_bad_request(self):
        """핸들러 내부의 TypeError는 클라이언트 오류가 아니라 서버 오류로 처리됩니다."""
        status, body = sitelog_app.handle_exception(TypeError("unsupported operand"))

        assert status == "500 Internal Server Error"
        assert "unsupported" not in body

    def test_unexpected_error_hides_details(self):
        status, body = sitelog_app.handle_exception(RuntimeError("connection string leaked"))

        assert status == "500 Internal Server Error"
        assert "leaked" not in body

# ===================================================================
#  HTTP 요청 흐름 테스트
# ===================================================================
class TestHttpFlow:
    def test_unknown_route(self, session_factory):
        status, body = call("GET", "/v1/nothing")

        assert status == "404 Not Found"

    def test_protected_route_without_token(self, session_factory):
        status, body = call("GET", "/v1/users/me")

        assert status == "401 Unauthorized"
        assert body["kind"] == "UNAUTHENTICATED"

    def test_register_then_pending_account_is_rejected(self, session_factory):
        """가입 직후의 계정은 로그인할 수 있지만 보호된 작업에서는 ACCOUNT_INACTIVE로 거부됩니다."""
        # === Arrange ===
        status, _ = call("POST", "/v1/auth/register", {"name": "Andi", "email": "andi@example.com", "password": "pw"})
        assert status == "201 Created"
        status, login = call("POST", "/v1/auth/tokens", {"email": "andi@example.com", "password": "pw"})
        assert status == "201 Created"

        # === Act ===
        status, body = call("GET", "/v1/users/me", token=login["token"])

        # === Assert ===
        assert status == "403 Forbidden"
        assert body["kind"] == "ACCOUNT_INACTIVE"

    def test_project_flow_with_roles(self, session_factory, tokens):
        # === Arrange: ADMIN이 프로젝트를 만들고 MANDOR를 멤버로 추가 ===
        status, project = call("POST", "/v1/projects", {"name": "Ruko", "slug": "ruko"}, token=tokens["admin"])
        assert status == "201 Created"
        base = f"/v1/projects/{project['id']}"
        status, _ = call("POST", f"{base}/members",
                         {"user_id": user_id_of(session_factory, "mandor"), "role": "MANDOR"}, token=tokens["admin"])
        assert status == "201 Created"

        # === Act & Assert ===
        # MANDOR는 보고서를 작성할 수 있음
        status, report = call("POST", f"{base}/reports", {"task_description": "Pengecoran"}, token=tokens["mandor"])
        assert status == "201 Created"

        # 멤버가 아닌 사용자는 조회할 수 없음
        status, body = call("GET", f"{base}/reports", token=tokens["outsider"])
        assert body["kind"] == "NOT_A_MEMBER"

        # CEO는 조회할 수 있지만 보고서를 수정할 수 없음
        status, page = call("GET", f"{base}/reports", token=tokens["ceo"], query="limit=10")
        assert status == "200 OK"
        assert [r["id"] for r in page["reports"]] == [report["id"]]
        status, body = call("PATCH", f"{base}/reports/{report['id']}", {"progress_percent": 90}, token=tokens["ceo"])
        assert body["kind"] == "CEO_READ_ONLY"

        # CEO는 댓글을 작성할 수 있음
        status, _ = call("POST", f"{base}/reports/{report['id']}/comments", {"content": "Lanjutkan"}, token=tokens["ceo"])
        assert status == "201 Created"

        # MANDOR는 자재 품목을 만들 수 없음 (FINANCE 전용)
        status, body = call("POST", f"{base}/logistic-items", {"name": "Semen", "unit": "Sak"}, token=tokens["mandor"])
        assert body["kind"] == "ROLE_NOT_PERMITTED"

        # CEO는 관리 쓰기 작업을 수행할 수 없음
        status, body = call("DELETE", base, token=tokens["ceo"])
        assert body["kind"] == "CEO_READ_ONLY"

        # ADMIN은 멤버가 아니어도 보고서를 삭제할 수 있음
        status, _ = call("DELETE", f"{base}/reports/{report['id']}", token=tokens["admin"])
        assert status == "204 No Content"

    def test_unexpected_field_is_bad_request(self, session_factory, tokens):
        status, body = call("PATCH", "/v1/users/me", {"role_global": "ADMIN"}, token=tokens["mandor"])

        assert status == "400 Bad Request"
        assert body["kind"] == "BAD_REQUEST"

    @pytest.mark.parametrize("path", ["/v1/auth/register", "/v1/auth/tokens"])
    def test_auth_with_missing_fields_is_bad_request(self, session_factory, path):
        status, body = call("POST", path, {"email": "andi@example.com"})

        assert status == "400 Bad Request"

    def test_auth_with_unknown_field_is_ignored(self, session_factory):
        status, _ = call("POST", "/v1/auth/register",
                         {"name": "Andi", "email": "andi@example.com", "password": "pw", "role_global": "ADMIN"})
        assert status == "201 Created"

        db = session_factory()
        try:
            user = db.query(models.User).filter(models.User.email == "andi@example.com").first()
            assert user.role_global == models.GlobalRole.NONE
        finally:
            db.close()

    def test_expired_session_is_kept_on_lookup(self, session_factory, tokens):
        """만료된 토큰으로 요청해도 401만 반환하고 세션 행은 변경하지 않습니다."""
        # === Arrange ===
        db = session_factory()
        session = db.query(models.UserSession).filter(models.UserSession.token == tokens["mandor"]).first()
        session.expires_at = datetime.now() - timedelta(minutes=1)
        db.commit()
        db.close()

        # === Act ===
        status, body = call("GET", "/v1/users/me", token=tokens["mandor"])

        # === Assert ===
        assert status == "401 Unauthorized"
        db = session_factory()
        try:
            assert db.query(models.UserSession).filter(models.UserSession.token == tokens["mandor"]).count() == 1
        finally:
            db.close()


class TestMissingProject:
    """멤버십 확인을 건너뛰는 ADMIN/CEO도 존재하지 않는 프로젝트에는 아무것도 쓸 수 없습니다."""

    @pytest.mark.parametrize("method, path, body", [
        ("POST", "/v1/projects/999/reports", {"task_description": "Pengecoran"}),
        ("POST", "/v1/projects/999/logistic-items", {"name": "Semen", "unit": "Sak"}),
        ("POST", "/v1/projects/999/emergency-fund/deposits", {"amount": 1000, "description": "Setoran awal"}),
        ("GET", "/v1/projects/999/emergency-fund", None),
    ])
    def test_admin_gets_not_found(self, session_factory, tokens, method, path, body):
        status, response = call(method, path, body, token=tokens["admin"])

        assert status == "404 Not Found"
        assert response["kind"] == "NOT_FOUND"

    def test_ceo_query_does_not_create_fund(self, session_factory, tokens):
        # === Act ===
        status, response = call("GET", "/v1/projects/999/emergency-fund", token=tokens["ceo"])

        # === Assert ===
        assert status == "404 Not Found"
        assert response["kind"] == "NOT_FOUND"
        db = session_factory()
        try:
            assert db.query(func.count(models.EmergencyFund.id)).scalar() == 0
            assert db.query(func.count(models.DailyReport.id)).scalar() == 0
        finally:
            db.close()
