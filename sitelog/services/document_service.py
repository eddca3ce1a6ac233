import logging
from typing import Dict, Any, List, Optional

from sitelog.database import models
from sitelog.repositories.interfaces import IDocumentRepository
from sitelog.services.authorization import AuthContext, require_ownership
from sitelog.services.exceptions import NotFoundError
from sitelog.utils.serializers import iso, enum_value, user_summary
from sitelog.utils.validators import require_text, require_url, require_range

logger = logging.getLogger(__name__)


def _document_to_dict(document: models.ProjectDocument) -> Dict[str, Any]:
    return {
        "id": document.id,
        "project_id": document.project_id,
        "user_id": document.user_id,
        "uploader": user_summary(document.uploader),
        "file_name": document.file_name,
        "file_type": enum_value(document.file_type),
        "public_id": document.public_id,
        "url": document.url,
        "file_size": document.file_size,
        "mime_type": document.mime_type,
        "title": document.title,
        "description": document.description,
        "version": document.version,
        "created_at": iso(document.created_at),
    }


class DocumentService:
    """프로젝트 문서(설계도, 도면 등)의 메타데이터를 관리합니다. 업로드는 ARCHITECT만 가능합니다."""

    def __init__(self, document_repo: IDocumentRepository):
        self.document_repo = document_repo

    def _get_document(self, ctx: AuthContext, document_id: int) -> models.ProjectDocument:
        document = self.document_repo.find_in_project(document_id, ctx.project_id)
        if not document:
            raise NotFoundError("Document not found")
        return document

    def upload_document(self, ctx: AuthContext, file_name: str, file_type: str, public_id: str, url: str,
                        file_size: Optional[int] = None, mime_type: Optional[str] = None,
                        title: Optional[str] = None, description: Optional[str] = None,
                        version: Optional[str] = None) -> Dict[str, Any]:
        """
        외부 저장소에 업로드된 파일을 프로젝트 문서로 등록합니다.

        Raises:
            ValueError: file_type이 DESIGN, DRAWING, REFERENCE, SPECIFICATION, OTHER 중 하나가 아니거나
                        url이 올바른 http(s) 주소가 아닐 때.
        """
        require_text(file_name, "file_name")
        require_text(public_id, "public_id")
        require_url(url)
        if file_size is not None:
            require_range(file_size, "file_size", 0)

        document = self.document_repo.create(models.ProjectDocument(
            project_id=ctx.project_id,
            user_id=ctx.principal.id,
            file_name=file_name,
            file_type=models.DocumentType(file_type),
            public_id=public_id,
            url=url,
            file_size=file_size,
            mime_type=mime_type,
            title=title,
            description=description,
            version=version,
        ))
        logger.info("Document %s uploaded to project %s by %s.", document.id, ctx.project_id, ctx.principal.id)
        return _document_to_dict(document)

    def list_documents(self, ctx: AuthContext, file_type: Optional[str] = None) -> List[Dict[str, Any]]:
        doc_type = models.DocumentType(file_type) if file_type else None
        return [_document_to_dict(d) for d in self.document_repo.list_by_project(ctx.project_id, doc_type)]

    def get_document(self, ctx: AuthContext, document_id: int) -> Dict[str, Any]:
        return _document_to_dict(self._get_document(ctx, document_id))

    def update_document(self, ctx: AuthContext, document_id: int, title: Optional[str] = None,
                        description: Optional[str] = None, version: Optional[str] = None) -> Dict[str, Any]:
        document = self._get_document(ctx, document_id)
        require_ownership(document, ctx.principal)
        if title is not None:
            document.title = title
        if description is not None:
            document.description = description
        if version is not None:
            document.version = version
        self.document_repo.save(document)
        return _document_to_dict(document)

    def delete_document(self, ctx: AuthContext, document_id: int) -> bool:
        document = self._get_document(ctx, document_id)
        require_ownership(document, ctx.principal)
        return self.document_repo.delete(document)
