"""Document API resources (admin ingestion surface)."""

import base64
import binascii
import re
from urllib.parse import unquote_to_bytes
from uuid import UUID

import falcon.asgi

from kbsync.application.dto.document_dto import (
    DocumentOutput,
    FileStatus,
    UploadFile,
    UploadResult,
)
from kbsync.application.use_cases.document.delete_document import DeleteDocumentUseCase
from kbsync.application.use_cases.document.get_document import GetDocumentUseCase
from kbsync.application.use_cases.document.list_documents import ListDocumentsUseCase
from kbsync.application.use_cases.document.upload_documents import UploadDocumentsUseCase
from kbsync.domain.exceptions import NotFound, ValidationError

# RFC 5987: filename*=charset''percent-encoded (two single quotes)
_FILENAME_STAR_RFC5987 = re.compile(r"([\w-]+)''(.+)")
_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,;]+)*;base64,(?P<payload>.*)$", re.S)


def _decode_filename(raw: str | None) -> str:
    """Decode filename to UTF-8, fixing mojibake when UTF-8 bytes were read as Latin-1."""
    if not raw or not raw.strip():
        return ""
    raw = raw.strip()
    try:
        return raw.encode("latin-1").decode("utf-8")
    except UnicodeEncodeError:
        return raw
    except UnicodeDecodeError:
        return raw


def _parse_filename_star_from_header(raw_header_value: bytes) -> str | None:
    """Parse Content-Disposition raw value for filename*=charset''percent-encoded (RFC 5987)."""
    if not raw_header_value:
        return None
    decoded = raw_header_value.decode("utf-8", errors="replace")
    idx = decoded.find("filename*=")
    if idx == -1:
        return None
    match = _FILENAME_STAR_RFC5987.match(decoded[idx + len("filename*=") :].strip())
    if not match:
        return None
    charset, encoded = match.groups()
    try:
        return unquote_to_bytes(encoded.split(";")[0].strip()).decode(charset)
    except (ValueError, LookupError):
        return None


def _get_part_filename(part: object, fallback_index: int) -> str:
    """part.filename, else filename* from the raw header, else file_N."""
    raw = (getattr(part, "filename", None) or "").strip()
    if not raw:
        headers = getattr(part, "_headers", None)
        if isinstance(headers, dict):
            raw = (_parse_filename_star_from_header(headers.get(b"content-disposition", b"")) or "").strip()
    decoded = _decode_filename(raw) if raw else ""
    return decoded or f"file_{fallback_index}"


def _decode_data_uri(data_uri: str) -> tuple[bytes, str | None]:
    """Split 'data:<mime>;base64,<payload>' into bytes and MIME type."""
    match = _DATA_URI.match(data_uri or "")
    if not match:
        raise ValidationError("data_uri must look like 'data:<mimetype>;base64,<data>'")
    try:
        data = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 payload: {e}") from e
    return data, match.group("mime")


def _files_from_json(body: object) -> list[UploadFile]:
    if not isinstance(body, dict) or not isinstance(body.get("documents"), list):
        raise ValidationError("Body must be {'documents': [{'file_name', 'data_uri'}, ...]}")
    files: list[UploadFile] = []
    for index, item in enumerate(body["documents"], start=1):
        if not isinstance(item, dict):
            raise ValidationError("Each document must be an object")
        data, mime = _decode_data_uri(item.get("data_uri", ""))
        file_name = str(item.get("file_name") or "").strip() or f"file_{index}"
        files.append(UploadFile(data=data, file_name=file_name, content_type=mime))
    return files


def _upload_status(result: UploadResult) -> str:
    if result.aborted:
        return falcon.HTTP_403
    if result.success_count == 0:
        return falcon.HTTP_422
    if result.success_count < result.total:
        return falcon.HTTP_207
    return falcon.HTTP_201


def _file_status_to_dict(s: FileStatus) -> dict:
    return {
        "file_name": s.file_name,
        "status": s.status.value,
        "document_id": str(s.document_id) if s.document_id else None,
        "error": s.error,
    }


def _upload_result_to_dict(r: UploadResult) -> dict:
    return {
        "success": r.success,
        "success_count": r.success_count,
        "total": r.total,
        "aborted": r.aborted,
        "message": r.message,
        "files": [_file_status_to_dict(s) for s in r.files],
    }


def _document_to_dict(d: DocumentOutput) -> dict:
    return {
        "id": str(d.id),
        "file_name": d.file_name,
        "storage_path": d.storage_path,
        "uploaded_at": d.uploaded_at.isoformat(),
        "size_bytes": d.size_bytes,
        "content_type": d.content_type,
    }


class DocumentsResource:
    """GET /v1/documents - list catalog; POST /v1/documents - upload files."""

    def __init__(
        self,
        upload_documents: UploadDocumentsUseCase,
        list_documents: ListDocumentsUseCase,
    ) -> None:
        self._upload_documents = upload_documents
        self._list_documents = list_documents

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List documents, newest first."""
        documents = await self._list_documents.execute()
        resp.media = {"items": [_document_to_dict(d) for d in documents]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Upload documents. Multipart: one file per 'files' part. JSON: base64 data URIs."""
        content_type = req.content_type or ""
        try:
            if "multipart/form-data" in content_type:
                files = await self._read_multipart(req)
            else:
                files = _files_from_json(await req.get_media())
            if not files:
                raise ValidationError("At least one file required")
            result = await self._upload_documents.execute(files)
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        resp.media = _upload_result_to_dict(result)
        resp.status = _upload_status(result)

    async def _read_multipart(self, req: falcon.asgi.Request) -> list[UploadFile]:
        try:
            form = await req.get_media()
        except falcon.MediaMalformedError as e:
            raise ValidationError(f"Invalid multipart: {e}") from e
        files: list[UploadFile] = []
        file_index = 0
        async for part in form:
            if (part.name or "").strip() not in ("files", "files[]"):
                continue
            data = await part.stream.read()
            file_index += 1
            files.append(
                UploadFile(
                    data=bytes(data),
                    file_name=_get_part_filename(part, file_index),
                    content_type=part.content_type,
                )
            )
        return files


class DocumentResource:
    """GET/DELETE /v1/documents/{id}."""

    def __init__(
        self,
        get_document: GetDocumentUseCase,
        delete_document: DeleteDocumentUseCase,
    ) -> None:
        self._get_document = get_document
        self._delete_document = delete_document

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Get document by id."""
        doc_id = _parse_uuid(document_id, resp)
        if doc_id is None:
            return
        try:
            result = await self._get_document.execute(doc_id)
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not found"}
            return
        resp.media = _document_to_dict(result)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Delete document and rebuild the knowledge base."""
        doc_id = _parse_uuid(document_id, resp)
        if doc_id is None:
            return
        try:
            result = await self._delete_document.execute(doc_id)
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"success": False, "message": "Document not found."}
            return
        resp.media = {"success": result.success, "message": result.message}
        resp.status = falcon.HTTP_200 if result.success else falcon.HTTP_403


def _parse_uuid(value: str, resp: falcon.asgi.Response) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        resp.status = falcon.HTTP_400
        resp.media = {"error": "Invalid UUID"}
        return None
