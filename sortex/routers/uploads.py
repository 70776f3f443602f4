from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from sortex.core.errors import LedgerWriteFailure, StorageFailure
from sortex.core.security import Identity
from sortex.db.session import get_db
from sortex.models.upload import Upload
from sortex.routers.deps import get_current_identity
from sortex.schemas.upload import UploadCreateResponse, UploadListResponse, UploadRead
from sortex.services import ledger
from sortex.services.ingestion import submit_upload
from sortex.services.storage import ObjectStore, get_object_store, read_upload_file

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("", response_model=UploadCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_upload(
    file: UploadFile | None = File(default=None),
    recycling_type: str | None = Form(default=None, alias="recyclingType"),
    idempotency_key: str | None = Header(default=None, max_length=128),
    db: Session = Depends(get_db),
    storage: ObjectStore = Depends(get_object_store),
    identity: Identity = Depends(get_current_identity),
) -> UploadCreateResponse:
    incoming = await read_upload_file(file)
    try:
        result = submit_upload(
            db,
            storage,
            identity,
            incoming,
            declared_category=recycling_type,
            submission_key=idempotency_key,
        )
    except (StorageFailure, LedgerWriteFailure) as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc

    return UploadCreateResponse(
        upload=UploadRead.model_validate(result.upload),
        points_earned=result.points_earned,
        new_points=result.new_points,
        duplicate=result.duplicate,
    )


@router.get("", response_model=UploadListResponse)
def list_uploads(db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)) -> UploadListResponse:
    uploads = ledger.list_uploads(db, identity.user_id)
    return UploadListResponse(
        uploads=[UploadRead.model_validate(row) for row in uploads],
        points=ledger.user_points(db, identity.user_id),
    )


@router.get("/{upload_id}", response_model=UploadRead)
def get_upload(
    upload_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> Upload:
    upload = db.scalar(select(Upload).where(Upload.id == upload_id, Upload.user_id == identity.user_id))
    if not upload:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="upload_not_found")
    return upload
