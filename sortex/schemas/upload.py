from datetime import datetime

from sortex.schemas.common import CamelModel


class UploadRead(CamelModel):
    id: str
    user_id: str
    file_name: str
    file_url: str
    file_type: str
    file_size: int
    recycling_type: str | None
    points_earned: int
    uploaded_at: datetime


class UploadSummary(CamelModel):
    id: str
    file_name: str
    uploaded_at: datetime
    points_earned: int
    recycling_type: str | None


class UploadCreateResponse(CamelModel):
    success: bool = True
    upload: UploadRead
    points_earned: int
    new_points: int
    duplicate: bool = False


class UploadListResponse(CamelModel):
    uploads: list[UploadRead]
    points: int
