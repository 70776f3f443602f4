from sortex.schemas.common import CamelModel
from sortex.schemas.upload import UploadSummary


class DashboardRead(CamelModel):
    points: int
    rank: int
    total_items: int
    recent_uploads: list[UploadSummary]
