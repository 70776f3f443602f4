from sortex.schemas.bins import BinListResponse, BinRead
from sortex.schemas.dashboard import DashboardRead
from sortex.schemas.leaderboard import LeaderboardEntryRead, LeaderboardRead
from sortex.schemas.points import PointsTableRead
from sortex.schemas.upload import UploadCreateResponse, UploadListResponse, UploadRead, UploadSummary

__all__ = [
    "BinRead",
    "BinListResponse",
    "DashboardRead",
    "LeaderboardEntryRead",
    "LeaderboardRead",
    "PointsTableRead",
    "UploadCreateResponse",
    "UploadListResponse",
    "UploadRead",
    "UploadSummary",
]
