from sortex.schemas.common import CamelModel


class LeaderboardEntryRead(CamelModel):
    id: str
    name: str | None
    points: int
    rank: int
    position: int
    recycled: int
    is_current_user: bool


class LeaderboardRead(CamelModel):
    leaderboard: list[LeaderboardEntryRead]
