from sortex.models.upload import Upload
from sortex.models.user import User

__all__ = ["User", "Upload"]
