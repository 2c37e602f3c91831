from app.model.base import BaseModel
from app.model.tenant import Tenant
from app.model.user import User
from app.model.user_tenant import UserTenant, UserRole
from app.model.unit import Unit
from app.model.folder import Folder
from app.model.document import Document
from app.model.invite import Invite, InviteStatus

__all__ = [
    "BaseModel",
    "Tenant",
    "User",
    "UserTenant",
    "UserRole",
    "Unit",
    "Folder",
    "Document",
    "Invite",
    "InviteStatus",
]
