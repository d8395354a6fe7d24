"""Service factories wired to the request's database session."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from paharnama.database import get_db
from paharnama.services.auth_service import AuthService
from paharnama.services.mountain_service import MountainService
from paharnama.services.security_audit_service import RequestContext
from paharnama.services.user_service import UserService


def get_auth_service(request: Request, db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db, context=RequestContext.from_request(request))


def get_mountain_service(db: Session = Depends(get_db)) -> MountainService:
    return MountainService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)
