"""Account router - FastAPI endpoints for registration and the current account"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import Account, AuthIdentity, get_current_account, get_current_identity
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from .schemas import AccountResponse, RegisterRequest
from .service import AccountService, to_account_response

router = APIRouter(prefix="/accounts", tags=["Accounts"])

# 5 registrations per hour per client
register_rate_limit = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="register")


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


@router.post("/register", response_model=AccountResponse, status_code=201)
async def register(
    data: RegisterRequest,
    identity: AuthIdentity = Depends(get_current_identity),
    service: AccountService = Depends(get_account_service),
    _: None = Depends(register_rate_limit),
):
    """Create the profile row for the signed-in identity"""
    return service.register(identity, data)


@router.get("/me", response_model=AccountResponse)
async def get_me(account: Account = Depends(get_current_account)):
    return to_account_response(account)


__all__ = ["router"]
