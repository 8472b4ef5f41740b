from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gymdesk.auth.deps import get_current_user, require_roles
from gymdesk.auth.security import create_access_token, verify_password
from gymdesk.core.db import get_db
from gymdesk.models.role import ADMIN_ROLE
from gymdesk.models.user import User
from gymdesk.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserOut, WhoAmIResponse
from gymdesk.services.store import GymStore
from gymdesk.services.user_accounts import create_user, now_utc

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    store = GymStore(db)
    user = store.find_user_by_email(payload.email, payload.tenant_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    with store.transaction():
        user.last_login_at = now_utc()
    token = create_access_token(subject=user.id, tenant_id=user.tenant_id, roles=user.role_names)
    return TokenResponse(access_token=token)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN_ROLE)),
) -> UserOut:
    try:
        user = create_user(
            GymStore(db),
            tenant_id=current_user.tenant_id,
            full_name=payload.full_name,
            email=payload.email,
            phone=payload.phone,
            password=payload.password,
            roles=payload.roles,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return UserOut.model_validate(user)


@router.get("/whoami", response_model=WhoAmIResponse)
def whoami(current_user: User = Depends(get_current_user)) -> WhoAmIResponse:
    return WhoAmIResponse(
        id=current_user.id,
        tenant_id=current_user.tenant_id,
        user=current_user.email,
        full_name=current_user.full_name,
        roles=current_user.role_names,
    )
