"""Rutas de autenticación: perfil (/me), registro, login y logout locales."""
from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_identity
from app.api.schemas.auth import LoginLocalPayload, RegisterPayload
from app.api.schemas.note import MessageOut
from app.api.schemas.user import UserOut, UserProfileUpdate
from app.core.config import settings
from app.services import auth_service, user_service
from app.services.identity_service import ResolvedIdentity

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me", response_model=UserOut, summary="Perfil del usuario actual")
def me(identity: ResolvedIdentity = Depends(get_identity)) -> UserOut:
    return UserOut.from_doc(user_service.get_profile(identity))


@router.put("/me", response_model=UserOut, summary="Actualizar perfil")
def update_me(payload: UserProfileUpdate, identity: ResolvedIdentity = Depends(get_identity)) -> UserOut:
    return UserOut.from_doc(user_service.update_profile(identity, name=payload.name))


@router.post(
    "/register",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar usuario local",
)
def register(payload: RegisterPayload) -> UserOut:
    u = auth_service.register_local(email=payload.email, password=payload.password, name=payload.name)
    return UserOut.from_doc(u)


@router.post(
    "/login",
    response_model=UserOut,
    summary="Login local",
    description="Valida email/password y deja el JWT de sesión en una cookie httpOnly.",
)
def login(payload: LoginLocalPayload, response: Response) -> UserOut:
    u, token = auth_service.login_local(email=payload.email, password=payload.password)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expire_days * 24 * 3600,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return UserOut.from_doc(u)


@router.post("/logout", response_model=MessageOut, summary="Logout local")
def logout(response: Response) -> MessageOut:
    response.delete_cookie(settings.session_cookie_name)
    return MessageOut(message="Logged out successfully")
