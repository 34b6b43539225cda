# backend/routes/auth.py
import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models import users as models
from schemas import user as schemas
from utils.audit import write_log
from utils.hashing import get_password_hash, verify_password, validate_password
from utils.mailer import mailer
from utils.tokenJWT import create_access_token, get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "Jika email terdaftar, link reset password telah dikirim ke email tersebut."
INVALID_RESET_LINK = "Link reset password tidak valid atau sudah kedaluwarsa"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _check_new_password(new_password: str, confirm_password: str) -> None:
    if new_password != confirm_password:
        raise HTTPException(status_code=400, detail="Konfirmasi password tidak cocok")
    error = validate_password(new_password)
    if error:
        raise HTTPException(status_code=400, detail=error)


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, db: Session = Depends(get_db), request: Request = None):
    normalized_email = payload.email.strip().lower()
    db_user = db.query(models.User).filter(func.lower(models.User.email) == normalized_email).first()

    # Validate credentials and log failure on error
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        if request:
            write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                      status="FAIL", ip=request.client.host, meta={"email": payload.email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Email atau password salah")

    access_token = create_access_token(data={"sub": db_user.email, "role": db_user.role})

    if request:
        write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
                  status="SUCCESS", ip=request.client.host, meta={"email": db_user.email})

    return {"access_token": access_token, "token_type": "bearer"}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: models.User = Depends(get_current_user)):
    return current_user


@router.post("/change-password", response_model=schemas.MessageResponse)
def change_password(
    payload: schemas.ChangePassword,
    request: Request,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    if not verify_password(payload.current_password, current_user.password_hash):
        write_log(db, user_id=current_user.id, action="CHANGE_PASSWORD", resource="auth",
                  status="FAIL", ip=request.client.host, meta={"reason": "wrong current password"})
        raise HTTPException(status_code=400, detail="Password saat ini salah")

    _check_new_password(payload.new_password, payload.confirm_password)

    current_user.password_hash = get_password_hash(payload.new_password)
    db.commit()
    write_log(db, user_id=current_user.id, action="CHANGE_PASSWORD", resource="auth",
              status="SUCCESS", ip=request.client.host)
    return {"message": "Password berhasil diubah"}


# Always answers with the same message so account existence is not revealed
@router.post("/forgot-password", response_model=schemas.MessageResponse)
def forgot_password(payload: schemas.ForgotPassword, request: Request, db: Session = Depends(get_db)):
    normalized_email = payload.email.strip().lower()
    user = db.query(models.User).filter(func.lower(models.User.email) == normalized_email).first()
    if not user:
        logger.info(f"Password reset requested for unknown email {normalized_email}")
        return {"message": FORGOT_PASSWORD_MESSAGE}

    token = secrets.token_urlsafe(32)
    db.add(models.PasswordResetToken(
        user_id=user.id,
        token_hash=_hash_token(token),
        expires_at=_utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
    ))
    db.commit()

    reset_link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"
    mailer.send_password_reset(user.email, user.full_name, reset_link)
    write_log(db, user_id=user.id, action="FORGOT_PASSWORD", resource="auth",
              status="SUCCESS", ip=request.client.host)
    return {"message": FORGOT_PASSWORD_MESSAGE}


@router.post("/reset-password", response_model=schemas.MessageResponse)
def reset_password(payload: schemas.ResetPassword, request: Request, db: Session = Depends(get_db)):
    record = (
        db.query(models.PasswordResetToken)
        .filter(models.PasswordResetToken.token_hash == _hash_token(payload.token))
        .first()
    )
    if not record or record.used_at is not None or record.expires_at < _utcnow():
        raise HTTPException(status_code=400, detail=INVALID_RESET_LINK)

    _check_new_password(payload.new_password, payload.confirm_password)

    record.user.password_hash = get_password_hash(payload.new_password)
    record.used_at = _utcnow()
    db.commit()
    write_log(db, user_id=record.user_id, action="RESET_PASSWORD", resource="auth",
              status="SUCCESS", ip=request.client.host)
    return {"message": "Password berhasil direset. Silakan login dengan password baru."}
