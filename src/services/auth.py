"""Authentication service for JWT and password handling."""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.user import User
from src.services.oauth import ExternalIdentity

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def _encode_token(user_id: str, secret: str, expiration_minutes: int) -> str:
    now = datetime.now(UTC)
    to_encode = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=expiration_minutes),
    }
    return jwt.encode(to_encode, secret, algorithm=settings.jwt_algorithm)


def _decode_token(token: str, secret: str) -> dict | None:
    try:
        return jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def create_access_token(user_id: str) -> tuple[str, int]:
    """Create a JWT access token.

    Returns the token and its lifetime in seconds.
    """
    token = _encode_token(user_id, settings.jwt_secret, settings.access_token_expiration_minutes)
    return token, settings.access_token_expiration_minutes * 60


def create_refresh_token(user_id: str) -> str:
    """Create a JWT refresh token signed with the refresh secret."""
    return _encode_token(
        user_id, settings.jwt_refresh_secret, settings.refresh_token_expiration_minutes
    )


def decode_access_token(token: str) -> dict | None:
    """Decode and validate an access token. Expired tokens decode to None."""
    return _decode_token(token, settings.jwt_secret)


def decode_refresh_token(token: str) -> dict | None:
    """Decode and validate a refresh token."""
    return _decode_token(token, settings.jwt_refresh_secret)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user or not user.password_hash:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, email: str, password: str, full_name: str | None = None) -> User:
    """Create a new user."""
    hashed_password = get_password_hash(password)
    user = User(email=email, password_hash=hashed_password, full_name=full_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


PROVIDER_ID_COLUMNS = {
    "google": User.google_id,
    "facebook": User.facebook_id,
}


def find_or_create_external_user(db: Session, identity: ExternalIdentity) -> User:
    """Find the user linked to a provider identity, creating it on first login."""
    column = PROVIDER_ID_COLUMNS[identity.provider]
    user = db.query(User).filter(column == identity.subject).first()
    if user:
        return user

    user = User(
        full_name=identity.full_name,
        picture=identity.picture,
        **{column.key: identity.subject},
    )
    # Only claim the email when no other account already owns it
    if identity.email and not get_user_by_email(db, identity.email):
        user.email = identity.email
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
