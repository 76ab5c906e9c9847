from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from app.config import settings


# JWT
# Tokens stellt das Admin-Backend aus, hier wird nur geprüft

def create_access_token(data: dict, expires_minutes: int = 30) -> str:
    to_encode = data.copy()
    to_encode['exp'] = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode['type'] = 'access'
    return jwt.encode(to_encode, settings.secret_key, settings.jwt_algorithm)

def decode_token(token: str, expected_type: str = None) -> dict:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
        if expected_type and payload.get('type') != expected_type:
            return None
        return payload
    except JWTError:
        return None


bearer_scheme = HTTPBearer(auto_error=False)

def get_current_subject(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    if not credentials:
        raise HTTPException(status_code=401, detail="Nicht eingeloggt")
    payload = decode_token(credentials.credentials, "access")
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Token ungültig")
    return payload["sub"]
