import time, hmac, hashlib, base64, json
from typing import Any, Dict, Optional
from passlib.hash import bcrypt
from pitchthesis.config import Settings, settings as default_settings

def hash_password(pw: str) -> str:
    return bcrypt.hash(pw)

def verify_password(pw: str, hashed: str) -> bool:
    try:
        return bcrypt.verify(pw, hashed)
    except ValueError:
        # malformed stored hash
        return False

def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()

def _b64url_json(obj) -> str:
    return _b64url(json.dumps(obj, separators=(",", ":")).encode())

def _sign(signing_input: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode(), signing_input, hashlib.sha256).digest()

def create_access_token(username: str, cfg: Optional[Settings] = None, now: Optional[float] = None) -> str:
    """
    HS256 JWT carrying the username as `sub`; expires after cfg.jwt_ttl_seconds (24h).
    """
    cfg = cfg or default_settings
    issued = int(now if now is not None else time.time())
    header  = {"alg": cfg.jwt_algo, "typ": "JWT"}
    payload = {"sub": username, "iat": issued, "exp": issued + cfg.jwt_ttl_seconds}
    signing_input = f"{_b64url_json(header)}.{_b64url_json(payload)}".encode()
    return f"{signing_input.decode()}.{_b64url(_sign(signing_input, cfg.jwt_secret))}"

def decode_token(token: str, cfg: Optional[Settings] = None, now: Optional[float] = None) -> Dict[str, Any]:
    cfg = cfg or default_settings
    try:
        h, p, s = token.split(".")
        signing_input = f"{h}.{p}".encode()
        sig = base64.urlsafe_b64decode(s + "==")
        if not hmac.compare_digest(sig, _sign(signing_input, cfg.jwt_secret)):
            raise ValueError("bad signature")
        payload = json.loads(base64.urlsafe_b64decode(p + "=="))
        current = now if now is not None else time.time()
        if int(current) >= payload.get("exp", 0):
            raise ValueError("expired")
        return payload
    except Exception as e:
        raise ValueError("invalid token") from e
