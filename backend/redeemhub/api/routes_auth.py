from fastapi import APIRouter, Depends, HTTPException

from redeemhub.exceptions import AuthenticationError
from redeemhub.schemas.auth_schema import LoginIn
from redeemhub.services.auth_service import CredentialVerifier, get_credential_verifier

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", summary="Log in as admin or user")
def login(
    payload: LoginIn,
    verifier: CredentialVerifier = Depends(get_credential_verifier),
):
    try:
        who = verifier.verify(payload.username, payload.password, payload.role)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=e.message)
    return {"success": True, "role": who.role, "username": who.username, "name": who.name}
