"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens, each kind signed with its own secret
- Stores refresh tokens in the DB (RefreshToken model) so logout can revoke them
- Refresh mints a new access token only; the refresh token is not rotated
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.auth import RegisterSchema, LoginSchema, RefreshTokenSchema
from models.schemas.user import UserOutSchema
from services.auth_service import AuthResult, AuthService
from utils.security import get_token_codecs

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
user_out_schema = UserOutSchema()


def _auth_service() -> AuthService:
    return AuthService(get_token_codecs())


def _session_body(message: str, result: AuthResult) -> dict:
    return {
        "message": message,
        "user": user_out_schema.dump(result.user),
        "accessToken": result.access_token,
        "refreshToken": result.refresh_token,
    }


@bp.post("/register")
def register():
    """
    Register a new user and start a session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password, name]
          properties:
            email: { type: string }
            password: { type: string, minLength: 6 }
            name: { type: string }
    responses:
      201:
        description: Created (returns user, accessToken, refreshToken)
      400:
        description: Validation error or email already registered
    """
    data = register_schema.load(request.get_json(silent=True) or {})
    result = _auth_service().register(data["email"], data["password"], data["name"])
    return jsonify(_session_body("User registered successfully", result)), 201


@bp.post("/login")
def login():
    """
    Login: return user, accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid email or password
    """
    data = login_schema.load(request.get_json(silent=True) or {})
    result = _auth_service().login(data["email"], data["password"])
    return jsonify(_session_body("Login successful", result)), 200


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain a new access token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refreshToken]
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns accessToken)
      401:
        description: Invalid, expired or revoked refresh token
    """
    data = refresh_token_schema.load(request.get_json(silent=True) or {})
    access_token = _auth_service().refresh(data["refresh_token"])
    return jsonify({"accessToken": access_token}), 200


@bp.post("/logout")
def logout():
    """
    Logout: revokes the refresh token. Succeeds even if the token is already invalid.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refreshToken]
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: Logged out
    """
    data = refresh_token_schema.load(request.get_json(silent=True) or {})
    _auth_service().logout(data["refresh_token"])
    return jsonify({"message": "Logged out successfully"}), 200
