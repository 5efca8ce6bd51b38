from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.user import ProfileOutSchema, ProfileUpdateSchema
from services import profile_service
from utils.decorators import jwt_required
from utils.security import Identity

bp = Blueprint("profile", __name__)

profile_out_schema = ProfileOutSchema()
profile_update_schema = ProfileUpdateSchema()


@bp.get("/me")
@jwt_required()
def get_profile(identity: Identity):
    """
    Get current user's profile
    ---
    tags:
      - Profile
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = profile_service.get_profile(identity)
    return jsonify(profile_out_schema.dump(user)), 200


@bp.put("/me")
@jwt_required()
def update_profile(identity: Identity):
    """
    Update name and/or email of the current user
    ---
    tags:
      - Profile
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 100 }
            email: { type: string }
    responses:
      200:
        description: OK
      400:
        description: Validation error or email already in use
    """
    data = profile_update_schema.load(request.get_json(silent=True) or {})
    user = profile_service.update_profile(identity, data)
    return jsonify({"message": "Profile updated successfully", "user": profile_out_schema.dump(user)}), 200
