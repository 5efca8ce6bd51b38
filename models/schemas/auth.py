from marshmallow import EXCLUDE, Schema, fields, validate


class RegisterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, error_messages={"invalid": "Invalid email format"})
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=6, error="Password must be at least 6 characters"),
    )
    name = fields.String(required=True, validate=validate.Length(min=1, error="Name is required"))


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, error_messages={"invalid": "Invalid email format"})
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(min=1, error="Password is required"),
    )


class RefreshTokenSchema(Schema):
    """Body of /auth/refresh and /auth/logout."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(
        required=True,
        data_key="refreshToken",
        validate=validate.Length(min=1, error="Refresh token is required"),
    )
