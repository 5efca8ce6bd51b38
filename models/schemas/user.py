from marshmallow import EXCLUDE, Schema, fields, validate


class UserOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    name = fields.String()
    created_at = fields.DateTime(data_key="createdAt")


class ProfileOutSchema(UserOutSchema):
    updated_at = fields.DateTime(data_key="updatedAt")


class ProfileUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(
        validate=[
            validate.Length(min=1, error="Name is required"),
            validate.Length(max=100, error="Name too long"),
        ]
    )
    email = fields.Email(error_messages={"invalid": "Invalid email format"})
