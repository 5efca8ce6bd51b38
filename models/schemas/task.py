from marshmallow import EXCLUDE, Schema, fields, validate

from models.task import TaskStatus

_title_rules = [
    validate.Length(min=1, error="Title is required"),
    validate.Length(max=255, error="Title too long"),
]


class TaskCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=_title_rules)
    description = fields.String(allow_none=True)
    status = fields.Enum(TaskStatus)


class TaskUpdateSchema(Schema):
    # All optional, but validate if present
    class Meta:
        unknown = EXCLUDE

    title = fields.String(validate=_title_rules)
    description = fields.String(allow_none=True)
    status = fields.Enum(TaskStatus)


class TaskOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    description = fields.String(allow_none=True)
    status = fields.Enum(TaskStatus)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
