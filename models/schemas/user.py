from marshmallow import EXCLUDE, Schema, fields, pre_load, validate


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class UserCredentialsSchema(Schema):
    """Email + password body shared by register, update and login."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, validate=validate.Length(min=1, max=255))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        # Blank or whitespace-only values fail the Length(min=1) checks above
        if isinstance(data, dict):
            data = dict(data)
            for key in ("email", "password"):
                if key in data:
                    data[key] = _strip(data[key])
        return data


class UserCreateSchema(UserCredentialsSchema):
    pass


class UserUpdateSchema(UserCredentialsSchema):
    pass


class UserLoginSchema(UserCredentialsSchema):
    email = fields.String(required=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    email = fields.String(allow_none=False)
    is_chirpy_red = fields.Boolean()
