from marshmallow import EXCLUDE, Schema, fields

USER_UPGRADED = "user.upgraded"


class WebhookDataSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    user_id = fields.String(load_default=None)


class WebhookSchema(Schema):
    """Payload posted by the payment provider (Polka)."""

    class Meta:
        unknown = EXCLUDE

    event = fields.String(required=True)
    data = fields.Nested(WebhookDataSchema, load_default=dict)
