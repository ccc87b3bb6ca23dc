# linkforge/models/visit.py
from tortoise import fields, models

class Visit(models.Model):
    """Append-only record of one public page view."""
    id = fields.BigIntField(pk=True)
    user = fields.ForeignKeyField("models.User", related_name="visits", on_delete=fields.CASCADE)
    visitor_id = fields.CharField(max_length=64, index=True)  # Opaque token kept in a long-lived cookie
    ip = fields.CharField(max_length=64, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "visits"
        indexes = (("user_id", "visitor_id"),)
