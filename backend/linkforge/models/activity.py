# linkforge/models/activity.py
from tortoise import fields, models

class Activity(models.Model):
    """Append-only dashboard activity entry."""
    id = fields.BigIntField(pk=True)
    user = fields.ForeignKeyField("models.User", related_name="activities", on_delete=fields.CASCADE)
    type = fields.CharField(max_length=32)
    details = fields.TextField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "activities"
