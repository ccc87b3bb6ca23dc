# linkforge/models/link.py
import uuid
from tortoise import fields, models

class Link(models.Model):
    """
    One outbound link on a Profile.

    `order` is the display position. Within a profile no two links share a
    value; services.ordering keeps the sequence dense (0..N-1) after moves and
    bulk reorders. Deletions may leave gaps, sorting stays numeric.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    profile = fields.ForeignKeyField(
        "models.Profile",
        related_name="links",
        on_delete=fields.CASCADE,
    )
    title = fields.CharField(max_length=100)
    url = fields.CharField(max_length=2048)
    description = fields.CharField(max_length=500, null=True)
    icon = fields.CharField(max_length=50, null=True)
    # "order" is a reserved word in SQL; keep the column name unambiguous
    order = fields.IntField(source_field="sort_order", default=0)
    is_active = fields.BooleanField(default=True)
    click_count = fields.IntField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "links"
