# linkforge/models/profile.py
"""
Database model for a user's public link page.
Holds display/design settings and the page's engagement counters.
"""
import uuid
from tortoise import fields, models

# Defaults applied when a profile is created lazily
DEFAULT_DESIGN = {
    "theme": "default",
    "background_color": "#050505",
    "text_color": "#ffffff",
    "font": "Inter, sans-serif",
    "button_style": "solid",
    "button_color": "#865DFF",
    "button_text_color": "#ffffff",
    "animation": "none",
    "background_pattern": "none",
}

class Profile(models.Model):
    """
    Profile database model (exactly one per User).

    view_count counts raw page views; unique_visitors counts first sightings
    of a visitor identifier. Both are only changed through atomic
    F-expression updates in services.visits.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.OneToOneField(
        "models.User",
        related_name="profile",
        on_delete=fields.CASCADE,
    )
    title = fields.CharField(max_length=100, null=True)
    description = fields.CharField(max_length=500, null=True)
    avatar = fields.CharField(max_length=1024, null=True)  # Avatar image URL

    theme = fields.CharField(max_length=32, default=DEFAULT_DESIGN["theme"])
    background_color = fields.CharField(max_length=9, default=DEFAULT_DESIGN["background_color"])
    text_color = fields.CharField(max_length=9, default=DEFAULT_DESIGN["text_color"])
    font = fields.CharField(max_length=64, default=DEFAULT_DESIGN["font"])
    button_style = fields.CharField(max_length=16, default=DEFAULT_DESIGN["button_style"])
    button_color = fields.CharField(max_length=9, default=DEFAULT_DESIGN["button_color"])
    button_text_color = fields.CharField(max_length=9, default=DEFAULT_DESIGN["button_text_color"])
    animation = fields.CharField(max_length=16, default=DEFAULT_DESIGN["animation"])
    background_pattern = fields.CharField(max_length=16, default=DEFAULT_DESIGN["background_pattern"])
    custom_css = fields.TextField(null=True)
    is_public = fields.BooleanField(default=True)

    view_count = fields.IntField(default=0)
    unique_visitors = fields.IntField(default=0)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "profiles"
