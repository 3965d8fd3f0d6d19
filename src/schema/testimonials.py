"""
Testimonials collection schema
"""

from schema.base import CollectionSchema, ListColumn, TextField, TextareaField, NumberField, CheckboxField
from utils.display import yes_no

def get_testimonial_schema() -> CollectionSchema:
    """Get testimonial collection schema"""
    return CollectionSchema(
        name="testimonial",
        label="Testimonials",
        list_columns=[
            ListColumn(key="name", header="Name"),
            ListColumn(key="role", header="Role"),
            ListColumn(key="rating", header="Rating"),
            ListColumn(key="show", header="Show", render=lambda r: yes_no(r.get("show"))),
            ListColumn(key="reviewed", header="Reviewed", render=lambda r: yes_no(r.get("reviewed"))),
        ],
        form_fields=[
            TextField(key="name", label="Name"),
            TextField(key="role", label="Role"),
            NumberField(key="rating", label="Rating (1–5)"),
            TextareaField(key="content", label="Content"),
            TextField(key="image", label="Image (filename/url)"),
            CheckboxField(key="show", label="Show"),
            CheckboxField(key="reviewed", label="Reviewed"),
        ],
        search_fields=["name"],
    )
