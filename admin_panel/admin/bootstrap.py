"""
Admin bootstrap - registers the catalog models with the admin registry.
Called by the app factory; safe to call more than once.
"""

from admin_panel.admin import columns, form_items
from admin_panel.admin.filters import Filter
from admin_panel.admin.model_item import ModelItem
from admin_panel.admin.registry import AdminRegistry, admin
from admin_panel.db.models import Category, Product, Tag


def _price(product: Product) -> str:
    return f"{(product.price_cents or 0) / 100:.2f}"


def register_catalog(registry: AdminRegistry = admin) -> AdminRegistry:
    if "products" in registry:
        return registry

    registry.register(
        ModelItem(
            Category,
            title="Categories",
            with_=["products"],
            columns=[
                columns.Column("name"),
                columns.Column("description"),
                columns.Count("products", label="Products"),
            ],
            form=[
                form_items.Text("name", required=True),
                form_items.Textarea("description"),
            ],
        )
    )
    registry.register(
        ModelItem(
            Tag,
            title="Tags",
            columns=[columns.Column("name")],
            form=[form_items.Text("name", required=True)],
        )
    )
    registry.register(
        ModelItem(
            Product,
            title="Products",
            with_=["category", "tags"],
            columns=[
                columns.Column("title"),
                columns.Column("category.name", label="Category"),
                columns.Lists("tags.name", label="Tags"),
                columns.Custom("price", _price),
                columns.Column("opens_at", label="Opens at"),
                columns.Date("created_at", label="Created", format="%d.%m.%Y"),
            ],
            form=[
                form_items.Text("title", required=True),
                form_items.Textarea("description"),
                form_items.Number("price_cents", label="Price (cents)", default=0),
                form_items.Checkbox("is_active", default=True),
                form_items.Time("opens_at"),
                form_items.Select("category_id", label="Category", model=Category),
                form_items.MultiSelect("tags", model=Tag),
            ],
            filters=[
                Filter("category_id", alias="category", title=lambda value: f"Category #{value}"),
                Filter("is_active", alias="active", title="Active only"),
            ],
        )
    )
    return registry
