from admin_panel.db.models.catalog import Category, Product, Tag, product_tags

__all__ = ["Category", "Product", "Tag", "product_tags"]
