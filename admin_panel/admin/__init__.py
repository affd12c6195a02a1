# Admin configuration: model items, display columns, form items, filters

from admin_panel.admin.columns import Column, Count, Custom, Date, Lists
from admin_panel.admin.filters import Filter
from admin_panel.admin.form_items import Form, MultiSelect, Select
from admin_panel.admin.model_item import ModelItem
from admin_panel.admin.registry import AdminRegistry, admin

__all__ = [
    "AdminRegistry",
    "Column",
    "Count",
    "Custom",
    "Date",
    "Filter",
    "Form",
    "Lists",
    "ModelItem",
    "MultiSelect",
    "Select",
    "admin",
]
