"""Category CRUD against /categories."""

from __future__ import annotations

from typing import Any, Union

from pos_admin.api_client import ApiClient
from pos_admin.logging_config import log_event
from pos_admin.models import Category, CategoryForm
from pos_admin.services._forms import build_form, parse_model, parse_models

PATH = "/categories"


def list_categories(client: ApiClient) -> list[Category]:
    return parse_models(Category, client.get(PATH), path=PATH)


def create_category(client: ApiClient, form: CategoryForm | dict[str, Any]) -> Category | None:
    payload = build_form(CategoryForm, form).to_payload()
    data = client.post(PATH, payload)
    log_event("category_created", category_name=payload["name"])
    return parse_model(Category, data, path=PATH) if isinstance(data, dict) else None


def update_category(
    client: ApiClient, category_id: Union[int, str], form: CategoryForm | dict[str, Any]
) -> Category | None:
    payload = build_form(CategoryForm, form).to_payload()
    data = client.patch(f"{PATH}/{category_id}", payload)
    log_event("category_updated", category_id=str(category_id))
    return parse_model(Category, data, path=PATH) if isinstance(data, dict) else None


def delete_category(client: ApiClient, category_id: Union[int, str]) -> None:
    client.delete(f"{PATH}/{category_id}")
    log_event("category_deleted", category_id=str(category_id))
