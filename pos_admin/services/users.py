"""User management against /users."""

from __future__ import annotations

from typing import Any, Union

from pos_admin.api_client import ApiClient
from pos_admin.logging_config import log_event
from pos_admin.models import User, UserCreateForm, UserUpdateForm
from pos_admin.services._forms import build_form, parse_model, parse_models

PATH = "/users"


def list_users(client: ApiClient) -> list[User]:
    return parse_models(User, client.get(PATH), path=PATH)


def create_user(client: ApiClient, form: UserCreateForm | dict[str, Any]) -> User | None:
    payload = build_form(UserCreateForm, form).to_payload()
    data = client.post(PATH, payload)
    log_event("user_created", email=payload["email"], role=payload["role"])
    return parse_model(User, data, path=PATH) if isinstance(data, dict) else None


def update_user(client: ApiClient, user_id: Union[int, str], form: UserUpdateForm | dict[str, Any]) -> User | None:
    """Only the name can change; email, password and role edits are dropped."""
    payload = build_form(UserUpdateForm, {"name": _name_of(form)}).to_payload()
    data = client.patch(f"{PATH}/{user_id}", payload)
    log_event("user_updated", user_id=str(user_id))
    return parse_model(User, data, path=PATH) if isinstance(data, dict) else None


def delete_user(client: ApiClient, user_id: Union[int, str]) -> None:
    client.delete(f"{PATH}/{user_id}")
    log_event("user_deleted", user_id=str(user_id))


def _name_of(form: UserUpdateForm | dict[str, Any]) -> Any:
    if isinstance(form, dict):
        return form.get("name")
    return form.name
