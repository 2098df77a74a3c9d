"""
Product (menu item) CRUD against /menu, with image upload via /upload.

Images are uploaded first; the returned URL is then sent as ``imageUrl`` in
the JSON payload of the create/update call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Optional, Union

from pos_admin.api_client import ApiClient
from pos_admin.exceptions import UploadError
from pos_admin.logging_config import log_event
from pos_admin.models import Product, ProductForm, ProductStatus, ProductUpdateForm
from pos_admin.services._forms import build_form, parse_model, parse_models

logger = logging.getLogger(__name__)

PATH = "/menu"
UPLOAD_PATH = "/upload"

# Storage providers name the URL differently; first hit wins.
_URL_KEYS = ("imageUrl", "url", "secure_url")


@dataclass
class ImageFile:
    """An image picked in the product dialog."""

    content: Union[bytes, BinaryIO]
    filename: str = "image"
    content_type: Optional[str] = None


def extract_image_url(data: Any) -> str:
    """
    Find the uploaded image URL in an upload response.

    Looks at the top level, then one ``data`` level deeper in case the
    envelope was nested twice.

    Raises:
        UploadError: no URL field present.
    """
    if isinstance(data, dict):
        for key in _URL_KEYS:
            if data.get(key):
                return str(data[key])
        nested = data.get("data")
        if isinstance(nested, dict):
            for key in ("imageUrl", "url"):
                if nested.get(key):
                    return str(nested[key])

    keys = sorted(data.keys()) if isinstance(data, dict) else []
    logger.error("Image upload returned no URL", extra={"received_keys": keys})
    raise UploadError(
        "Upload successful but image URL is missing.",
        received_keys=keys,
    )


def upload_image(client: ApiClient, image: ImageFile) -> str:
    data = client.upload(
        UPLOAD_PATH,
        image.content,
        filename=image.filename,
        content_type=image.content_type,
    )
    url = extract_image_url(data)
    log_event("image_uploaded", image_name=image.filename)
    return url


def list_products(client: ApiClient) -> list[Product]:
    return parse_models(Product, client.get(PATH), path=PATH)


def create_product(
    client: ApiClient,
    form: ProductForm | dict[str, Any],
    image: ImageFile | None = None,
) -> Product | None:
    """Create a product; new products default to AVAILABLE."""
    product = build_form(ProductForm, form)
    if product.status is None:
        product.status = ProductStatus.AVAILABLE
    if image is not None:
        product.image_url = upload_image(client, image)

    payload = product.to_payload()
    data = client.post(PATH, payload)
    log_event("product_created", product_name=payload["name"])
    return parse_model(Product, data, path=PATH) if isinstance(data, dict) else None


def update_product(
    client: ApiClient,
    product_id: Union[int, str],
    form: ProductUpdateForm | dict[str, Any],
    image: ImageFile | None = None,
) -> Product | None:
    """Patch only the fields that are present."""
    changes = build_form(ProductUpdateForm, form)
    if image is not None:
        changes.image_url = upload_image(client, image)

    payload = changes.to_payload()
    data = client.patch(f"{PATH}/{product_id}", payload)
    log_event("product_updated", product_id=str(product_id), fields=sorted(payload))
    return parse_model(Product, data, path=PATH) if isinstance(data, dict) else None


def delete_product(client: ApiClient, product_id: Union[int, str]) -> None:
    client.delete(f"{PATH}/{product_id}")
    log_event("product_deleted", product_id=str(product_id))
