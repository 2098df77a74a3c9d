"""
Tests for pos_admin.services.products.

Covers:
- Upload response URL extraction
- Create/update payloads with and without an image
- Form validation before any request is sent
"""

import pytest

from pos_admin.exceptions import APIError, MissingRequiredFieldError, UploadError, ValidationError
from pos_admin.models import ProductStatus
from pos_admin.services import products

from conftest import BASE_URL, envelope, make_response


class TestExtractImageUrl:
    @pytest.mark.parametrize(
        "data",
        [
            {"imageUrl": "/uploads/a.png"},
            {"url": "/uploads/a.png"},
            {"secure_url": "/uploads/a.png"},
            {"data": {"imageUrl": "/uploads/a.png"}},
            {"data": {"url": "/uploads/a.png"}},
            {"imageUrl": "", "url": "/uploads/a.png"},
        ],
    )
    def test_finds_url(self, data):
        assert products.extract_image_url(data) == "/uploads/a.png"

    def test_missing_url(self):
        with pytest.raises(UploadError) as exc_info:
            products.extract_image_url({"size": 10, "id": "x"})

        assert exc_info.value.message == "Upload successful but image URL is missing."
        assert exc_info.value.received_keys == ["id", "size"]

    def test_null_body(self):
        with pytest.raises(UploadError):
            products.extract_image_url(None)


class TestListProducts:
    def test_parses_products(self, client, http_session, sample_products):
        http_session.request.return_value = make_response(200, envelope(sample_products))

        result = products.list_products(client)

        assert [p.name for p in result] == ["Es Teh Manis", "Nasi Goreng Spesial", "Kopi Susu"]
        assert result[0].price == 5000.0
        assert result[0].category_name == "Minuman"
        assert http_session.request.call_args.args == ("GET", f"{BASE_URL}/menu")

    def test_empty(self, client, http_session):
        http_session.request.return_value = make_response(200, envelope(None))
        assert products.list_products(client) == []

    def test_malformed_record_is_api_error(self, client, http_session):
        http_session.request.return_value = make_response(200, envelope([{"id": 1, "name": None, "price": "abc"}]))

        with pytest.raises(APIError) as exc_info:
            products.list_products(client)

        assert exc_info.value.message == "Unexpected response from server"
        assert exc_info.value.path == "/menu"

    def test_non_list_body_is_api_error(self, client, http_session):
        http_session.request.return_value = make_response(200, envelope({"items": []}))

        with pytest.raises(APIError):
            products.list_products(client)


class TestCreateProduct:
    FORM = {"name": " Roti Bakar ", "price": 12000, "stock": 15, "categoryId": 1}

    def test_without_image(self, client, http_session):
        http_session.request.return_value = make_response(201, envelope({"id": 4, "name": "Roti Bakar"}))

        product = products.create_product(client, self.FORM)

        assert product.id == 4
        args, kwargs = http_session.request.call_args
        assert args == ("POST", f"{BASE_URL}/menu")
        assert kwargs["json"] == {
            "name": "Roti Bakar",
            "description": "",
            "price": 12000.0,
            "stock": 15,
            "categoryId": "1",
            "status": "AVAILABLE",
        }

    def test_uploads_image_first(self, client, http_session):
        http_session.request.side_effect = [
            make_response(201, envelope({"imageUrl": "/uploads/roti.jpg"})),
            make_response(201, envelope({"id": 4, "name": "Roti Bakar"})),
        ]
        image = products.ImageFile(b"JPEG", filename="roti.jpg", content_type="image/jpeg")

        products.create_product(client, self.FORM, image=image)

        upload_call, create_call = http_session.request.call_args_list
        assert upload_call.args == ("POST", f"{BASE_URL}/upload")
        assert upload_call.kwargs["files"] == {"file": ("roti.jpg", b"JPEG", "image/jpeg")}
        assert create_call.kwargs["json"]["imageUrl"] == "/uploads/roti.jpg"

    def test_upload_without_url_aborts_create(self, client, http_session):
        http_session.request.return_value = make_response(201, envelope({"size": 10}))

        with pytest.raises(UploadError):
            products.create_product(client, self.FORM, image=products.ImageFile(b"x"))

        assert http_session.request.call_count == 1

    def test_explicit_status_kept(self, client, http_session):
        http_session.request.return_value = make_response(201, envelope({"id": 4, "name": "Roti Bakar"}))

        products.create_product(client, {**self.FORM, "status": ProductStatus.OUT_OF_STOCK})

        assert http_session.request.call_args.kwargs["json"]["status"] == "OUT_OF_STOCK"

    def test_missing_category(self, client, http_session):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            products.create_product(client, {**self.FORM, "categoryId": ""})

        assert exc_info.value.field == "categoryId"
        http_session.request.assert_not_called()

    def test_negative_price(self, client, http_session):
        with pytest.raises(ValidationError) as exc_info:
            products.create_product(client, {**self.FORM, "price": -1})

        assert exc_info.value.field == "price"
        http_session.request.assert_not_called()


class TestUpdateProduct:
    def test_sends_only_set_fields(self, client, http_session):
        http_session.request.return_value = make_response(200, envelope({"id": 2, "name": "Nasi Goreng"}))

        products.update_product(client, 2, {"price": 27000, "name": "", "categoryId": None})

        args, kwargs = http_session.request.call_args
        assert args == ("PATCH", f"{BASE_URL}/menu/2")
        assert kwargs["json"] == {"price": 27000.0}

    def test_new_image_replaces_url(self, client, http_session):
        http_session.request.side_effect = [
            make_response(201, envelope({"url": "/uploads/new.png"})),
            make_response(200, envelope({"id": 2, "name": "Nasi Goreng"})),
        ]

        products.update_product(client, 2, {"stock": 3}, image=products.ImageFile(b"PNG", "new.png", "image/png"))

        assert http_session.request.call_args.kwargs["json"] == {"stock": 3, "imageUrl": "/uploads/new.png"}


class TestDeleteProduct:
    def test_delete(self, client, http_session):
        http_session.request.return_value = make_response(204)

        products.delete_product(client, 3)

        assert http_session.request.call_args.args == ("DELETE", f"{BASE_URL}/menu/3")
