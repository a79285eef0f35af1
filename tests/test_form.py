# tests/test_form.py
import pytest

from inventory.config import settings
from inventory.form import FormMode, FormValidationError, ProductForm
from inventory.models import Product

TS = "2026-01-01T00:00:00.000000+00:00"

def existing():
    return Product(id="p1", name="Widget", price=100, quantity=5, category="Electronics",
                   description=None, image_url="https://example.com/w.png", created_at=TS, updated_at=TS)

def filled_form():
    form = ProductForm()
    form.open()
    form.set_field("name", "Desk Lamp")
    form.set_field("price", "1499.99")
    form.set_field("quantity", "3")
    form.set_field("category", "Home & Garden")
    return form

def test_create_mode_starts_empty():
    form = ProductForm()
    form.open()
    assert form.mode == FormMode.CREATE
    assert form.buffer == {"name": "", "price": 0, "quantity": 0, "category": "",
                           "description": "", "image_url": ""}
    assert form.title == "Add New Product"
    assert form.submit_label == "Add Product"

def test_edit_mode_copies_editable_fields():
    form = ProductForm()
    form.open(existing())
    assert form.mode == FormMode.EDIT
    assert form.title == "Edit Product"
    assert form.submit_label == "Update Product"
    assert form.buffer["name"] == "Widget"
    assert form.buffer["description"] == ""
    assert "id" not in form.buffer and "created_at" not in form.buffer

def test_numeric_fields_coerce_like_inputs():
    form = ProductForm()
    form.open()
    form.set_field("price", "abc")
    form.set_field("quantity", "")
    assert form.buffer["price"] == 0
    assert form.buffer["quantity"] == 0
    form.set_field("price", "12.5")
    assert form.buffer["price"] == 12.5

def test_submit_hands_fields_then_resets():
    form = filled_form()
    received = []
    form.submit(received.append)
    assert len(received) == 1
    fields = received[0]
    assert (fields.name, fields.price, fields.quantity, fields.category) == ("Desk Lamp", 1499.99, 3, "Home & Garden")
    assert form.mode == FormMode.CLOSED
    assert form.buffer["name"] == ""

def test_form_resets_even_if_handler_raises():
    form = filled_form()

    def boom(fields):
        raise RuntimeError("handler failed")

    with pytest.raises(RuntimeError):
        form.submit(boom)
    assert not form.is_open

def test_empty_name_rejected_without_calling_handler():
    form = ProductForm()
    form.open(existing())
    form.set_field("name", "   ")
    called = []
    with pytest.raises(FormValidationError) as exc:
        form.submit(called.append)
    assert called == []
    assert "name" in exc.value.errors
    # still open so the user can fix it
    assert form.mode == FormMode.EDIT

def test_negative_price_and_missing_category_rejected():
    form = ProductForm()
    form.open()
    form.set_field("name", "Thing")
    form.set_field("price", -1)
    with pytest.raises(FormValidationError) as exc:
        form.submit(lambda f: None)
    assert set(exc.value.errors) == {"price", "category"}

def test_cancel_discards_buffer():
    form = filled_form()
    form.cancel()
    assert form.mode == FormMode.CLOSED
    assert form.buffer["name"] == ""

def test_suggestions_follow_category():
    form = ProductForm()
    form.open()
    form.toggle_image_suggestions()
    # no category yet, panel stays hidden
    assert not form.suggestions_visible
    form.set_field("category", "Clothing")
    assert form.suggestions_visible
    assert form.suggested_images == settings.SUGGESTED_IMAGES["Clothing"]
    form.set_field("category", "Sports & Fitness")
    assert form.suggested_images == settings.SUGGESTED_IMAGES["Sports & Fitness"]
    # categories without their own set fall back to electronics
    form.set_field("category", "Automotive")
    assert form.suggested_images == settings.SUGGESTED_IMAGES["Electronics"]

def test_select_image_writes_url_and_closes_panel():
    form = ProductForm()
    form.open()
    form.set_field("category", "Clothing")
    form.toggle_image_suggestions()
    url = form.suggested_images[1]
    form.select_image(url)
    assert form.buffer["image_url"] == url
    assert not form.show_image_suggestions

def test_broken_images_are_cleared():
    form = ProductForm()
    form.open(existing())
    form.image_failed()
    assert form.buffer["image_url"] == ""

    form.set_field("image_url", "not a url")
    assert form.verify_image(lambda url: True) is False
    assert form.buffer["image_url"] == ""

    form.set_field("image_url", "https://example.com/missing.png")
    assert form.verify_image(lambda url: False) is False
    assert form.buffer["image_url"] == ""

    def unreachable(url):
        raise ConnectionError("down")

    form.set_field("image_url", "https://example.com/a.png")
    assert form.verify_image(unreachable) is False
    assert form.buffer["image_url"] == ""

    form.set_field("image_url", "https://example.com/ok.png")
    assert form.verify_image(lambda url: True) is True
    assert form.buffer["image_url"] == "https://example.com/ok.png"

def test_fractional_quantity_truncates():
    form = ProductForm()
    form.open()
    form.set_field("quantity", "5.5")
    assert form.buffer["quantity"] == 5
    form.set_field("quantity", "7.0")
    assert form.buffer["quantity"] == 7
    form.set_field("quantity", "abc")
    assert form.buffer["quantity"] == 0
    form.set_field("quantity", "1e400")
    assert form.buffer["quantity"] == 0

def test_blank_and_whitespace_names_give_same_error():
    messages = []
    for name in ("", "   "):
        form = ProductForm()
        form.open(existing())
        form.set_field("name", name)
        with pytest.raises(FormValidationError) as exc:
            form.validate()
        messages.append(exc.value.errors["name"])
    assert messages[0] == messages[1]
    assert "Product name is required" in messages[0]
