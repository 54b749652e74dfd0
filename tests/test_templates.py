from __future__ import annotations

from datetime import datetime

from sms_manager.templates import DEFAULT_MESSAGE, build_placeholders, format_total, render


def test_render_replaces_known_placeholders() -> None:
    result = render(
        "Order #{order_number} is {order_status}",
        {"{order_number}": "100", "{order_status}": "completed"},
    )
    assert result == "Order #100 is completed"


def test_unknown_placeholders_pass_through() -> None:
    result = render("Hi {customer_name}, order {order_number}", {"{order_number}": "7"})
    assert result == "Hi {customer_name}, order 7"


def test_values_are_not_substituted_twice() -> None:
    result = render(
        "{order_status} / {order_number}",
        {"{order_status}": "{order_number}", "{order_number}": "9"},
    )
    assert result == "{order_number} / 9"


def test_render_strips_unsafe_markup() -> None:
    result = render("<script>alert(1)</script>Order {order_number}", {"{order_number}": "5"})
    assert "script" not in result
    assert result == "Order 5"


def test_render_keeps_simple_formatting_tags() -> None:
    assert render("<b>Order</b> {order_number}", {"{order_number}": "5"}) == "<b>Order</b> 5"


def test_build_placeholders_formats_date_and_total() -> None:
    placeholders = build_placeholders(
        order_number="42",
        status="processing",
        total="19.9",
        created_at=datetime(2024, 1, 2, 3, 4, 5),
    )
    assert placeholders == {
        "{order_number}": "42",
        "{order_status}": "processing",
        "{total_amount}": "19.90",
        "{order_date}": "2024-01-02 03:04:05",
    }


def test_format_total_keeps_unparseable_values() -> None:
    assert format_total("n/a") == "n/a"


def test_default_message_renders() -> None:
    placeholders = build_placeholders("42", "completed", "19.99", datetime(2024, 1, 2))
    assert (
        render(DEFAULT_MESSAGE, placeholders)
        == "Your order#42 is completed. Thank you for shopping with us."
    )


def test_plain_text_characters_are_not_entity_escaped() -> None:
    result = render(
        "Smith & Sons: order {order_number} ships in < 5 days > promised",
        {"{order_number}": "5"},
    )
    assert result == "Smith & Sons: order 5 ships in < 5 days > promised"
