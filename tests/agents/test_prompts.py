from agents.prompts import (
    build_assistant_system_prompt,
    build_context_update_message,
    build_demand_prompt,
    build_forecast_prompt,
    build_greeting,
    build_historical_prompt,
    format_sales_history,
)
from models.enums import SalesTrend
from models.forecast import SalesHistoryEntry
from tests.mocks import make_product

PRODUCTS = [
    make_product("1", "iPhone 15 Pro", quantity=25, price=134900, category="Smartphones"),
    make_product("2", "Sony WH-1000XM5", quantity=40, price=29990, category="Audio"),
]


def test_forecast_prompt_lists_inventory_and_location():
    prompt = build_forecast_prompt("Chennai", PRODUCTS)
    assert "location: Chennai" in prompt
    assert "iPhone 15 Pro (Smartphones), Sony WH-1000XM5 (Audio)" in prompt
    assert "EVERY SINGLE ITEM" in prompt


def test_forecast_prompt_empty_inventory():
    assert "No items yet" in build_forecast_prompt("Delhi", [])


def test_format_sales_history():
    history = [
        SalesHistoryEntry(product_name="iPhone 15 Pro", average_daily_units=4, trend=SalesTrend.INCREASING),
        SalesHistoryEntry(product_name="Sony WH-1000XM5", average_daily_units=9, trend=SalesTrend.STABLE),
    ]
    assert format_sales_history(history) == (
        "Simulated Past 30 Days Sales:\n"
        "- iPhone 15 Pro: Avg 4 units/day. Trend: Increasing.\n"
        "- Sony WH-1000XM5: Avg 9 units/day. Trend: Stable."
    )


def test_demand_prompt_includes_context_and_date():
    prompt = build_demand_prompt(PRODUCTS, "Pune", "Simulated Past 30 Days Sales:", "2024-05-01")
    assert "Today is 2024-05-01." in prompt
    assert "iPhone 15 Pro, Sony WH-1000XM5" in prompt
    assert "ALL 2 products" in prompt
    assert "NEXT 7 DAYS" in prompt


def test_historical_prompt_uses_rupee_prices():
    prompt = build_historical_prompt(PRODUCTS, "Mumbai")
    assert "iPhone 15 Pro (₹134900)" in prompt
    assert "PAST 6 MONTHS" in prompt


def test_system_prompt_lists_every_product():
    prompt = build_assistant_system_prompt(PRODUCTS, "Kochi")
    assert "electronics store in Kochi" in prompt
    assert "- iPhone 15 Pro (Qty: 25, Price: ₹134900, Category: Smartphones)" in prompt
    assert "- Sony WH-1000XM5 (Qty: 40, Price: ₹29990, Category: Audio)" in prompt


def test_context_update_message():
    assert build_context_update_message(PRODUCTS) == (
        "SYSTEM UPDATE: The inventory has changed. The new list is: iPhone 15 Pro (25), Sony WH-1000XM5 (40)."
    )


def test_greeting():
    assert build_greeting(3, "Goa") == (
        "Hello! I'm NexusBot. I see you have **3 items** in your inventory in **Goa**. "
        "How can I help you manage your stock today?"
    )
