from __future__ import annotations

"""Prompt builder utilities for the enrichment orchestrators.

The functions in this module only format prompt text from a catalog
snapshot and the active location, so they are deterministic and reusable
from tests. Response schemas and model parameters stay in the oracle
implementation.

All builders return **plain strings**; they do *not* include any role
metadata so the caller is free to place them into either the `system` or
`user` role as appropriate.
"""

from collections.abc import Sequence

from models.forecast import SalesHistoryEntry
from models.inventory import Product

__all__ = [
    "build_assistant_system_prompt",
    "build_context_update_message",
    "build_demand_prompt",
    "build_forecast_prompt",
    "build_greeting",
    "build_historical_prompt",
    "format_sales_history",
]

ASSISTANT_NAME = "NexusBot"
CURRENCY = "₹"


def _amount(value: float) -> str:
    # whole rupee amounts without a trailing ".0"
    return str(int(value)) if float(value).is_integer() else str(value)


def build_forecast_prompt(location: str, products: Sequence[Product]) -> str:
    """Return the prompt asking for a forecast of every catalog item plus external trends."""
    inventory_list = ", ".join(f"{p.name} ({p.category})" for p in products) or "No items yet"
    return f"""
        Analyze the current RETAIL ELECTRONICS market trends specifically for the location: {location}.

        My Current Inventory contains these items:
        {inventory_list}

        Task:
        Generate a market forecast JSON that analyzes MY INVENTORY + EXTERNAL TRENDS.

        CRITICAL RULES:
        1. MANDATORY: include a demand analysis object for EVERY SINGLE ITEM in "My Current Inventory". Do not skip any.
        2. EXTERNAL TRENDS: after my items, add 3-5 top trending electronics in {location} that I do NOT have.
        3. SCORING: give items in my inventory realistic demand scores (0-100) based on their real-world popularity.

        Structure:
        - location: string
        - marketSummary: string (mention how well my current inventory matches local demand)
        - trendingProducts: array of objects
          - productName: use my inventory name exactly if applicable
          - category: category
          - demandScore: 0-100
          - reason: why it is trending (for items in my inventory start with "IN STOCK: ")
        """


def format_sales_history(history: Sequence[SalesHistoryEntry]) -> str:
    """Return the human-readable 30-day history summary shown in the view and sent to the oracle."""
    lines = ["Simulated Past 30 Days Sales:"]
    lines.extend(
        f"- {entry.product_name}: Avg {entry.average_daily_units} units/day. Trend: {entry.trend.value}."
        for entry in history
    )
    return "\n".join(lines)


def build_demand_prompt(products: Sequence[Product], location: str, history_summary: str, today: str) -> str:
    """Return the prompt asking for a 7-day per-product sales prediction."""
    product_list = ", ".join(p.name for p in products)
    return f"""
        You are an inventory planning AI for an Electronics store in {location}.
        Today is {today}.

        The available products in inventory are: {product_list}.

        Context:
        {history_summary}

        Task:
        Predict the daily sales quantity for EACH of the available products for the NEXT 7 DAYS, starting tomorrow.

        CRITICAL:
        - If a product is NEW (no history provided), estimate sales based on its category popularity in {location}.
        - You MUST return predictions for ALL {len(products)} products in the list, for every one of the 7 days.

        Return a JSON array with exactly 7 items, one per day (date as YYYY-MM-DD), each containing the list of predictions for that day.
        """


def build_historical_prompt(products: Sequence[Product], location: str) -> str:
    """Return the prompt asking for six months of simulated per-product sales history."""
    product_info = ", ".join(f"{p.name} ({CURRENCY}{_amount(p.price)})" for p in products)
    return f"""
        You are a retail analytics engine for an electronics business in {location}.

        Current Inventory: {product_info}.

        Task:
        Generate simulated historical sales data for the PAST 6 MONTHS for EACH product in the list.

        Context:
        - The currency is Indian Rupees ({CURRENCY}).
        - Use realistic seasonality for {location} (local weather, festivals, back-to-school seasons).
        - For each product give monthly metrics for the last 6 months: month name, units sold, total revenue, average price.
        - Let the average price fluctuate slightly month to month (discounts, festivals, market conditions).
        - Use the same month labels for every product.
        - Provide a short insight on why the product performed that way in {location}.

        CRITICAL:
        - Return data for ALL {len(products)} products.
        """


def build_assistant_system_prompt(products: Sequence[Product], location: str) -> str:
    """Return the system instruction that seeds an assistant session."""
    inventory_context = "\n".join(
        f"- {p.name} (Qty: {p.quantity}, Price: {CURRENCY}{_amount(p.price)}, Category: {p.category})" for p in products
    )
    return f"""
        You are {ASSISTANT_NAME}, an expert inventory management assistant for an electronics store in {location}.

        CURRENT INVENTORY STATE:
        {inventory_context or "- (no products)"}

        Your Role:
        1. Answer questions about current stock levels, pricing, and value.
        2. Advise whether to restock items based on general electronics market knowledge.
        3. Suggest marketing strategies for specific items in the inventory.

        FORMATTING RULES (Important):
        - Use **bold** for product names, prices, and key numbers.
        - Use bullet points (- item) for lists.
        - Use ## for main headings (if the response is long).
        - Keep paragraphs short and professional.
        - Do not use markdown tables, use lists instead.
        - All currency values should be in Indian Rupees ({CURRENCY}).

        BEHAVIOR:
        - If the user asks about trends, ALWAYS reference the items they currently have in stock first if applicable.
        - Be encouraging but realistic about demand.
        """


def build_context_update_message(products: Sequence[Product]) -> str:
    """Return the hidden turn that keeps the assistant's view of the inventory current."""
    inventory_summary = ", ".join(f"{p.name} ({p.quantity})" for p in products)
    return f"SYSTEM UPDATE: The inventory has changed. The new list is: {inventory_summary}."


def build_greeting(product_count: int, location: str) -> str:
    """Return the first visible assistant turn."""
    return (
        f"Hello! I'm {ASSISTANT_NAME}. I see you have **{product_count} items** in your inventory "
        f"in **{location}**. How can I help you manage your stock today?"
    )
