"""
Utilities for Reports module

Provides CSV export of the statistics bundle sections and of filtered
transaction lists.
"""

import csv
import io
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fastapi import Response

from ..schemas import StatisticsBundle, Transaction


def create_csv_response(
    data: List[Dict[str, Any]],
    filename: str,
    headers: Optional[Dict[str, str]] = None
) -> Response:
    """
    Create a CSV response from a list of dictionaries.

    Args:
        data: List of dictionaries with report data
        filename: Name for the CSV file
        headers: Optional mapping of field names to CSV headers

    Returns:
        FastAPI Response with CSV content
    """
    return Response(
        content=render_csv(data, headers),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Content-Type": "text/csv; charset=utf-8"
        }
    )


def render_csv(data: List[Dict[str, Any]], headers: Optional[Dict[str, str]] = None) -> str:
    """Render rows as CSV text, header row first"""
    if not data and not headers:
        return ""

    output = io.StringIO()
    fieldnames = list(headers.keys()) if headers else list(data[0].keys())
    csv_headers = list(headers.values()) if headers else fieldnames

    writer = csv.DictWriter(output, fieldnames=fieldnames, extrasaction="ignore")
    writer.writerow(dict(zip(fieldnames, csv_headers)))
    for row in data:
        writer.writerow({key: format_csv_value(row.get(key)) for key in fieldnames})

    csv_content = output.getvalue()
    output.close()
    return csv_content


def format_csv_value(value: Any) -> str:
    """
    Format a value for CSV export.

    Args:
        value: Value to format

    Returns:
        String representation suitable for CSV
    """
    if value is None:
        return ""
    elif isinstance(value, bool):
        return "Yes" if value else "No"
    elif isinstance(value, float):
        return f"{value:.2f}"
    elif isinstance(value, (date, datetime)):
        return value.isoformat()
    else:
        return str(value)


def prepare_summary_csv(bundle: StatisticsBundle) -> List[Dict[str, Any]]:
    """Prepare the bundle totals for CSV export"""
    return [{
        "total_orders": bundle.total_orders,
        "total_revenue": bundle.total_revenue,
        "total_discounts": bundle.total_discounts,
        "total_tax": bundle.total_tax,
        "average_order_value": bundle.average_order_value,
        "unique_customers": bundle.unique_customers
    }]


def prepare_top_products_csv(bundle: StatisticsBundle) -> List[Dict[str, Any]]:
    return [product.model_dump() for product in bundle.top_products]


def prepare_top_categories_csv(bundle: StatisticsBundle) -> List[Dict[str, Any]]:
    return [category.model_dump() for category in bundle.top_categories]


def prepare_payment_methods_csv(bundle: StatisticsBundle) -> List[Dict[str, Any]]:
    return [method.model_dump() for method in bundle.payment_method_breakdown]


def prepare_daily_revenue_csv(bundle: StatisticsBundle) -> List[Dict[str, Any]]:
    return [point.model_dump() for point in bundle.daily_revenue]


def prepare_stores_csv(bundle: StatisticsBundle) -> List[Dict[str, Any]]:
    return [store.model_dump() for store in bundle.store_breakdown]


def prepare_transactions_csv(transactions: List[Transaction]) -> List[Dict[str, Any]]:
    """Prepare filtered transactions for CSV export, one row per sale"""
    csv_data = []
    for t in transactions:
        csv_data.append({
            "receipt_number": t.receipt_number,
            "transaction_date": t.effective_date,
            "store_name": t.store_name or "",
            "cashier": t.cashier.label if t.cashier else "",
            "customer_name": t.customer.name if t.customer else "",
            "status": t.status,
            "payment_method": t.payment_method,
            "items_count": sum(item.quantity for item in t.items),
            "subtotal": t.subtotal,
            "discount_amount": t.discount_amount,
            "tax_amount": t.tax_amount,
            "total_amount": t.total_amount
        })
    return csv_data


# Bundle sections exportable as CSV
STATISTICS_CSV_SECTIONS = {
    "summary": prepare_summary_csv,
    "top_products": prepare_top_products_csv,
    "top_categories": prepare_top_categories_csv,
    "payment_methods": prepare_payment_methods_csv,
    "daily_revenue": prepare_daily_revenue_csv,
    "stores": prepare_stores_csv
}


# CSV Headers mapping for better column names
CSV_HEADERS = {
    "summary": {
        "total_orders": "Total Orders",
        "total_revenue": "Total Revenue",
        "total_discounts": "Total Discounts",
        "total_tax": "Total Tax",
        "average_order_value": "Average Order Value",
        "unique_customers": "Unique Customers"
    },
    "top_products": {
        "name": "Product",
        "sku": "SKU",
        "quantity": "Quantity Sold",
        "revenue": "Revenue"
    },
    "top_categories": {
        "name": "Category",
        "quantity": "Quantity Sold",
        "revenue": "Revenue"
    },
    "payment_methods": {
        "method": "Payment Method",
        "count": "Transactions",
        "amount": "Amount",
        "percentage": "Share of Transactions (%)",
        "revenue_share": "Share of Revenue (%)",
        "cash_received": "Cash Received",
        "change_given": "Change Given"
    },
    "daily_revenue": {
        "date": "Date",
        "revenue": "Revenue",
        "orders": "Orders"
    },
    "stores": {
        "store_name": "Store",
        "total_sales": "Total Sales",
        "transaction_count": "Transactions"
    },
    "transactions": {
        "receipt_number": "Receipt",
        "transaction_date": "Date",
        "store_name": "Store",
        "cashier": "Cashier",
        "customer_name": "Customer",
        "status": "Status",
        "payment_method": "Payment Method",
        "items_count": "Items",
        "subtotal": "Subtotal",
        "discount_amount": "Discount",
        "tax_amount": "Tax",
        "total_amount": "Total"
    }
}
