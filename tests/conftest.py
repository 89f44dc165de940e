"""Shared fixtures: a small membership/invoicing domain."""

from datetime import datetime

import pytest

from minigauge.entity import EntitySchema, Record, RelationMacro, RelationMeta
from minigauge.graph.models import Graph

FIXED_TIME = datetime(2024, 3, 5, 14, 30)


@pytest.fixture
def schemas():
    """Schemas for Product, Donation, Invoice, InvoiceItem and MemberProduct."""
    product = EntitySchema(
        name="Product",
        table_name="products",
        fields={"id": "integer", "name": "string", "price_in_cents": "integer", "position": "integer"},
        schema_version="20240301120000",
    )
    donation = EntitySchema(
        name="Donation",
        table_name="products",
        fields=dict(product.fields),
        parent=product,
        schema_version="20240301120000",
    )
    invoice = EntitySchema(
        name="Invoice",
        table_name="invoices",
        fields={"id": "integer", "number": "integer", "proforma": "boolean", "created_at": "datetime"},
        schema_version="20240301120000",
    )
    invoice_item = EntitySchema(
        name="InvoiceItem",
        table_name="invoice_items",
        fields={"id": "integer", "quantity": "integer", "invoice_id": "integer"},
        schema_version="20240301120000",
    )
    member_product = EntitySchema(
        name="MemberProduct",
        table_name="member_products",
        fields={"id": "integer", "product_id": "integer", "product_type": "string", "updated_at": "datetime"},
        schema_version="20240301120000",
    )

    invoice.relations = [
        RelationMeta("invoice_items", RelationMacro.HAS_MANY, "InvoiceItem", target=invoice_item),
        RelationMeta("invoiceable", RelationMacro.BELONGS_TO, "Invoiceable", polymorphic=True),
        RelationMeta("products", RelationMacro.HAS_MANY, "Product", target=product, through="invoice_items"),
    ]
    invoice_item.relations = [
        RelationMeta("invoice", RelationMacro.BELONGS_TO, "Invoice", target=lambda: invoice),
        RelationMeta("product", RelationMacro.BELONGS_TO, "MemberProduct", target=member_product),
    ]
    member_product.relations = [
        RelationMeta("product", RelationMacro.BELONGS_TO, "Product", target=product),
        RelationMeta("invoiceItem", RelationMacro.HAS_ONE, "Invoice", target=invoice),
    ]

    return {
        "Product": product,
        "Donation": donation,
        "Invoice": invoice,
        "InvoiceItem": invoice_item,
        "MemberProduct": member_product,
    }


@pytest.fixture
def member_product(schemas):
    """A member product whose product and invoice item (with invoice) are loaded."""
    donation = Record(schemas["Donation"], {"id": 3, "name": "Donation", "price_in_cents": 0, "type": "Donation"})
    invoice = Record(schemas["Invoice"], {"id": 261641, "number": 261641, "proforma": True})
    invoice_item = Record(
        schemas["InvoiceItem"],
        {"id": 567108, "quantity": 1, "invoice_id": 261641},
        relations={"invoice": invoice},
    )
    return Record(
        schemas["MemberProduct"],
        {"id": 131299, "product_id": 3, "product_type": "Product", "updated_at": FIXED_TIME},
        relations={"product": donation, "invoiceItem": invoice_item},
    )


@pytest.fixture
def graph():
    """Empty graph with a fixed timestamp."""
    return Graph(generated_at=FIXED_TIME)
