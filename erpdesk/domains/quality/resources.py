"""Quality inspection collection."""

from __future__ import annotations

from erpdesk.core.pages.resources import Choice, Column, Resource, registry

INSPECTION_RESULTS = ("PENDING", "PASS", "FAIL", "CONDITIONAL_PASS")
INSPECTION_SOURCES = ("RECEIPT", "PRODUCTION", "SHIPMENT")

inspections = registry.register(
    Resource(
        name="inspections",
        title="Quality inspection",
        endpoint="/api/quality-inspections",
        collection_key="inspections",
        columns=(
            Column("inspectionNumber", "Inspection No.", 16),
            Column("inspectionDate", "Date", 12),
            Column("itemCode", "Item code", 14),
            Column("itemName", "Item", 22),
            Column("source", "Source", 12),
            Column("sourceNumber", "Source No.", 16),
            Column("inspectedQuantity", "Inspected", 10),
            Column("passedQuantity", "Passed", 10),
            Column("failedQuantity", "Failed", 10),
            Column("result", "Result", 16),
            Column("inspector", "Inspector", 14),
        ),
        search_fields=("inspectionNumber", "itemName", "itemCode", "sourceNumber", "inspector"),
        filters=(
            Choice("result", "Result", INSPECTION_RESULTS, remote=True),
            Choice("source", "Source", INSPECTION_SOURCES),
        ),
        date_field="inspectionDate",
        export_name="quality_inspections",
    )
)
