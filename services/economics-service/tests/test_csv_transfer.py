"""Tests for csv_transfer.py - subscription CSV import and export."""

from datetime import date

import pytest
from csv_transfer import EXPORT_COLUMNS, export_subscriptions_csv, parse_subscriptions_csv
from subscription_model import BillingCycle, SubscriptionRecord, SubscriptionStatus

HEADER = "name,cost,billing_cycle,category,next_billing_date,last_used,notes"


def test_parse_basic_rows():
    csv_content = (
        f"{HEADER}\n"
        "Figma,15,monthly,Design Tools,2024-07-01,2024-06-10,Team seat\n"
        "GitHub,48,yearly,development,2025-01-15,,\n"
    )

    result = parse_subscriptions_csv(csv_content)

    assert result.warnings == []
    assert result.imported_count == 2
    figma, github = result.records
    assert figma.name == "Figma"
    assert figma.cost == pytest.approx(15.0)
    assert figma.billing_cycle is BillingCycle.MONTHLY
    assert figma.next_billing_date == date(2024, 7, 1)
    assert figma.last_used == date(2024, 6, 10)
    assert figma.status is SubscriptionStatus.ACTIVE
    assert figma.notes == "Team seat"
    assert github.category == "Development"
    assert github.last_used is None


def test_generated_ids_follow_line_numbers():
    csv_content = f"{HEADER}\nA,1,monthly\nB,2,monthly\n"

    result = parse_subscriptions_csv(csv_content)

    assert [record.id for record in result.records] == ["row-1", "row-2"]


def test_missing_trailing_fields_default_to_empty():
    result = parse_subscriptions_csv(f"{HEADER}\nNotion,8\n")

    record = result.records[0]
    assert record.billing_cycle is BillingCycle.UNRECOGNIZED
    assert record.category == "Other"
    assert record.next_billing_date is None
    assert record.notes == ""


def test_blank_lines_are_skipped():
    csv_content = f"{HEADER}\n\nSlack,6.67,monthly,Communication,,,\n   \n\n"

    result = parse_subscriptions_csv(csv_content)

    assert [record.name for record in result.records] == ["Slack"]
    assert result.warnings == []


def test_quoted_fields_with_commas():
    csv_content = f'{HEADER}\n"Adobe, Inc.","$1,200.00",yearly,"Design Tools",,,"Seats: 3, annual"\n'

    record = parse_subscriptions_csv(csv_content).records[0]

    assert record.name == "Adobe, Inc."
    assert record.cost == pytest.approx(1200.0)
    assert record.notes == "Seats: 3, annual"


def test_rows_without_name_or_cost_are_reported():
    csv_content = f"{HEADER}\n,10,monthly\nDropbox,,monthly\nCanva,13,monthly\n"

    result = parse_subscriptions_csv(csv_content)

    assert [record.name for record in result.records] == ["Canva"]
    assert [warning.line_number for warning in result.warnings] == [2, 3]


def test_invalid_values_are_reported_not_raised():
    csv_content = (
        f"{HEADER}\nBad,-4,monthly\nWorse,abc,monthly\nLate,5,monthly,Other,not-a-date\n"
        "Endless,inf,monthly\nGood,10,monthly\n"
    )

    result = parse_subscriptions_csv(csv_content)

    assert [record.name for record in result.records] == ["Good"]
    assert [warning.line_number for warning in result.warnings] == [2, 3, 4, 5]
    assert "cost" in result.warnings[0].message
    assert "next_billing_date" in result.warnings[2].message
    assert "cost" in result.warnings[3].message


def test_optional_status_and_id_columns():
    csv_content = "Name,Cost,Billing Cycle,Status,ID\nZoom,15,monthly,Paused,zoom-1\n"

    record = parse_subscriptions_csv(csv_content).records[0]

    assert record.id == "zoom-1"
    assert record.status is SubscriptionStatus.PAUSED


def test_missing_required_columns():
    result = parse_subscriptions_csv("title,amount\nX,1\n")

    assert result.records == []
    assert "name" in result.warnings[0].message
    assert "cost" in result.warnings[0].message


def test_empty_input_reports_missing_header():
    result = parse_subscriptions_csv("")

    assert result.records == []
    assert result.warnings[0].message == "CSV file is missing a header row."


def test_bytes_with_bom_are_decoded():
    content = f"\ufeff{HEADER}\nMiro,10,monthly\n".encode("utf-8")

    result = parse_subscriptions_csv(content)

    assert [record.name for record in result.records] == ["Miro"]


def test_export_header_and_rows():
    records = [
        SubscriptionRecord(
            id="sub-1",
            name="Loom, Pro",
            cost=12.5,
            billing_cycle=BillingCycle.MONTHLY,
            category="Communication",
            next_billing_date=date(2024, 7, 1),
            status=SubscriptionStatus.CANCELLED,
            notes='says "hi"',
        )
    ]

    exported = export_subscriptions_csv(records)
    lines = exported.splitlines()

    assert lines[0] == ",".join(EXPORT_COLUMNS)
    assert lines[1] == '"Loom, Pro",12.50,monthly,Communication,2024-07-01,,cancelled,"says ""hi"""'


def test_exported_csv_imports_back():
    original = [
        SubscriptionRecord(
            id="sub-1",
            name="Canva",
            cost=119.99,
            billing_cycle=BillingCycle.YEARLY,
            category="Design Tools",
            next_billing_date=date(2024, 11, 3),
            last_used=date(2024, 6, 1),
            status=SubscriptionStatus.ACTIVE,
            notes="Brand kit, fonts",
        ),
        SubscriptionRecord(
            id="sub-2",
            name="Dropbox",
            cost=11.99,
            billing_cycle=BillingCycle.MONTHLY,
            category="Cloud Storage",
            status=SubscriptionStatus.INACTIVE,
        ),
    ]

    reimported = parse_subscriptions_csv(export_subscriptions_csv(original)).records

    assert [record.name for record in reimported] == ["Canva", "Dropbox"]
    assert [record.status for record in reimported] == [SubscriptionStatus.ACTIVE, SubscriptionStatus.INACTIVE]
    assert reimported[0].notes == "Brand kit, fonts"
    assert reimported[0].last_used == date(2024, 6, 1)
    assert reimported[1].cost == pytest.approx(11.99)
