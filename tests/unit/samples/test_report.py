"""Tests for the sample run report."""

import pytest

from cosmos_samples.samples.report import (
    CreatedItem,
    OperationError,
    QueryPage,
    ReadItem,
    SampleReport,
)


@pytest.fixture
def report():
    report = SampleReport(variant="sync", database="AzureSampleFamilyDB", container="FamilyContainer")
    report.created = [
        CreatedItem(id="Andersen-1", partition_key="Andersen", request_charge=6.29, duration=0.02),
        CreatedItem(id="Smith-1", partition_key="Smith", request_charge=6.48, duration=0.03),
    ]
    report.read = [ReadItem(id="Andersen-1", partition_key="Andersen", request_charge=1.0, duration=0.01)]
    report.pages = [
        QueryPage(item_count=1, request_charge=2.89, item_ids=["Smith-1"]),
        QueryPage(item_count=0, request_charge=1.11),
    ]
    return report


class TestSampleReport:

    def test_charge_totals(self, report):
        assert report.total_create_charge == pytest.approx(12.77)
        assert report.total_read_charge == pytest.approx(1.0)
        assert report.total_query_charge == pytest.approx(4.0)
        assert report.total_request_charge == pytest.approx(17.77)

    def test_query_item_ids(self, report):
        assert report.query_item_ids == ["Smith-1"]

    def test_succeeded(self, report):
        assert report.succeeded

        report.errors.append(OperationError(operation="read_item", error_type="CosmosHttpResponseError",
                                            message="Not found", status_code=404))

        assert not report.succeeded

    def test_summary(self, report):
        report.errors.append(OperationError(operation="create_item", error_type="InvalidDocumentError",
                                            message="no id"))

        summary = report.summary()

        assert summary["variant"] == "sync"
        assert summary["created"] == 2
        assert summary["read"] == 1
        assert summary["query_pages"] == 2
        assert summary["query_items"] == 1
        assert summary["request_charge"] == {"create": 12.77, "read": 1.0, "query": 4.0, "total": 17.77}
        assert summary["errors"] == [{
            "operation": "create_item",
            "error_type": "InvalidDocumentError",
            "status_code": None,
            "message": "no id",
        }]

    def test_empty_report(self):
        report = SampleReport(variant="async")

        assert report.total_request_charge == 0
        assert report.summary()["query_items"] == 0


class TestOperationError:

    def test_service_error_flag(self):
        assert OperationError("read_item", "CosmosHttpResponseError", "gone", status_code=404).is_service_error
        assert not OperationError("read_item", "ValueError", "bad").is_service_error
