"""Unit tests for BillVerify models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from billverify.models import PaymentTerms, RoundingDirection, TimeEntry, VerifierSettings


class TestTimeEntry:
    def test_accepts_camel_case(self):
        entry = TimeEntry.model_validate(
            {"id": "e1", "description": "Draft", "hours": 1, "utbmsCode": "L330", "writeOff": True}
        )
        assert entry.utbms_code == "L330"
        assert entry.write_off

    def test_dumps_camel_case(self):
        data = TimeEntry(id="e1", description="Draft", hours=1).model_dump(by_alias=True)
        assert {"utbmsCode", "qualityIssues", "roundedHours", "reviewStatus"} <= data.keys()

    def test_billable_fallbacks(self):
        entry = TimeEntry(id="e1", description="Draft", hours=1.04, amount=300)
        assert entry.billable_hours == 1.04
        assert entry.billable_amount == 300

        adjusted = entry.model_copy(update={"adjusted_hours": 1.1, "adjusted_amount": 330})
        assert adjusted.billable_hours == 1.1
        assert adjusted.billable_amount == 330


class TestVerifierSettings:
    def test_defaults(self):
        settings = VerifierSettings()
        assert settings.hourly_rate == 350
        assert settings.long_threshold == 6
        assert settings.day_threshold == 10
        assert settings.rounding_increment == 0.1
        assert settings.rounding_direction == RoundingDirection.UP
        assert settings.payment_terms == PaymentTerms.RECEIPT

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            VerifierSettings(hourly_rate=-1)

    def test_payment_terms_label(self):
        assert PaymentTerms.NET30.label == "Net 30 Days"
        assert VerifierSettings(paymentTerms="net15").payment_terms.label == "Net 15 Days"
