from portal.schemas.job import ApplicationForm, JobPosting
from portal.schemas.outreach import MembershipApplication
from portal.schemas.staff import EmployeeRegistration
from portal.schemas.validation import validate
from portal.schemas.worklog import CallLogSubmission, DsrSubmission, EarningsSubmission


def _dsr(**overrides):
    data = {
        "employeeId": "emp-1",
        "employeeName": "Ravi",
        "description": "Visited three clients in the north zone",
    }
    data.update(overrides)
    return data


class TestDsrRules:
    def test_plain_report_is_valid(self):
        record, errors = validate(DsrSubmission, _dsr())
        assert errors == {}
        assert record.has_travelled is False

    def test_closing_must_exceed_opening(self):
        record, errors = validate(DsrSubmission, _dsr(hasTravelled=True, openingKm="15000", closingKm="14900"))
        assert record is None
        assert errors == {"closingKm": ["Closing KM must be greater than Opening KM."]}

    def test_travel_readings_parse_from_strings(self):
        record, errors = validate(DsrSubmission, _dsr(hasTravelled=True, openingKm="15000", closingKm="15100"))
        assert errors == {}
        assert record.closing_km - record.opening_km == 100

    def test_travel_fields_are_co_required(self):
        _, errors = validate(DsrSubmission, _dsr(hasTravelled=True))
        assert errors["openingKm"] == ["Opening KM is required when you have travelled."]
        assert errors["closingKm"] == ["Closing KM is required when you have travelled."]

    def test_non_numeric_reading_is_an_error_not_zero(self):
        _, errors = validate(DsrSubmission, _dsr(hasTravelled=True, openingKm="abc", closingKm="15100"))
        assert "openingKm" in errors

    def test_km_dropped_when_not_travelled(self):
        record, _ = validate(DsrSubmission, _dsr(openingKm="10", closingKm="20"))
        doc = record.to_document()
        assert "openingKm" not in doc
        assert "closingKm" not in doc
        assert doc["employeeId"] == "emp-1"

    def test_all_failures_reported_together(self):
        _, errors = validate(DsrSubmission, {"description": "short"})
        assert set(errors) == {"employeeId", "employeeName", "description"}


class TestEarningsRules:
    def test_empty_items_rejected(self):
        _, errors = validate(EarningsSubmission, {"employeeId": "e", "employeeName": "n", "earnings": []})
        assert errors == {"earnings": ["Please add at least one earning."]}

    def test_nested_errors_keyed_by_path(self):
        _, errors = validate(EarningsSubmission, {
            "employeeId": "e",
            "employeeName": "n",
            "earnings": [{"description": "Commission", "amount": "0"}, {"description": "x", "amount": "50"}],
        })
        assert errors["earnings.0.amount"] == ["Amount must be greater than 0."]
        assert errors["earnings.1.description"] == ["Description must be at least 3 characters."]


class TestCallLogRules:
    def test_duration_at_least_one_minute(self):
        _, errors = validate(CallLogSubmission, {
            "employeeId": "e",
            "employeeName": "n",
            "clientName": "Meena",
            "clientMobile": "9876543210",
            "topic": "Renewal pricing",
            "duration": "0",
        })
        assert errors == {"duration": ["Duration must be at least 1 minute."]}


class TestRegistrationRules:
    def _registration(self, **overrides):
        data = {
            "fullName": "Kiran Rao",
            "mobile": "9876543210",
            "personalEmail": "kiran.rao@gmail.com",
            "userId": "kiran@zensolve.in",
            "password": "secret123",
            "district": "Pune",
            "state": "Maharashtra",
            "pincode": "411001",
        }
        data.update(overrides)
        return data

    def test_valid(self):
        record, errors = validate(EmployeeRegistration, self._registration())
        assert errors == {}
        assert record.user_id == "kiran@zensolve.in"

    def test_user_id_needs_company_domain(self):
        _, errors = validate(EmployeeRegistration, self._registration(userId="bob@gmail.com"))
        assert errors == {"userId": ["User ID must end with @zensolve.in"]}

    def test_mobile_and_pincode_lengths(self):
        _, errors = validate(EmployeeRegistration, self._registration(mobile="98765432101", pincode="4110"))
        assert errors["mobile"] == ["A valid 10-digit mobile number is required."]
        assert errors["pincode"] == ["Pincode must be 6 digits."]


class TestApplicationRules:
    def test_checkboxes_must_be_ticked(self):
        _, errors = validate(ApplicationForm, {
            "jobId": "job-1",
            "fullName": "Asha Verma",
            "mobile": "9876543210",
            "email": "asha@gmail.com",
            "hasExperience": "no",
            "readyToRelocate": "yes",
            "agreeTerms": "on",
        })
        assert errors == {"confirmInfo": ["You must confirm the information is true."]}

    def test_blank_optional_number_means_not_supplied(self):
        record, errors = validate(ApplicationForm, {
            "jobId": "job-1",
            "fullName": "Asha Verma",
            "mobile": "9876543210",
            "email": "asha@gmail.com",
            "hasExperience": "yes",
            "yearsOfExperience": "",
            "readyToRelocate": "no",
            "confirmInfo": "on",
            "agreeTerms": "on",
        })
        assert errors == {}
        assert record.years_of_experience is None


class TestJobPostingRules:
    def test_tags_split_and_trimmed(self):
        record, errors = validate(JobPosting, {
            "title": "Field Sales Executive",
            "company": "Zensolve",
            "location": "Nagpur",
            "type": "Full-time",
            "workMode": "On-site",
            "department": "Sales",
            "companyType": "Private",
            "roleCategory": "Sales",
            "education": "Graduate",
            "industry": "Services",
            "description": "Meet customers and close deals every week.",
            "tags": " sales, field ,, two-wheeler ",
        })
        assert errors == {}
        assert record.tag_list() == ["sales", "field", "two-wheeler"]

    def test_salary_must_be_numeric(self):
        _, errors = validate(JobPosting, {"salaryMin": "lots"})
        assert "salaryMin" in errors
        assert errors["title"] == ["Field required"]


class TestMembershipRules:
    def test_phone_bounds(self):
        _, errors = validate(MembershipApplication, {
            "name": "Lata",
            "email": "lata@gmail.com",
            "phone": "98765432101234",
            "district": "Thane",
            "state": "Maharashtra",
            "utr": "UTR1234567890",
        })
        assert errors == {"phone": ["Phone number is too long."]}


class TestNonFiniteNumbers:
    def test_nan_amount(self):
        _, errors = validate(EarningsSubmission, {
            "employeeId": "e",
            "employeeName": "n",
            "earnings": [{"description": "Bonus", "amount": "nan"}],
        })
        assert list(errors) == ["earnings.0.amount"]

    def test_infinite_reading(self):
        _, errors = validate(DsrSubmission, _dsr(hasTravelled=True, openingKm="100", closingKm="Infinity"))
        assert list(errors) == ["closingKm"]

    def test_overflowing_salary(self):
        _, errors = validate(JobPosting, {"salaryMin": "1e400"})
        assert "salaryMin" in errors
