from __future__ import annotations

from datetime import date

import pytest

from hrsync.domain.canonicalization import Canonicalizer
from hrsync.domain.errors import ProtocolError
from hrsync.domain.reconciliation import (
    DecodeEmpty,
    DecodeFailure,
    DecodeFailureReason,
    DecodeSuccess,
    DecodeSuccessList,
    DetectionReport,
    NewRecordDetector,
    ValidationSkip,
    require_employee_list,
)
from tests.helpers.employees import (
    SAMPLE_CPF_DIGITS,
    SAMPLE_CPF_MASKED,
    FakeWorkflowStore,
    make_card,
    sinergy_record,
)

TODAY = date(2024, 6, 15)


def _detector() -> NewRecordDetector:
    return NewRecordDetector(Canonicalizer(), today=lambda: TODAY)


def test_require_employee_list_unwraps_records() -> None:
    records = (sinergy_record(), sinergy_record(func_num_cpf="52998224725"))

    assert require_employee_list(DecodeSuccessList(records)) == records
    assert require_employee_list(DecodeSuccessList(())) == ()
    assert require_employee_list(DecodeSuccess(records[0])) == (records[0],)


def test_require_employee_list_refuses_failures() -> None:
    failure = DecodeFailure(DecodeFailureReason.AUTH_REJECTED, "Login necessário", detail="x")

    with pytest.raises(ProtocolError) as exc:
        require_employee_list(failure)

    assert exc.value.reason == DecodeFailureReason.AUTH_REJECTED
    assert exc.value.detail == "x"


def test_require_employee_list_refuses_empty_results() -> None:
    with pytest.raises(ProtocolError) as exc:
        require_employee_list(DecodeEmpty("result node is missing"))

    assert exc.value.reason == "empty-result"


def test_require_employee_list_rejects_other_objects() -> None:
    with pytest.raises(TypeError, match="Unexpected decode outcome"):
        require_employee_list({"func_nom": "Maria Silva"})  # type: ignore[arg-type]


def test_existing_keys_normalizes_masks_and_drops_invalid() -> None:
    cards = [
        make_card("a", SAMPLE_CPF_MASKED),
        make_card("b", SAMPLE_CPF_DIGITS),
        make_card("c", "123"),
        make_card("d", None),
    ]

    assert _detector().existing_keys(cards) == {SAMPLE_CPF_DIGITS}


def test_detect_sorts_missing_employees_by_admission() -> None:
    employees = [
        sinergy_record(),
        sinergy_record(func_num_cpf="52998224725", func_dat_adm_banco="15/06/2024"),
        sinergy_record(func_num_cpf="11144477735", func_dat_adm_banco="2099-01-01"),
        sinergy_record(func_num_cpf="39053344705", func_dat_adm_banco=""),
        sinergy_record(func_num_cpf="12345678909", func_dat_adm_banco="31/02/2024"),
        sinergy_record(func_num_cpf="1234"),
    ]
    cards = [make_card("existing", SAMPLE_CPF_MASKED)]

    report = _detector().detect(employees, cards)

    assert [employee.identity for employee in report.eligible] == ["52998224725"]
    assert report.eligible[0].admission == TODAY
    assert report.eligible[0].skip is None
    assert [employee.identity for employee in report.ineligible_future] == ["11144477735"]
    assert [employee.identity for employee in report.ineligible_undated] == [
        "39053344705",
        "12345678909",
    ]
    assert report.already_present == 1
    assert report.invalid_identity == 1
    assert report.total_missing == 4
    assert {employee.skip for employee in report.ineligible_future} == {
        ValidationSkip.ADMISSION_IN_FUTURE
    }
    assert {employee.skip for employee in report.ineligible_undated} == {
        ValidationSkip.ADMISSION_UNDATED
    }


def test_admission_timestamps_are_compared_by_calendar_day() -> None:
    employee = sinergy_record(func_dat_adm_banco="2024-06-15T23:59:59")

    report = _detector().detect([employee], [])

    assert len(report.eligible) == 1


def test_duplicate_hr_records_keep_the_first() -> None:
    first = sinergy_record(func_nom="First")
    second = sinergy_record(func_nom="Second")

    report = _detector().detect([first, second], [])

    assert len(report.eligible) == 1
    assert report.eligible[0].canonical["full_name"] == "First"


def test_everyone_present_means_nothing_missing() -> None:
    report = _detector().detect([sinergy_record()], [make_card("a", SAMPLE_CPF_DIGITS)])

    assert report.total_missing == 0
    assert report.already_present == 1


def test_create_missing_sends_masked_identity_and_skips_blanks() -> None:
    report = _detector().detect([sinergy_record()], [])
    store = FakeWorkflowStore()

    summary = _detector().create_missing(report, store)

    assert summary.as_dict() == {"created": 1, "failed": 0, "totalEligible": 1, "totalMissing": 1}
    assert summary.created_card_ids == ("new-1",)
    [values] = store.created
    assert values["cpf"] == SAMPLE_CPF_MASKED
    assert values["data_de_admiss_o"] == "2023-12-01"
    assert values["nome_do_colaborador"] == "Maria Silva"
    assert "data_demiss_o" not in values


def test_create_missing_continues_after_a_failure() -> None:
    employees = [
        sinergy_record(func_num_cpf="52998224725"),
        sinergy_record(),
        sinergy_record(func_num_cpf="11144477735"),
    ]
    report = _detector().detect(employees, [])
    store = FakeWorkflowStore(fail_on=[SAMPLE_CPF_MASKED])

    summary = _detector().create_missing(report, store)

    assert summary.created == 2
    assert summary.failed == 1
    assert summary.total_eligible == 3
    assert [values["cpf"] for values in store.created] == ["529.982.247-25", "111.444.777-35"]


def test_create_missing_with_nothing_eligible() -> None:
    summary = _detector().create_missing(DetectionReport(), FakeWorkflowStore())

    assert summary.as_dict() == {"created": 0, "failed": 0, "totalEligible": 0, "totalMissing": 0}
