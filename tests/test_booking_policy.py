import pytest

from clinicops.core.exceptions import SchedulingError
from clinicops.models import Clinic
from clinicops.services.booking_policy import (
    PARALLEL_LIMIT_REACHED,
    SLOT_TAKEN,
    effective_limit,
    ensure_bookable,
    evaluate,
)


def test_serial_clinic_rejects_any_overlap():
    clinic = Clinic(name="Serial", allow_parallel_appointments=False, parallel_appointments_limit=5)
    assert effective_limit(clinic) == 1
    assert evaluate(clinic, 0) is None
    assert evaluate(clinic, 1) == SLOT_TAKEN


def test_parallel_limit_counts_the_new_booking():
    clinic = Clinic(name="Parallel", allow_parallel_appointments=True, parallel_appointments_limit=2)
    assert effective_limit(clinic) == 2
    assert evaluate(clinic, 0) is None
    assert evaluate(clinic, 1) is None
    assert evaluate(clinic, 2) == PARALLEL_LIMIT_REACHED
    assert evaluate(clinic, 3) == PARALLEL_LIMIT_REACHED


def test_ensure_bookable_raises_scheduling_error():
    serial = Clinic(name="Serial")
    with pytest.raises(SchedulingError, match="already taken"):
        ensure_bookable(serial, 1)

    parallel = Clinic(name="Parallel", allow_parallel_appointments=True, parallel_appointments_limit=3)
    ensure_bookable(parallel, 2)
    with pytest.raises(SchedulingError, match="Parallel-slot limit reached"):
        ensure_bookable(parallel, 3)
