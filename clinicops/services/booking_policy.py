from clinicops.core.exceptions import SchedulingError
from clinicops.models.clinic import Clinic

SLOT_TAKEN = "slot already taken"
PARALLEL_LIMIT_REACHED = "parallel-slot limit reached"


def effective_limit(clinic: Clinic) -> int:
    """How many appointments may overlap, the new one included."""
    if not clinic.allow_parallel_appointments:
        return 1
    return max(clinic.parallel_appointments_limit, 1)


def evaluate(clinic: Clinic, overlap_count: int) -> str | None:
    """Return the rejection reason, or None when the interval is bookable."""
    if not clinic.allow_parallel_appointments:
        return SLOT_TAKEN if overlap_count > 0 else None
    if overlap_count >= effective_limit(clinic):
        return PARALLEL_LIMIT_REACHED
    return None


def ensure_bookable(clinic: Clinic, overlap_count: int) -> None:
    reason = evaluate(clinic, overlap_count)
    if reason is None:
        return
    if reason == SLOT_TAKEN:
        raise SchedulingError("Time slot already taken for this professional")
    raise SchedulingError(
        f"Parallel-slot limit reached: {overlap_count} of {effective_limit(clinic)} "
        "simultaneous appointments already booked"
    )
