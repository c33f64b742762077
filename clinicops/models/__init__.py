from clinicops.models.clinic import Clinic, ClinicProfessional
from clinicops.models.user import ProfessionalPublic, User, Weekday
from clinicops.models.patient import Patient, PatientPublic
from clinicops.models.catalog import AppointmentType, AppointmentTypePublic, Procedure
from clinicops.models.treatment_plan import (
    TreatmentPlan,
    TreatmentPlanProcedure,
    TreatmentPlanProcedurePublic,
    TreatmentPlanPublic,
)
from clinicops.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
    AppointmentUpdate,
)

__all__ = [
    "Clinic",
    "ClinicProfessional",
    "User",
    "ProfessionalPublic",
    "Weekday",
    "Patient",
    "PatientPublic",
    "AppointmentType",
    "AppointmentTypePublic",
    "Procedure",
    "TreatmentPlan",
    "TreatmentPlanProcedure",
    "TreatmentPlanProcedurePublic",
    "TreatmentPlanPublic",
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "AppointmentStatus",
    "AppointmentUpdate",
]
