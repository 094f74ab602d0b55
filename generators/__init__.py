"""Sample data generators for the Dose Scheduler."""

from .sample_data import SampleMedicationFactory

__all__ = ["SampleMedicationFactory"]
