"""ClinicSync - offline-first data synchronization for the clinic booking app."""

__version__ = "0.3.0"
