"""Concrete storage and lookup adapters (see ``factcheck_feedback.interfaces``)."""
