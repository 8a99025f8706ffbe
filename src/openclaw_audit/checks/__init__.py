"""Detector categories. Each exposes one ``check_*`` callable."""
