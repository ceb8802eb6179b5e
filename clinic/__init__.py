"""Clinic application for the PsiCare backend.

Holds the psychologist, patient and session record models together with
the serializers, services, views and routes of the JSON API.
"""
