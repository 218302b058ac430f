"""Clinic patient and doctor registry.

This package contains the registry, its domain models and the text ingestion
format, isolated from any presentation layer for easy testing and reasoning.
"""
