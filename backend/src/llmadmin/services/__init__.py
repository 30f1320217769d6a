"""
Services package for the LLM admin backend.

This package contains the business logic for managing providers, models,
configurations and tasks, and for running completions against them.
"""
