"""Care-facility resident report generator.

Links a residents export and an evaluations export by a canonical resident
name key and produces one merged record per resident.
"""
