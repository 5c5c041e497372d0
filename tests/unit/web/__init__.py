"""Route tests for the CottonTrace web API.

Each route module has a corresponding test file. Tests run against the full
application built by ``create_app`` around an isolated, seeded context.
"""
