"""Business services.

Services own business rules and transactions. Data access goes through
the repositories package.
"""
