"""
Test Fixtures and Utilities

Synthetic YNAB data and in-memory fakes for the source and destination APIs.
All test data is synthetic and does not contain real financial information.
"""
