"""
Test Suite for the YNAB to Splitwise sync

Test Structure:
- fixtures/: Shared synthetic data and fake collaborators
- unit/: Unit tests mirroring the src/ package structure
- integration/: Configuration and CLI workflow tests

Test Data:
All test data is synthetic. Unit tests never touch the network; cache and
orchestrator tests never touch the filesystem.
"""
