"""
Status Test Configuration
"""


def pytest_configure(config):
    """
    Configure pytest with custom markers for status tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
