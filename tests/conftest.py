import pytest

from enumscan import clear_cache, reset_enum_range


@pytest.fixture(autouse=True)
def fresh_discovery():
    """Registered windows and memoized results do not leak between tests."""
    yield
    reset_enum_range()
    clear_cache()
