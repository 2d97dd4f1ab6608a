from datetime import datetime, timezone

import pytest

from cachedemo import DataStore


@pytest.fixture()
def frozen_data() -> DataStore:
    """Snapshot of a freshly started server at 2024-01-01 00:00:00 UTC."""
    return DataStore(counter=0, last_updated=datetime(2024, 1, 1, tzinfo=timezone.utc), version=1)
