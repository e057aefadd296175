from datetime import timezone

import pytest


@pytest.fixture()
def utc() -> timezone:
    return timezone.utc
