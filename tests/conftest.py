import pytest

from kv_records.log import configure_logging


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    configure_logging("WARNING")
