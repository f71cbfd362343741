import pytest
import structlog

from kv_records.log import configure_logging


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="unknown log level: LOUD"):
        configure_logging("loud")


def test_level_filters_lower_events(capsys: pytest.CaptureFixture[str]) -> None:
    try:
        configure_logging("error")
        logger = structlog.get_logger("kv_records.test")
        logger.warning("kv.get", key="quiet")
        logger.error("kv.get", key="loud")

        err = capsys.readouterr().err
        assert "key=loud" in err
        assert "quiet" not in err
    finally:
        configure_logging("WARNING")
