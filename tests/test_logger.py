import json
import logging
import uuid

from transcript_finder.logging_core.logger import JSONFormatter, get_logger, log_event, release_logger


def test_events_are_json_lines_with_run_id():
    run_id = uuid.uuid4()
    logger = get_logger(run_id)
    records = []

    class Capture(logging.Handler):
        def emit(self, record):
            records.append(self.format(record))

    capture = Capture()
    capture.setFormatter(JSONFormatter())
    logger.addHandler(capture)
    try:
        log_event(logger, logging.INFO, "Attempt recorded", stage_name="library", event_type="success", metadata={"language": "es"})
    finally:
        release_logger(run_id)

    line = json.loads(records[0])
    assert line["run_id"] == str(run_id)
    assert line["stage_name"] == "library"
    assert line["event_type"] == "success"
    assert line["metadata"] == {"language": "es"}
    assert line["timestamp"].endswith("Z")


def test_logger_is_per_run_and_released():
    run_id = uuid.uuid4()
    assert get_logger(run_id) is get_logger(run_id)

    logger = get_logger(run_id)
    release_logger(run_id)

    assert logger.handlers == []
    assert logger.filters == []
    release_logger(run_id)
