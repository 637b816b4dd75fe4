"""Error payloads and settings parsing."""
import os
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import logging

import pytest
from recruitflow.platform.config import Settings
from recruitflow.platform.errors import (
    AuthorizationError,
    ConflictError,
    NoNextRoundError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from recruitflow.platform.logging import JsonFormatter, setup_logging
from recruitflow.platform.request_context import get_request_id, reset_request_id, set_request_id


@pytest.mark.parametrize(
    "exc,status,code",
    [
        (ValidationError("bad"), 400, "VALIDATION_ERROR"),
        (NotFoundError("Score", 3), 404, "NOT_FOUND"),
        (AuthorizationError("nope"), 403, "FORBIDDEN"),
        (ConflictError("delete X first"), 400, "CONFLICT"),
        (NoNextRoundError(7), 400, "NO_NEXT_ROUND"),
        (StoreError(operation="submit_scores"), 500, "STORE_ERROR"),
    ],
)
def test_error_status_and_code(exc, status, code):
    assert exc.status_code == status
    assert exc.to_payload()["code"] == code


def test_not_found_payload_carries_resource():
    payload = NotFoundError("Applicant round", 12).to_payload()
    assert payload == {
        "error": "Applicant round not found",
        "code": "NOT_FOUND",
        "resource": "Applicant round",
        "id": 12,
    }


def test_store_error_hides_cause():
    payload = StoreError(operation="delete_round").to_payload()
    assert payload["error"] == "Database operation failed"
    assert payload["operation"] == "delete_round"


def test_vote_values_parsed():
    assert Settings(DELIBS_VOTE_VALUES=" -10, 0 ,10,").delibs_vote_values == [-10, 0, 10]


def test_default_vote_values():
    assert Settings().delibs_vote_values == [-10, -5, 0, 5, 10]


def test_invalid_score_mode_rejected():
    with pytest.raises(ValueError):
        Settings(WEIGHTED_SCORE_MODE="median")


def test_score_mode_normalized():
    assert Settings(WEIGHTED_SCORE_MODE="  LATEST_SUBMISSION ").WEIGHTED_SCORE_MODE == "latest_submission"


def test_json_formatter_includes_request_id():
    set_request_id("req-123")
    record = logging.LogRecord("recruitflow.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    output = JsonFormatter().format(record)
    assert '"request_id": "req-123"' in output
    assert '"message": "hello world"' in output


def test_cors_origins_include_frontend_and_extras():
    origins = Settings(
        FRONTEND_URL="https://recruit.example.org",
        CORS_EXTRA_ORIGINS=" https://admin.example.org, ,http://localhost:3000",
    ).cors_origins
    assert origins[0] == "https://recruit.example.org"
    assert origins.count("http://localhost:3000") == 1
    assert origins[-1] == "https://admin.example.org"


def test_request_id_reset():
    token = set_request_id("outer")
    inner = set_request_id("inner")
    reset_request_id(inner)
    assert get_request_id() == "outer"
    reset_request_id(token)


def test_setup_logging_configures_app_hierarchy():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        app_logger = setup_logging("debug")
        assert app_logger.name == "recruitflow"
        assert logging.getLogger("recruitflow.scoring").getEffectiveLevel() == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("recruitflow").setLevel(logging.NOTSET)
