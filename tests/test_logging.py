import json
import logging

from issuedesk.core.exceptions import IssueCodeConflictError
from issuedesk.core.logging_config import JSONFormatter


def make_record(msg, *args, **extra):
    record = logging.LogRecord("issuedesk.services.issue_codes", logging.WARNING, __file__, 10, msg, args, None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_renders_message_and_extras():
    line = JSONFormatter().format(make_record("Issue code %s already taken", "PRJ-062025-001", project_id=4))
    data = json.loads(line)

    assert data["level"] == "WARNING"
    assert data["logger"] == "issuedesk.services.issue_codes"
    assert data["message"] == "Issue code PRJ-062025-001 already taken"
    assert data["project_id"] == 4


def test_domain_error_serialises_for_the_response_body():
    error = IssueCodeConflictError("PRJ-062025-001", attempts=3)
    assert error.status_code == 409
    assert error.to_dict() == {
        "code": "ISSUE_CODE_CONFLICT",
        "message": "Issue code PRJ-062025-001 was taken by a concurrent request",
        "details": {"issue_code": "PRJ-062025-001", "attempts": 3},
    }
