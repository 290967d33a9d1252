import json
import logging

from warehouse.core.logging import JsonLogFormatter
from warehouse.middlewares import principal_ctx_var, request_id_ctx_var


def _record(**extra):
    record = logging.LogRecord("warehouse.test", logging.INFO, __file__, 1, "transaction.created", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_merges_context_and_extra_data():
    formatter = JsonLogFormatter(environment="test")
    request_token = request_id_ctx_var.set("req-1")
    principal_token = principal_ctx_var.set("user:admin")
    try:
        line = formatter.format(_record(extra_data={"quantity": 5}))
    finally:
        request_id_ctx_var.reset(request_token)
        principal_ctx_var.reset(principal_token)

    payload = json.loads(line)
    assert payload["event"] == "transaction.created"
    assert payload["env"] == "test"
    assert payload["request_id"] == "req-1"
    assert payload["principal"] == "user:admin"
    assert payload["quantity"] == 5
    assert payload["ts"].endswith("Z")


def test_formatter_omits_empty_context():
    payload = json.loads(JsonLogFormatter().format(_record()))
    assert "request_id" not in payload
    assert "principal" not in payload
