"""Tests for the logging configuration."""

import json
import logging
import warnings

from django.conf import settings
from django.utils.module_loading import import_string


def test_json_formatter_renders_records_without_warnings():
    config = settings.LOGGING["formatters"]["json"]
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        formatter_class = import_string(config["()"])
        formatter = formatter_class(config["format"])

    record = logging.LogRecord("sanatoni.store", logging.INFO, __file__, 1, "Order %s placed", ("SM-1",), None)
    payload = json.loads(formatter.format(record))
    assert payload["message"] == "Order SM-1 placed"
    assert payload["levelname"] == "INFO"
    assert payload["name"] == "sanatoni.store"
