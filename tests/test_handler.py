"""Tests for the Lambda entry point and runtime configuration."""
import logging
from unittest.mock import MagicMock

import pytest

from event_router.app.handler import configure_logging, create_handler
from event_router.runtime.deps import Deps, create_deps
from event_router.runtime.errors import BatchFailure
from event_router.runtime.router import RouterBuilder

from tests.conftest import RULE_ARN, SQS_ARN, make_sqs_event


class TestCreateHandler:

    def test_returns_summary(self, deps, eventbridge_event):
        builder = RouterBuilder()
        builder.schedule(RULE_ARN, MagicMock())
        lambda_handler = create_handler(builder.build(deps))

        result = lambda_handler(eventbridge_event, MagicMock(aws_request_id="req-1"))

        assert result["statusCode"] == 200
        assert result["source"] == "eventbridge"
        assert result["matched"] == 1

    def test_errors_propagate(self, deps):
        builder = RouterBuilder()
        builder.sqs(SQS_ARN, MagicMock(side_effect=RuntimeError("boom")))
        lambda_handler = create_handler(builder.build(deps))

        with pytest.raises(BatchFailure, match="1 of 1 failed"):
            lambda_handler(make_sqs_event(["a"]), None)

    def test_no_bindings(self, deps):
        lambda_handler = create_handler(RouterBuilder().build(deps))
        assert lambda_handler({}, None)["matched"] == 0


class TestConfiguration:

    def test_configure_logging_sets_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("warning")
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)

    def test_deps_from_environment(self, monkeypatch):
        monkeypatch.setenv("ROUTER_MAX_WORKERS", "4")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        deps = Deps()

        assert deps.max_workers == 4
        assert deps.log_level == "DEBUG"
        assert deps.config["ROUTER_MAX_WORKERS"] == 4

    def test_invalid_max_workers_falls_back(self, monkeypatch):
        monkeypatch.setenv("ROUTER_MAX_WORKERS", "many")
        assert Deps().max_workers == 10

    def test_create_deps_shares_compensator(self):
        factory = MagicMock()
        deps = create_deps(client_factory=factory)
        assert deps.compensator is deps.compensator

    def test_region_comes_from_queue_arn(self, monkeypatch, client_factory):
        monkeypatch.setenv("AWS_REGION", "eu-west-1")
        deps = create_deps(client_factory=client_factory)

        deps.compensator.compensate("arn:aws:sqs:ap-south-1:1234567890:orders", [{"Id": "1", "ReceiptHandle": "r"}])

        client_factory.assert_called_once_with("sqs", region_name="ap-south-1")
        assert "AWS_REGION" not in deps.config
