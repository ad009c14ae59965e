"""
Trace sampling policy tests.
"""

from __future__ import annotations

import pytest

from servicelog.config import ErrorTrackingOptions
from servicelog.sampling import SamplingRules, make_traces_sampler, resolve_sample_rate


@pytest.fixture
def rules() -> SamplingRules:
    return SamplingRules(
        ignore_urls=("/metrics",),
        custom_urls=("/api/answers",),
        traces_sample_rate=0.5,
        custom_urls_sample_rate=0.05,
    )


class TestResolveSampleRate:
    def test_health_check_always_ignored(self, rules):
        assert resolve_sample_rate("/health", "GET", rules) == 0
        assert resolve_sample_rate("/health", "GET", SamplingRules()) == 0

    def test_health_check_ignored_even_when_custom(self):
        custom = SamplingRules(custom_urls=("/health",), custom_urls_sample_rate=1.0)
        assert resolve_sample_rate("/health", "GET", custom) == 0

    @pytest.mark.parametrize("method", ["OPTIONS", "options"])
    def test_preflight_never_traced(self, rules, method):
        assert resolve_sample_rate("/api/answers", method, rules) == 0

    def test_configured_ignore_pattern(self, rules):
        assert resolve_sample_rate("/internal/metrics/scrape", "GET", rules) == 0

    def test_custom_pattern_uses_custom_rate(self, rules):
        assert resolve_sample_rate("/v2/api/answers?page=2", "POST", rules) == 0.05

    def test_default_rate_otherwise(self, rules):
        assert resolve_sample_rate("/api/questions", "GET", rules) == 0.5

    def test_matching_is_substring_not_prefix(self, rules):
        assert resolve_sample_rate("/proxy/health/deep", "GET", rules) == 0

    def test_missing_url_and_method(self, rules):
        assert resolve_sample_rate(None, None, rules) == 0.5

    def test_empty_patterns_are_ignored(self):
        rules = SamplingRules(custom_urls=("",), custom_urls_sample_rate=1.0, traces_sample_rate=0.2)
        assert resolve_sample_rate("/anything", "GET", rules) == 0.2


class TestTracesSampler:
    def test_asgi_scope(self, rules):
        sampler = make_traces_sampler(rules)
        ctx = {"asgi_scope": {"path": "/api/answers", "query_string": b"q=1", "method": "GET"}}
        assert sampler(ctx) == 0.05

    def test_asgi_preflight(self, rules):
        sampler = make_traces_sampler(rules)
        assert sampler({"asgi_scope": {"path": "/api/questions", "method": "OPTIONS"}}) == 0

    def test_wsgi_environ(self, rules):
        sampler = make_traces_sampler(rules)
        ctx = {"wsgi_environ": {"PATH_INFO": "/health", "REQUEST_METHOD": "GET"}}
        assert sampler(ctx) == 0

    def test_query_string_is_matched(self, rules):
        sampler = make_traces_sampler(rules)
        ctx = {"asgi_scope": {"path": "/search", "query_string": b"next=/api/answers", "method": "GET"}}
        assert sampler(ctx) == 0.05

    def test_non_request_context_uses_default(self, rules):
        assert make_traces_sampler(rules)({"transaction_context": {"op": "task"}}) == 0.5


def test_options_to_rules():
    options = ErrorTrackingOptions(ignore_urls=["/ping"], custom_urls=["/slow"], custom_urls_sample_rate=0.2)
    rules = options.to_rules(0.3)
    assert rules.effective_ignore_urls == ("/health", "/ping")
    assert rules.custom_urls == ("/slow",)
    assert rules.traces_sample_rate == 0.3
    assert rules.custom_urls_sample_rate == 0.2
