"""Tests for rate limit policies."""

import pytest
from pydantic import ValidationError

from storefront.core.modules.rate_limit.models import RateLimitPolicy, RateLimitResult
from storefront.core.modules.rate_limit.policies import (
    LOGIN_POLICY,
    REGISTRATION_POLICY,
    is_api_path,
    resolve_api_policy,
)


class TestAuthPolicies:
    def test_login_and_registration_limits(self):
        """Test five attempts per fifteen minutes for both flows."""
        for policy in (LOGIN_POLICY, REGISTRATION_POLICY):
            assert policy.max_attempts == 5
            assert policy.window_ms == 15 * 60 * 1000


class TestResolveApiPolicy:
    @pytest.mark.parametrize(
        ("path", "limit"),
        [
            ("/api/checkout", 10),
            ("/api/search/suggestions", 30),
            ("/api/products/123", 60),
            ("/api/categories/tree", 60),
            ("/api/auth/login", 10),
            ("/api/shipping/methods", 100),
            ("/api", 100),
        ],
    )
    def test_route_limits(self, path, limit):
        policy = resolve_api_policy(path)
        assert policy.max_attempts == limit
        assert policy.window_ms == 60 * 1000

    def test_prefix_must_match_whole_segment(self):
        """Test that /api/searchable does not get the search limit."""
        assert resolve_api_policy("/api/searchable").max_attempts == 100


class TestIsApiPath:
    def test_api_paths(self):
        assert is_api_path("/api")
        assert is_api_path("/api/auth/me")

    def test_other_paths(self):
        assert not is_api_path("/health")
        assert not is_api_path("/apiary")


class TestModels:
    def test_policy_rejects_non_positive_values(self):
        with pytest.raises(ValidationError):
            RateLimitPolicy(max_attempts=0, window_ms=1000)
        with pytest.raises(ValidationError):
            RateLimitPolicy(max_attempts=5, window_ms=0)

    def test_reset_in_minutes_rounds_up(self):
        assert RateLimitResult(success=False, remaining=0, reset_in=900).reset_in_minutes == 15
        assert RateLimitResult(success=False, remaining=0, reset_in=61).reset_in_minutes == 2
        assert RateLimitResult(success=False, remaining=0, reset_in=0).reset_in_minutes == 1
