"""Unit tests for origin policy evaluation."""

import asyncio
import logging
import re

import pytest

from src.boundary.cors.evaluator import (
    OriginDecision,
    evaluate_origin,
    evaluate_request,
)
from src.boundary.cors.policy import (
    AllowAllOrigins,
    CorsPolicy,
    DenyAllOrigins,
    ExactOrigin,
    OriginPattern,
    parse_origin_policy,
)
from tests.fixtures.events import make_event

ALL_POLICIES = [
    AllowAllOrigins(),
    DenyAllOrigins(),
    ExactOrigin("https://a.com"),
    OriginPattern(re.compile(r".*")),
    parse_origin_policy(["https://a.com", re.compile(r".*")]),
    parse_origin_policy(lambda origin: True),
]


class TestAbsentOrigin:
    """A request without Origin is never allowed."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("policy", ALL_POLICIES)
    @pytest.mark.parametrize("origin", [None, ""])
    async def test_never_allowed(self, policy, origin) -> None:
        decision = await evaluate_origin(origin, policy, credentials=True)
        assert decision == OriginDecision(allow=False, header_value=None)

    @pytest.mark.asyncio
    async def test_predicate_not_called(self) -> None:
        calls = []
        policy = parse_origin_policy(lambda origin: calls.append(origin) or True)

        await evaluate_origin(None, policy)

        assert calls == []


class TestAllowAll:
    @pytest.mark.asyncio
    async def test_wildcard_without_credentials(self) -> None:
        decision = await evaluate_origin("https://a.com", AllowAllOrigins())
        assert decision.allow is True
        assert decision.header_value == "*"

    @pytest.mark.asyncio
    async def test_reflects_origin_with_credentials(self) -> None:
        decision = await evaluate_origin(
            "https://a.com", AllowAllOrigins(), credentials=True
        )
        assert decision.allow is True
        assert decision.header_value == "https://a.com"

    @pytest.mark.asyncio
    async def test_exact_wildcard_string_behaves_as_allow_all(self) -> None:
        decision = await evaluate_origin("https://x.com", parse_origin_policy("*"))
        assert decision.header_value == "*"


class TestDeny:
    @pytest.mark.asyncio
    async def test_denies(self) -> None:
        decision = await evaluate_origin("https://a.com", DenyAllOrigins())
        assert decision == OriginDecision(allow=False, header_value=None)


class TestExactOrigin:
    @pytest.mark.asyncio
    async def test_match_reflects_origin(self) -> None:
        decision = await evaluate_origin("https://a.com", ExactOrigin("https://a.com"))
        assert decision == OriginDecision(allow=True, header_value="https://a.com")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "origin",
        ["https://a.com.evil.com", "http://a.com", "https://A.com", "https://a.com/"],
    )
    async def test_anything_else_rejected(self, origin) -> None:
        decision = await evaluate_origin(origin, ExactOrigin("https://a.com"))
        assert decision.allow is False
        assert decision.header_value is None


class TestOriginPattern:
    @pytest.mark.asyncio
    async def test_full_match_allowed(self) -> None:
        policy = OriginPattern(re.compile(r"https://[a-z]+\.a\.com"))
        decision = await evaluate_origin("https://api.a.com", policy)
        assert decision == OriginDecision(allow=True, header_value="https://api.a.com")

    @pytest.mark.asyncio
    async def test_unanchored_pattern_does_not_substring_match(self) -> None:
        policy = OriginPattern(re.compile(r"https://b\.com"))
        decision = await evaluate_origin("https://b.com.evil.com", policy)
        assert decision.allow is False


class TestOriginList:
    @pytest.fixture
    def policy(self):
        return parse_origin_policy(["https://a.com", re.compile(r"^https:\/\/b\.com$")])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("origin", ["https://a.com", "https://b.com"])
    async def test_members_allowed(self, policy, origin) -> None:
        decision = await evaluate_origin(origin, policy)
        assert decision == OriginDecision(allow=True, header_value=origin)

    @pytest.mark.asyncio
    async def test_suffix_attack_rejected(self, policy) -> None:
        decision = await evaluate_origin("https://b.com.evil.com", policy)
        assert decision.allow is False

    @pytest.mark.asyncio
    async def test_empty_list_denies(self) -> None:
        decision = await evaluate_origin("https://a.com", parse_origin_policy([]))
        assert decision.allow is False

    @pytest.mark.asyncio
    async def test_wildcard_entry_reflects_origin(self) -> None:
        policy = parse_origin_policy(["https://a.com", "*"])
        decision = await evaluate_origin("https://z.com", policy)
        assert decision == OriginDecision(allow=True, header_value="https://z.com")

    @pytest.mark.asyncio
    async def test_stops_at_first_match(self) -> None:
        seen = []

        class Recording(ExactOrigin):
            async def matches(self, origin: str) -> bool:
                seen.append(self.value)
                return await super().matches(origin)

        policy = parse_origin_policy(
            [Recording("https://a.com"), Recording("https://b.com")]
        )
        await evaluate_origin("https://a.com", policy)

        assert seen == ["https://a.com"]


class TestOriginPredicate:
    @pytest.mark.asyncio
    async def test_sync_predicate(self) -> None:
        policy = parse_origin_policy(lambda origin: origin.endswith(".internal"))

        allowed = await evaluate_origin("https://svc.internal", policy)
        rejected = await evaluate_origin("https://svc.example", policy)

        assert allowed == OriginDecision(allow=True, header_value="https://svc.internal")
        assert rejected.allow is False

    @pytest.mark.asyncio
    async def test_async_predicate_is_awaited(self) -> None:
        async def lookup(origin: str) -> bool:
            await asyncio.sleep(0)
            return origin == "https://partner.com"

        policy = parse_origin_policy(lookup)
        decision = await evaluate_origin("https://partner.com", policy)

        assert decision == OriginDecision(allow=True, header_value="https://partner.com")

    @pytest.mark.asyncio
    async def test_predicate_errors_propagate(self) -> None:
        async def lookup(origin: str) -> bool:
            raise ConnectionError("allow-list unavailable")

        with pytest.raises(ConnectionError):
            await evaluate_origin("https://partner.com", parse_origin_policy(lookup))

    @pytest.mark.asyncio
    async def test_predicate_error_logged_by_type_only(self, caplog) -> None:
        def lookup(origin: str) -> bool:
            raise RuntimeError(f"lookup failed for {origin}")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError):
                await evaluate_origin("https://partner.com", parse_origin_policy(lookup))

        records = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(records) == 1
        assert records[0].error_type == "RuntimeError"
        assert records[0].policy == "OriginPredicate"
        assert "lookup failed" not in records[0].getMessage()

    @pytest.mark.asyncio
    async def test_truthy_result_coerced(self) -> None:
        policy = parse_origin_policy(lambda origin: 1)
        decision = await evaluate_origin("https://a.com", policy)
        assert decision.allow is True


class TestEvaluateRequest:
    @pytest.mark.asyncio
    async def test_reads_origin_header(self) -> None:
        policy = CorsPolicy(origin="https://a.com")
        event = make_event(method="GET", headers={"Origin": "https://a.com"})

        decision = await evaluate_request(event, policy)

        assert decision.header_value == "https://a.com"

    @pytest.mark.asyncio
    async def test_applies_policy_credentials(self) -> None:
        policy = CorsPolicy(origin=True, credentials=True)
        event = make_event(method="GET", headers={"Origin": "https://a.com"})

        decision = await evaluate_request(event, policy)

        assert decision.header_value == "https://a.com"

    @pytest.mark.asyncio
    async def test_missing_origin_header(self) -> None:
        decision = await evaluate_request(make_event(method="GET"), CorsPolicy())
        assert decision.allow is False
