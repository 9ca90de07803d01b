from __future__ import annotations

import pytest

from healthsync.domain.errors import MalformedKeyError
from healthsync.domain.keys import (
    EntityKey,
    KeyType,
    decode_key,
    encode_key,
    instance_health_key,
    instance_key,
    key_matches,
    load_balancer_key,
)


@pytest.mark.parametrize(
    "key",
    [
        EntityKey(
            type=KeyType.LOAD_BALANCERS,
            account="prod",
            region="us-east-1",
            name="frontend",
            sub_scope="vpc-1a2b",
            subtype="classic",
        ),
        EntityKey(type=KeyType.LOAD_BALANCERS, account="prod", region="us-east-1", name="legacy"),
        EntityKey(
            type=KeyType.LOAD_BALANCERS,
            account="prod",
            region="us-east-1",
            name="edge",
            subtype="application",
        ),
        EntityKey(type=KeyType.INSTANCES, account="prod", region="eu-west-1", name="i-0abc"),
        EntityKey(
            type=KeyType.INSTANCE_HEALTH,
            account="prod",
            region="eu-west-1",
            name="i-0abc",
            provider="aws-load-balancer-instance-health",
        ),
    ],
)
def test_decode_reverses_encode(key: EntityKey) -> None:
    assert decode_key(key.encode()) == key


def test_wire_format_is_exact() -> None:
    assert (
        load_balancer_key("frontend", "prod", "us-east-1", sub_scope="vpc-1", subtype="classic")
        == "loadBalancers:prod:us-east-1:vpc-1:classic:frontend"
    )
    legacy = load_balancer_key("legacy", "prod", "us-east-1")
    assert legacy == "loadBalancers:prod:us-east-1:-:legacy"
    assert instance_key("i-1", "test", "us-east-1") == "instances:test:us-east-1:i-1"
    assert (
        instance_health_key("i-1", "test", "us-east-1", "lb-health")
        == "instanceHealth:test:us-east-1:i-1:lb-health"
    )


def test_encode_key_accepts_type_literal() -> None:
    encoded = encode_key("instances", account="test", region="us-east-1", name="i-1")

    assert encoded == "instances:test:us-east-1:i-1"


def test_keys_written_before_subtype_existed_decode_as_absent() -> None:
    key = decode_key("loadBalancers:prod:us-east-1:vpc-1:frontend")

    assert key.name == "frontend"
    assert key.sub_scope == "vpc-1"
    assert key.subtype is None


def test_absent_marker_decodes_to_none() -> None:
    key = decode_key("loadBalancers:prod:us-east-1:-:classic:legacy")

    assert key.sub_scope is None
    assert key.subtype == "classic"


@pytest.mark.parametrize(
    "raw",
    [
        "loadBalancers:prod:us-east-1:vpc-1",
        "loadBalancers:prod:us-east-1:vpc-1:classic:frontend:extra",
        "instances:prod:us-east-1",
        "instances:prod:us-east-1:i-1:extra",
        "instanceHealth:prod:us-east-1:i-1",
        "securityGroups:prod:us-east-1:sg-1",
        "instances:prod::i-1",
        "instances:prod:us-east-1:-",
        "",
    ],
)
def test_decode_rejects_incompatible_keys(raw: str) -> None:
    with pytest.raises(MalformedKeyError):
        decode_key(raw)


def test_encode_rejects_delimiter_in_value() -> None:
    with pytest.raises(MalformedKeyError, match="contains"):
        instance_key("i:1", "test", "us-east-1")


def test_encode_rejects_missing_required_field() -> None:
    with pytest.raises(MalformedKeyError, match="Missing 'provider'"):
        encode_key(KeyType.INSTANCE_HEALTH, account="test", region="us-east-1", name="i-1")


def test_encode_rejects_field_foreign_to_type() -> None:
    with pytest.raises(MalformedKeyError, match="not part of"):
        encode_key(KeyType.INSTANCES, account="a", region="r", name="i-1", subtype="classic")


def test_wildcard_marks_key_as_pattern() -> None:
    pattern = decode_key("loadBalancers:test:us-east-1:*:*:*")
    concrete = decode_key("loadBalancers:test:us-east-1:vpc-1:lb1")

    assert pattern.is_pattern
    assert not concrete.is_pattern


def test_key_matches_compares_non_wildcard_segments_literally() -> None:
    pattern = "loadBalancers:test:us-east-1:*:*:*"

    assert key_matches(pattern, "loadBalancers:test:us-east-1:vpc-1:classic:lb1")
    assert key_matches(pattern, "loadBalancers:test:us-east-1:-:lb2")
    assert not key_matches(pattern, "loadBalancers:test:us-west-2:vpc-1:classic:lb1")
    assert not key_matches(pattern, "loadBalancers:other:us-east-1:vpc-1:lb1")
    assert not key_matches(pattern, "instances:test:us-east-1:i-1")


def test_key_matches_absent_scope_pattern() -> None:
    pattern = "loadBalancers:test:us-east-1:-:*:*"

    assert key_matches(pattern, "loadBalancers:test:us-east-1:-:lb2")
    assert key_matches(pattern, "loadBalancers:test:us-east-1:-:classic:lb3")
    assert not key_matches(pattern, "loadBalancers:test:us-east-1:vpc-1:lb1")


def test_key_matches_rejects_longer_keys_and_missing_literal_segments() -> None:
    assert not key_matches("instances:test:us-east-1:*", "instances:test:us-east-1:i-1:x")
    assert not key_matches("instances:test:us-east-1:i-1", "instances:test:us-east-1")


def test_resource_name_is_the_final_segment() -> None:
    scoped = load_balancer_key(
        "frontend", "prod", "us-east-1", sub_scope="vpc-1", subtype="classic"
    )
    typed_only = load_balancer_key("edge", "prod", "us-east-1", subtype="application")

    assert scoped.split(":")[-1] == "frontend"
    assert typed_only == "loadBalancers:prod:us-east-1:-:application:edge"


def test_wildcard_subtype_matches_keys_without_subtype() -> None:
    pattern = load_balancer_key("*", "test", "us-east-1", sub_scope="*", subtype="*")

    assert pattern == "loadBalancers:test:us-east-1:*:*:*"
    assert key_matches(pattern, "loadBalancers:test:us-east-1:vpc-1:lb1")
    assert key_matches(pattern, "loadBalancers:test:us-east-1:-:-:lb2")


def test_key_matches_skips_keys_that_do_not_decode() -> None:
    pattern = "loadBalancers:test:us-east-1:*:*:*"

    assert not key_matches(pattern, "loadBalancers:test:us-east-1:vpc-1")
    assert not key_matches(pattern, "loadBalancers:test:us-east-1")
