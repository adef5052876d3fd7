"""Tests for App Proxy signature verification."""

import base64
import hashlib
import hmac

from quote_proxy.services.app_proxy import (
    apps_prefixed,
    legacy_message,
    request_target,
    safe_equal,
    sign_params,
    sign_path,
    verify,
)

SECRET = "hush"


def _b64(secret: str, message: str) -> str:
    digest = hmac.new(secret.encode(), message.encode(), hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


class TestHeaderSignature:
    """Base64 signature carried in a request header."""

    def test_direct_path_signature_accepted(self):
        target = "/devis?customer_id=123"
        headers = {"X-Shopify-Proxy-Signature": _b64(SECRET, target)}

        assert verify(headers, target, {"customer_id": "123"}, SECRET)

    def test_apps_prefixed_signature_accepted(self):
        target = "/devis?customer_id=123"
        headers = {"X-Shopify-Proxy-Signature": _b64(SECRET, "/apps/devis?customer_id=123")}

        assert verify(headers, target, {"customer_id": "123"}, SECRET)

    def test_alternate_header_name_accepted(self):
        target = "/devis?customer_id=123"
        headers = {"X-Shopify-Hmac-Sha256": _b64(SECRET, target)}

        assert verify(headers, target, {"customer_id": "123"}, SECRET)

    def test_header_lookup_is_case_insensitive(self):
        target = "/devis"
        headers = {"x-shopify-proxy-signature": _b64(SECRET, target)}

        assert verify(headers, target, {}, SECRET)

    def test_tampered_signature_rejected(self):
        target = "/devis?customer_id=123"
        good = _b64(SECRET, target)
        tampered = ("A" if good[0] != "A" else "B") + good[1:]

        assert not verify({"X-Shopify-Proxy-Signature": tampered}, target, {}, SECRET)

    def test_signature_for_other_path_rejected(self):
        headers = {"X-Shopify-Proxy-Signature": _b64(SECRET, "/devis?customer_id=124")}

        assert not verify(headers, "/devis?customer_id=123", {"customer_id": "123"}, SECRET)

    def test_wrong_prefix_variant_rejected(self):
        """Only the bare target and the /apps mount are accepted."""
        headers = {"X-Shopify-Proxy-Signature": _b64(SECRET, "/tools/devis?customer_id=123")}

        assert not verify(headers, "/devis?customer_id=123", {}, SECRET)

    def test_signature_with_other_secret_rejected(self):
        target = "/devis"
        headers = {"X-Shopify-Proxy-Signature": _b64("other", target)}

        assert not verify(headers, target, {}, SECRET)

    def test_non_ascii_header_value_rejected_without_error(self):
        headers = {"X-Shopify-Proxy-Signature": "sïgnätüre"}

        assert not verify(headers, "/devis", {}, SECRET)


class TestLegacySignature:
    """Hex signature over the sorted query parameters."""

    def test_sorted_concatenation_matches(self):
        expected = hmac.new(SECRET.encode(), b"a=1b=2", hashlib.sha256).hexdigest()
        params = {"b": "2", "a": "1", "signature": expected}

        assert verify({}, "/devis?b=2&a=1&signature=" + expected, params, SECRET)

    def test_legacy_message_drops_signature_and_sorts(self):
        assert legacy_message([("b", "2"), ("signature", "x"), ("a", "1")]) == "a=1b=2"

    def test_repeated_keys_joined_with_comma(self):
        assert legacy_message([("ids", "1"), ("ids", "2"), ("a", "x")]) == "a=xids=1,2"

    def test_values_containing_equals_are_not_escaped(self):
        assert legacy_message([("a", "b=c")]) == "a=b=c"

    def test_tampered_param_rejected(self):
        signature = sign_params(SECRET, [("a", "1"), ("b", "2")])
        params = {"a": "1", "b": "3", "signature": signature}

        assert not verify({}, "/devis", params, SECRET)

    def test_accepts_iterable_of_pairs(self):
        pairs = [("shop", "test-shop.myshopify.com"), ("path_prefix", "/apps/devis")]
        pairs.append(("signature", sign_params(SECRET, pairs)))

        assert verify({}, "/devis", pairs, SECRET)

    def test_legacy_used_when_header_does_not_match(self):
        params = {"a": "1"}
        params["signature"] = sign_params(SECRET, params.items())
        headers = {"X-Shopify-Proxy-Signature": "bogus"}

        assert verify(headers, "/devis?a=1", params, SECRET)


class TestRejection:

    def test_empty_secret_rejects_even_valid_looking_signature(self):
        target = "/devis"
        headers = {"X-Shopify-Proxy-Signature": _b64("", target)}

        assert not verify(headers, target, {}, "")
        assert not verify(headers, target, {}, None)

    def test_no_signature_at_all_rejected(self):
        assert not verify({}, "/devis?customer_id=123", {"customer_id": "123"}, SECRET)

    def test_empty_header_value_ignored(self):
        assert not verify({"X-Shopify-Proxy-Signature": ""}, "/devis", {}, SECRET)


class TestHelpers:

    def test_sign_path_matches_reference(self):
        assert sign_path(SECRET, "/devis") == _b64(SECRET, "/devis")

    def test_apps_prefixed_inserts_single_separator(self):
        assert apps_prefixed("/devis?x=1") == "/apps/devis?x=1"
        assert apps_prefixed("devis?x=1") == "/apps/devis?x=1"

    def test_safe_equal(self):
        assert safe_equal("abc", "abc")
        assert not safe_equal("abc", "abcd")
        assert not safe_equal("abc", None)

    def test_request_target_keeps_raw_encoding(self):
        scope = {
            "path": "/devis",
            "raw_path": b"/devis",
            "query_string": b"customer_id=gid%3A%2F%2Fshopify%2FCustomer%2F42&after=",
        }

        assert request_target(scope) == (
            "/devis?customer_id=gid%3A%2F%2Fshopify%2FCustomer%2F42&after="
        )

    def test_request_target_without_query(self):
        assert request_target({"path": "/devis/5", "raw_path": b"/devis/5", "query_string": b""}) == "/devis/5"

    def test_request_target_ignores_query_in_raw_path(self):
        scope = {"path": "/devis", "raw_path": b"/devis?a=1", "query_string": b"a=1"}

        assert request_target(scope) == "/devis?a=1"

    def test_request_target_falls_back_to_path(self):
        assert request_target({"path": "/devis", "query_string": b"a=1"}) == "/devis?a=1"
