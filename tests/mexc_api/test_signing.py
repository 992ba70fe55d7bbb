"""
MEXC API Signing Tests.

============================================================
PURPOSE
============================================================
Known-vector tests for the three signing schemes.

TEST VECTORS:
- RFC 4231 test case 2 for HMAC-SHA256
- RFC 1321 test suite for MD5 (session partial hash)

============================================================
"""

import logging

import pytest

from mexc_api import (
    AuthError,
    AuthErrorReason,
    Credentials,
    FuturesHeaderSigner,
    FuturesSessionSigner,
    SignerKind,
    SpotSigner,
)
from mexc_api.signing import (
    SESSION_ORIGIN,
    SESSION_REFERER,
    SESSION_USER_AGENT,
    build_query,
    hmac_sha256_hex,
    md5_hex,
    public_request,
)


# RFC 4231, test case 2
RFC4231_KEY = "Jefe"
RFC4231_DATA = "what do ya want for nothing?"
RFC4231_HMAC = "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"

# RFC 1321, last test suite entry
RFC1321_DATA = "1234567890" * 8
RFC1321_MD5 = "57edf4a22be3c955ac49da2e2107b67a"


# HMAC-SHA256 with secret "secret" over "timestamp=1717363075282"
SPOT_TIMESTAMP_SIGNATURE = "e9a70bea41ddd1e240d988767f65c989f265375a824179e41f7ce7be38cbe72c"

# HMAC-SHA256 with secret "secret" over "mx0key" + "1717363075282" (+ params)
V1_SIGNATURE = "80f69a20808a7695e317d4198ee24510ba08bc7c72b71b79567b476d6eb60b5b"
V1_SIGNATURE_WITH_SYMBOL = "7acbb669798aa7ed79a745058022b07f60b3f9cf72bf4cf4ad5396d8e8f76a33"


# ============================================================
# PRIMITIVE TESTS
# ============================================================

class TestPrimitives:
    """Tests for hashing helpers and query building."""

    def test_hmac_rfc4231(self):
        """Test HMAC-SHA256 against RFC 4231 case 2."""
        assert hmac_sha256_hex(RFC4231_KEY, RFC4231_DATA) == RFC4231_HMAC

    def test_md5_rfc1321(self):
        """Test MD5 against RFC 1321 vectors."""
        assert md5_hex("") == "d41d8cd98f00b204e9800998ecf8427e"
        assert md5_hex("abc") == "900150983cd24fb0d6963f7d28e17f72"
        assert md5_hex(RFC1321_DATA) == RFC1321_MD5

    def test_build_query_keeps_order(self):
        """Test pairs are joined in the given order, verbatim."""
        query = build_query([("symbol", "BTCUSDT"), ("side", "BUY"), ("timestamp", 1)])

        assert query == "symbol=BTCUSDT&side=BUY&timestamp=1"

    def test_build_query_skips_none(self):
        assert build_query([("symbol", "BTCUSDT"), ("limit", None)]) == "symbol=BTCUSDT"

    def test_public_request(self):
        request = public_request("GET", "https://api.mexc.com/api/v3/ping")

        assert request.kind == SignerKind.PUBLIC
        assert request.headers == {}
        assert request.body is None


# ============================================================
# SPOT SIGNER TESTS
# ============================================================

class TestSpotSigner:
    """Tests for query-string signing."""

    def test_sign_matches_vector(self):
        """Test signature is HMAC-SHA256 of the exact query."""
        signer = SpotSigner(Credentials(api_key="key", api_secret=RFC4231_KEY))

        signed = signer.sign(RFC4231_DATA)

        assert signed == f"{RFC4231_DATA}&signature={RFC4231_HMAC}"

    def test_sign_is_deterministic(self):
        signer = SpotSigner(Credentials(api_key="key", api_secret="secret"))
        query = "symbol=BTCUSDT&recvWindow=5000&timestamp=1717363075282"

        assert signer.sign(query) == signer.sign(query)

    def test_missing_secret(self):
        """Test signing without a secret fails before any I/O."""
        signer = SpotSigner(Credentials(api_key="key"))

        with pytest.raises(AuthError) as exc_info:
            signer.sign("timestamp=1")

        assert exc_info.value.reason == AuthErrorReason.MISSING_SECRET

    def test_build_request(self):
        """Test URL and API key header."""
        signer = SpotSigner(Credentials(api_key="my-key", api_secret="secret"))
        query = "timestamp=1717363075282"

        request = signer.build("GET", "https://api.mexc.com", "/api/v3/account", query)

        assert request.kind == SignerKind.SPOT
        assert request.method == "GET"
        assert request.url == f"https://api.mexc.com/api/v3/account?{query}&signature={SPOT_TIMESTAMP_SIGNATURE}"
        assert request.headers == {"X-MEXC-APIKEY": "my-key"}
        assert request.body is None

    def test_build_missing_key(self):
        signer = SpotSigner(Credentials(api_secret="secret"))

        with pytest.raises(AuthError) as exc_info:
            signer.build("GET", "https://api.mexc.com", "/api/v3/account", "timestamp=1")

        assert exc_info.value.reason == AuthErrorReason.MISSING_KEY


# ============================================================
# FUTURES HEADER SIGNER TESTS
# ============================================================

class TestFuturesHeaderSigner:
    """Tests for v1 header signing."""

    def test_signature_without_params(self):
        """Test signed material is key + timestamp."""
        signer = FuturesHeaderSigner(Credentials(api_key="mx0key", api_secret="secret"))

        signature = signer.signature(1717363075282)

        assert signature == V1_SIGNATURE

    def test_signature_with_params(self):
        """Test signed material is key + timestamp + params."""
        signer = FuturesHeaderSigner(Credentials(api_key="mx0key", api_secret="secret"))

        signature = signer.signature(1717363075282, "symbol=BTC_USDT")

        assert signature == V1_SIGNATURE_WITH_SYMBOL

    def test_differs_from_spot(self):
        """Test the two HMAC schemes are not interchangeable."""
        credentials = Credentials(api_key="mx0key", api_secret="secret")
        query = "timestamp=1717363075282"

        spot_sig = SpotSigner(credentials).sign(query).split("signature=")[1]
        futures_sig = FuturesHeaderSigner(credentials).signature(1717363075282, query)

        assert spot_sig != futures_sig

    def test_headers(self):
        signer = FuturesHeaderSigner(Credentials(api_key="mx0key", api_secret="secret"))

        headers = signer.headers(1717363075282)

        assert headers == {
            "ApiKey": "mx0key",
            "Request-Time": "1717363075282",
            "Signature": V1_SIGNATURE,
            "Content-Type": "application/json",
        }

    def test_build_sorts_params(self):
        """Test params are sorted and reused as query and sign material."""
        signer = FuturesHeaderSigner(Credentials(api_key="k", api_secret="s"))

        request = signer.build(
            "GET",
            "https://contract.mexc.com",
            "/api/v1/private/position/open_positions",
            1000,
            {"symbol": "BTC_USDT", "positionType": 1},
        )

        assert request.kind == SignerKind.FUTURES_V1
        assert request.url.endswith("open_positions?positionType=1&symbol=BTC_USDT")
        assert request.headers["Signature"] == "124880762788b7f517041333222979b5f2289027b71308bad5236cba8666a2fe"

    def test_build_without_params(self):
        signer = FuturesHeaderSigner(Credentials(api_key="k", api_secret="s"))

        request = signer.build("GET", "https://contract.mexc.com", "/api/v1/private/account/assets", 1000)

        assert request.url == "https://contract.mexc.com/api/v1/private/account/assets"
        assert request.headers["Signature"] == "8eb9c898d1e93cefc3f6f40a74eaca79f798e01f565c3d90daf2ebd170470736"

    @pytest.mark.parametrize("credentials,reason", [
        (Credentials(api_secret="s"), AuthErrorReason.MISSING_KEY),
        (Credentials(api_key="k"), AuthErrorReason.MISSING_SECRET),
    ])
    def test_missing_credentials(self, credentials, reason):
        signer = FuturesHeaderSigner(credentials)

        with pytest.raises(AuthError) as exc_info:
            signer.headers(1000)

        assert exc_info.value.reason == reason


# ============================================================
# FUTURES SESSION SIGNER TESTS
# ============================================================

class TestFuturesSessionSigner:
    """Tests for the two-stage MD5 web session scheme."""

    # token + timestamp concatenate to the RFC 1321 input
    TOKEN = RFC1321_DATA[:13]
    TIMESTAMP = int(RFC1321_DATA[13:])

    def test_partial_hash_offset(self):
        """Test partial hash is the MD5 digest from offset 7."""
        signer = FuturesSessionSigner(Credentials(web_token=self.TOKEN))

        partial = signer.partial_hash(self.TIMESTAMP)

        assert partial == RFC1321_MD5[7:]
        assert partial == "22be3c955ac49da2e2107b67a"

    def test_serialize_compact(self):
        """Test body is compact JSON with the price as a string."""
        body = FuturesSessionSigner.serialize({"symbol": "BTC_USDT", "price": "65000.5", "vol": 1})

        assert body == '{"symbol":"BTC_USDT","price":"65000.5","vol":1}'

    def test_signature(self):
        """Test final signature is md5(timestamp + body + partial)."""
        signer = FuturesSessionSigner(Credentials(web_token=self.TOKEN))
        body = '{"symbol":"BTC_USDT","side":1}'

        signature = signer.signature(self.TIMESTAMP, body)

        assert signature == "20e3443f68b9c4583368911864ad6253"

    def test_build_request(self):
        """Test body, headers and URL of the order request."""
        signer = FuturesSessionSigner(Credentials(web_token="WEB-token"))
        payload = {"symbol": "BTC_USDT", "side": 1, "price": "65000.5"}

        request = signer.build("https://futures.mexc.com", "/api/v1/private/order/create", payload, 1717363075282)

        body = '{"symbol":"BTC_USDT","side":1,"price":"65000.5"}'
        assert request.kind == SignerKind.FUTURES_SESSION
        assert request.method == "POST"
        assert request.url == "https://futures.mexc.com/api/v1/private/order/create"
        assert request.body == body
        assert request.headers == {
            "x-mxc-nonce": "1717363075282",
            "x-mxc-sign": "80f113ea0089071f45a71caf7cd33758",
            "authorization": "WEB-token",
            "user-agent": SESSION_USER_AGENT,
            "content-type": "application/json",
            "origin": SESSION_ORIGIN,
            "referer": SESSION_REFERER,
        }

    def test_missing_token(self):
        signer = FuturesSessionSigner(Credentials(api_key="k", api_secret="s"))

        with pytest.raises(AuthError) as exc_info:
            signer.build("https://futures.mexc.com", "/api/v1/private/order/create", {}, 1)

        assert exc_info.value.reason == AuthErrorReason.MISSING_SESSION_TOKEN

    def test_fragility_warning_once(self, caplog):
        """Test the fragile-endpoint warning is logged once per signer."""
        signer = FuturesSessionSigner(Credentials(web_token="t"))

        with caplog.at_level(logging.WARNING, logger="mexc_api.signing"):
            signer.build("https://futures.mexc.com", "/x", {"a": 1}, 1)
            signer.build("https://futures.mexc.com", "/x", {"a": 1}, 2)

        warnings = [r for r in caplog.records if "web session" in r.getMessage()]
        assert len(warnings) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
