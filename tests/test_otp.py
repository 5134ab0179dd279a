import hashlib
import unittest

import opertotp
from opertotp import base32
from opertotp.hashes import HashProvider, ProviderReference

RFC_SECRET = base32.encode(b"12345678901234567890")
RFC_SECRET_256 = base32.encode(b"12345678901234567890123456789012")
RFC_SECRET_512 = base32.encode(b"1234567890" * 6 + b"1234")


class FixedDigest(HashProvider):
    name = "fixed"
    out_size = 20

    def __init__(self, digest):
        self.digest = digest
        self.calls = []

    def hmac(self, key, message):
        self.calls.append((key, message))
        return self.digest


class HOTPTest(unittest.TestCase):
    def test_rfc4226_vectors(self):
        hotp = opertotp.HOTP(RFC_SECRET)
        codes = ["755224", "287082", "359152", "969429", "338314", "254676", "287922", "162583", "399871", "520489"]
        for counter, code in enumerate(codes):
            self.assertEqual(hotp.at(counter), code)
            self.assertTrue(hotp.verify(code, counter))
        self.assertFalse(hotp.verify("755224", 1))

    def test_initial_count(self):
        hotp = opertotp.HOTP(RFC_SECRET, initial_count=2)
        self.assertEqual(hotp.at(0), "359152")

    def test_counter_bytes_and_key(self):
        provider = FixedDigest(bytes(20))
        hotp = opertotp.HOTP("JBSWY3DP", digest=provider)
        hotp.at(0x0102030405060708)
        self.assertEqual(provider.calls, [(b"Hello", b"\x01\x02\x03\x04\x05\x06\x07\x08")])

    def test_counter_range(self):
        hotp = opertotp.HOTP(RFC_SECRET)
        with self.assertRaises(ValueError):
            hotp.at(-1)
        with self.assertRaises(ValueError):
            hotp.at(2**64)
        self.assertEqual(len(hotp.at(2**64 - 1)), 6)

    def test_zero_padding(self):
        hotp = opertotp.HOTP(RFC_SECRET, digest=FixedDigest(bytes([0, 0, 0, 42]) + bytes(16)))
        self.assertEqual(hotp.at(0), "000042")

    def test_top_bit_cleared(self):
        hotp = opertotp.HOTP(RFC_SECRET, digest=FixedDigest(bytes([0x80, 0, 0, 42]) + bytes(16)))
        self.assertEqual(hotp.at(0), "000042")

    def test_offset_from_last_byte(self):
        digest = bytearray(20)
        digest[10:14] = (1234567).to_bytes(4, "big")
        digest[19] = 0xFA
        hotp = opertotp.HOTP(RFC_SECRET, digest=FixedDigest(bytes(digest)))
        self.assertEqual(hotp.at(0), "234567")

    def test_digits(self):
        self.assertEqual(opertotp.HOTP(RFC_SECRET, digits=8).at(0), "84755224")
        with self.assertRaises(ValueError):
            opertotp.HOTP(RFC_SECRET, digits=11)

    def test_compatibility_digits_rejected(self):
        hotp = opertotp.HOTP(RFC_SECRET)
        self.assertFalse(hotp.verify("７５５２２４", 0))
        self.assertTrue(hotp.verify("755224", 0))

    def test_short_provider_digest(self):
        class ShortDigest(FixedDigest):
            out_size = 16

        hotp = opertotp.HOTP(RFC_SECRET, digest=ShortDigest(bytes(16)))
        with self.assertRaises(ValueError):
            hotp.at(0)

    def test_unavailable(self):
        hotp = opertotp.HOTP(RFC_SECRET, digest=None)
        self.assertIsNone(hotp.at(0))
        self.assertFalse(hotp.verify("755224", 0))

    def test_provisioning_uri(self):
        hotp = opertotp.HOTP("JBSWY3DPEHPK3PXP", name="alice@google.com")
        self.assertEqual(
            hotp.provisioning_uri(), "otpauth://hotp/alice%40google.com?secret=JBSWY3DPEHPK3PXP&counter=0"
        )


class TOTPTest(unittest.TestCase):
    def test_rfc6238_vectors(self):
        vectors = [
            (59, "287082", "119246", "693936"),
            (1111111109, "081804", "084774", "091201"),
            (1111111111, "050471", "062674", "943326"),
            (1234567890, "005924", "819424", "441116"),
            (2000000000, "279037", "698825", "618901"),
            (20000000000, "353130", "737706", "863826"),
        ]
        sha1 = opertotp.TOTP(RFC_SECRET, digest="sha1")
        sha256 = opertotp.TOTP(RFC_SECRET_256, digest="sha256")
        sha512 = opertotp.TOTP(RFC_SECRET_512, digest=hashlib.sha512)
        for t, code1, code256, code512 in vectors:
            self.assertEqual(sha1.at(t), code1)
            self.assertEqual(sha256.at(t), code256)
            self.assertEqual(sha512.at(t), code512)

    def test_rfc_counters(self):
        hotp = opertotp.HOTP(RFC_SECRET)
        self.assertEqual(hotp.at(37037036), "081804")
        self.assertEqual(hotp.at(37037037), "050471")

    def test_now_uses_clock(self):
        totp = opertotp.TOTP(RFC_SECRET, clock=lambda: 1111111109.9)
        self.assertEqual(totp.timecode(), 37037036)
        self.assertEqual(totp.now(), "081804")
        self.assertEqual(totp.remaining(), 1)

    def test_window_bounds(self):
        now = 1111111109
        totp = opertotp.TOTP(RFC_SECRET, window=1, clock=lambda: now)
        hotp = opertotp.HOTP(RFC_SECRET)
        current = now // 30
        self.assertTrue(totp.verify(hotp.at(current - 1)))
        self.assertTrue(totp.verify(hotp.at(current)))
        self.assertFalse(totp.verify(hotp.at(current - 2)))
        # the range stops before (now + 30) // 30, which here is current + 1
        self.assertEqual((now + 30) // 30, current + 1)
        self.assertFalse(totp.verify(hotp.at(current + 1)))

    def test_window_on_step_boundary(self):
        now = 1111111110
        totp = opertotp.TOTP(RFC_SECRET, clock=lambda: now)
        self.assertTrue(totp.verify("081804", window=1))
        self.assertTrue(totp.verify("050471", window=1))
        self.assertFalse(totp.verify(opertotp.HOTP(RFC_SECRET).at(37037038), window=1))

    def test_wider_window(self):
        totp = opertotp.TOTP(RFC_SECRET, clock=lambda: 1111111109)
        hotp = opertotp.HOTP(RFC_SECRET)
        for counter in range(37037036 - 5, 37037036 + 5):
            self.assertTrue(totp.verify(hotp.at(counter)), counter)
        self.assertFalse(totp.verify(hotp.at(37037036 + 5)))
        self.assertFalse(totp.verify(hotp.at(37037036 - 6)))

    def test_zero_window_accepts_nothing(self):
        totp = opertotp.TOTP(RFC_SECRET, window=0, clock=lambda: 1111111109)
        self.assertFalse(totp.verify("081804"))

    def test_window_near_epoch(self):
        totp = opertotp.TOTP(RFC_SECRET, clock=lambda: 10)
        self.assertTrue(totp.verify("755224"))
        self.assertTrue(totp.verify("287082"))

    def test_negative_window(self):
        with self.assertRaises(ValueError):
            opertotp.TOTP(RFC_SECRET, window=-1)
        with self.assertRaises(ValueError):
            opertotp.TOTP(RFC_SECRET).verify("755224", window=-1)

    def test_compatibility_digits_rejected(self):
        for constant_time in (True, False):
            totp = opertotp.TOTP(RFC_SECRET, window=1, clock=lambda: 1111111109, constant_time=constant_time)
            self.assertFalse(totp.verify("０８１８０４"))
            self.assertFalse(totp.verify("٠٨١٨٠٤"))
            self.assertTrue(totp.verify("081804"))

    def test_plain_comparison(self):
        totp = opertotp.TOTP(RFC_SECRET, window=1, clock=lambda: 1111111109, constant_time=False)
        self.assertTrue(totp.verify("081804"))
        self.assertFalse(totp.verify("081805"))

    def test_unavailable(self):
        totp = opertotp.TOTP(RFC_SECRET, digest=None, clock=lambda: 1111111109)
        self.assertIsNone(totp.now())
        for window in range(6):
            for code in ("081804", "000000", "", "junk"):
                self.assertFalse(totp.verify(code, window=window))

    def test_shared_reference_rebind(self):
        ref = ProviderReference()
        totp = opertotp.TOTP(RFC_SECRET, digest=ref, clock=lambda: 1111111109)
        self.assertIsNone(totp.now())
        ref.set_provider("sha1")
        self.assertEqual(totp.now(), "081804")
        self.assertTrue(totp.verify("081804"))
        ref.set_provider("no-such-hash")
        self.assertIsNone(totp.now())
        self.assertFalse(totp.verify("081804"))

    def test_provisioning_uri(self):
        totp = opertotp.TOTP("JBSWY3DPEHPK3PXP", name="alice@google.com", issuer="Example")
        self.assertEqual(
            totp.provisioning_uri(),
            "otpauth://totp/Example:alice%40google.com?secret=JBSWY3DPEHPK3PXP&issuer=Example",
        )
        totp = opertotp.TOTP("JBSWY3DPEHPK3PXP", digest="sha256")
        self.assertEqual(
            totp.provisioning_uri("oper"), "otpauth://totp/oper?secret=JBSWY3DPEHPK3PXP&algorithm=SHA256"
        )

    def test_provisioning_uri_non_defaults(self):
        totp = opertotp.TOTP("JBSWY3DPEHPK3PXP", digest="sha512", digits=8, interval=60, issuer="Irc Net")
        self.assertEqual(
            totp.provisioning_uri("oper"),
            "otpauth://totp/Irc%20Net:oper?secret=JBSWY3DPEHPK3PXP&issuer=Irc%20Net&algorithm=SHA512&digits=8&period=60",
        )
        self.assertEqual(
            opertotp.TOTP("JBSWY3DPEHPK3PXP", digest=None).provisioning_uri("oper"),
            "otpauth://totp/oper?secret=JBSWY3DPEHPK3PXP",
        )


class ModuleFunctionsTest(unittest.TestCase):
    def test_encode_decode(self):
        self.assertEqual(opertotp.encode_secret(b"Hello"), "JBSWY3DP")
        self.assertEqual(opertotp.decode_secret("JBSWY3DP"), b"Hello")

    def test_generate_code(self):
        self.assertEqual(opertotp.generate_code(RFC_SECRET, 0), "755224")
        self.assertEqual(opertotp.generate_code(RFC_SECRET, 37037037), "050471")
        self.assertIsNone(opertotp.generate_code(RFC_SECRET, 0, digest=None))

    def test_validate_code_exact_digits(self):
        clock = lambda: 1111111109  # noqa: E731
        self.assertFalse(opertotp.validate_code(RFC_SECRET, "０８１８０４", 1, clock=clock))

    def test_validate_code(self):
        clock = lambda: 1111111109  # noqa: E731
        self.assertTrue(opertotp.validate_code(RFC_SECRET, "081804", 1, clock=clock))
        self.assertFalse(opertotp.validate_code(RFC_SECRET, "050471", 1, clock=clock))
        self.assertFalse(opertotp.validate_code(RFC_SECRET, "081804", 1, digest=None, clock=clock))


if __name__ == "__main__":
    unittest.main()
