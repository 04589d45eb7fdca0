import pytest
from repo2clip.utils.encodings import EncodingDetector


class TestEncodingDetector:
    @pytest.fixture
    def detector(self):
        return EncodingDetector()

    def test_empty_content_is_not_binary(self, detector):
        assert detector.is_likely_binary(b"") is False

    def test_null_byte_is_binary(self, detector):
        assert detector.is_likely_binary(b"hello\x00world") is True

    def test_plain_text_is_not_binary(self, detector):
        assert detector.is_likely_binary(b"def main():\n\treturn 1\r\n") is False

    def test_control_character_ratio(self, detector):
        # 4 of 10 bytes are control characters
        assert detector.is_likely_binary(b"\x01\x02\x03\x04abcdef") is True
        # 2 of 10
        assert detector.is_likely_binary(b"\x01\x02abcdefgh") is False

    def test_only_leading_sample_is_inspected(self, detector):
        content = b"a" * 1024 + b"\x00"
        assert detector.is_likely_binary(content) is False

    def test_has_bom(self, detector):
        assert detector.has_bom(b"\xef\xbb\xbfhello") == (True, "utf-8-sig")
        assert detector.has_bom(b"hello") == (False, None)

    def test_utf16_text_is_binary(self, detector):
        content = "hello".encode("utf-16")

        assert detector.is_likely_binary(content) is True
        assert detector.has_bom(content) == (False, None)

    def test_decode_utf8(self, detector):
        text, encoding, error = detector.decode_bytes("héllo".encode("utf-8"), "a.txt")
        assert text == "héllo"
        assert encoding == "utf-8"
        assert error is None

    def test_decode_invalid_utf8(self, detector):
        text, encoding, error = detector.decode_bytes(b"abc\xc3\x28", "a.txt")
        assert text is None
        assert encoding is None
        assert error == "not valid utf-8 (failed at byte 3)"

    def test_decode_with_fallback_encoding(self):
        detector = EncodingDetector(["utf-8", "latin-1"])
        text, encoding, error = detector.decode_bytes(b"caf\xe9")
        assert text == "café"
        assert encoding == "latin-1"

    def test_normalize_text(self, detector):
        assert detector.normalize_text("\ufeffline1\r\nline2\r\n") == "line1\nline2\n"

    def test_normalize_is_idempotent(self, detector):
        once = detector.normalize_text("\ufeffa\r\nb\rc")
        assert detector.normalize_text(once) == once
