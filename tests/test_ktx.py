"""Tests for the KTX container decoder."""

import unittest

from TexDecode import decode_ktx
from TexDecode.core import (
    FormatCatalog, InvalidFieldCombinationError, MalformedHeaderError, PixelFormat,
    TruncatedDataError, UnrecognizedFormatError, UnsupportedEndiannessError,
    UnsupportedFeatureError,
)
from texture_builders import KTX_DATA_OFFSET, MinimalCatalog, make_ktx, payload

GL_UNSIGNED_BYTE = 0x1401
GL_RGBA8 = 0x8058


def _rgba(**overrides):
    kwargs = dict(
        internal_format=PixelFormat.RGBA, gl_type=GL_UNSIGNED_BYTE,
        gl_format=PixelFormat.RGBA, base_internal_format=PixelFormat.RGBA,
        image_len=8 * 8 * 4,
    )
    kwargs.update(overrides)
    return make_ktx(**kwargs)


class TestDecodeKTX(unittest.TestCase):
    def test_compressed_single_level(self):
        buf = make_ktx(PixelFormat.RGB_DXT1, width=8, height=8, image_len=32)
        tex = decode_ktx(buf)
        self.assertEqual(tex.internal_format, PixelFormat.RGB_DXT1)
        self.assertEqual((tex.width, tex.height), (8, 8))
        self.assertEqual(tex.tobytes(), payload(32))

    def test_view_length_is_image_size(self):
        buf = make_ktx(PixelFormat.RGB_DXT1, image_len=32, trailing=b"\xff" * 40)
        self.assertEqual(decode_ktx(buf).byte_length, 32)

    def test_compressed_mip_chain_truncates_to_level0(self):
        buf = make_ktx(PixelFormat.RGBA_DXT5, mip_levels=2, image_len=80)
        tex = decode_ktx(buf)
        self.assertEqual(tex.byte_length, 64)
        self.assertEqual(tex.tobytes(), payload(80)[:64])

    def test_pvrtc_mip_chain_uses_clamped_size(self):
        buf = make_ktx(PixelFormat.RGBA_PVRTC_4BPPV1, width=4, height=4,
                       mip_levels=3, image_len=48)
        self.assertEqual(decode_ktx(buf).byte_length, 32)

    def test_etc1_mip_chain(self):
        buf = make_ktx(PixelFormat.RGB_ETC1, width=16, height=8,
                       mip_levels=2, image_len=128)
        self.assertEqual(decode_ktx(buf).byte_length, 4 * 2 * 8)

    def test_key_value_data_is_skipped(self):
        buf = make_ktx(PixelFormat.RGB_DXT1, key_values=b"KTXorientation\x00S=r,T=d\x00\x00",
                       image_len=32)
        tex = decode_ktx(buf)
        self.assertEqual(tex.tobytes(), payload(32))

    def test_uncompressed_rgba(self):
        tex = decode_ktx(_rgba(mip_levels=4, trailing=bytes(64)))
        self.assertEqual(tex.internal_format, PixelFormat.RGBA)
        self.assertEqual(tex.byte_length, 256)

    def test_uncompressed_allows_zero_mip_levels(self):
        self.assertEqual(decode_ktx(_rgba(mip_levels=0)).byte_length, 256)

    def test_uncompressed_base_format_mismatch(self):
        with self.assertRaises(InvalidFieldCombinationError):
            decode_ktx(_rgba(base_internal_format=PixelFormat.RGB))

    def test_compressed_requires_zero_gl_type(self):
        with self.assertRaises(InvalidFieldCombinationError):
            decode_ktx(make_ktx(gl_type=GL_UNSIGNED_BYTE))

    def test_compressed_requires_type_size_one(self):
        with self.assertRaises(InvalidFieldCombinationError):
            decode_ktx(make_ktx(gl_type_size=4))

    def test_compressed_requires_zero_gl_format(self):
        with self.assertRaises(InvalidFieldCombinationError):
            decode_ktx(make_ktx(gl_format=PixelFormat.RGB))

    def test_compressed_rejects_runtime_mip_generation(self):
        with self.assertRaises(InvalidFieldCombinationError) as ctx:
            decode_ktx(make_ktx(mip_levels=0))
        self.assertIn("mipmaps", str(ctx.exception))

    def test_cubemap_unsupported(self):
        with self.assertRaises(UnsupportedFeatureError):
            decode_ktx(make_ktx(faces=6))

    def test_array_unsupported(self):
        with self.assertRaises(UnsupportedFeatureError):
            decode_ktx(make_ktx(array_elements=2))

    def test_volume_unsupported(self):
        with self.assertRaises(UnsupportedFeatureError):
            decode_ktx(make_ktx(depth=4))

    def test_field_checks_run_before_feature_checks(self):
        with self.assertRaises(InvalidFieldCombinationError):
            decode_ktx(make_ktx(gl_type=1, faces=6))

    def test_unknown_internal_format(self):
        with self.assertRaises(UnrecognizedFormatError) as ctx:
            decode_ktx(_rgba(internal_format=GL_RGBA8))
        self.assertEqual(ctx.exception.code, GL_RGBA8)

    def test_bad_identifier(self):
        buf = make_ktx(identifier=b"\xabKTX 20\xbb\r\n\x1a\n")
        with self.assertRaises(MalformedHeaderError):
            decode_ktx(buf)

    def test_short_buffer_is_malformed(self):
        with self.assertRaises(MalformedHeaderError):
            decode_ktx(b"\xabKTX")

    def test_wrong_endianness_wins_over_other_errors(self):
        buf = make_ktx(internal_format=GL_RGBA8, faces=6, depth=3,
                       endianness=0x01020304)
        with self.assertRaises(UnsupportedEndiannessError):
            decode_ktx(buf)

    def test_key_value_length_past_end(self):
        buf = make_ktx(image_len=0)
        # Claim more key/value bytes than the file holds.
        patched = bytearray(buf)
        patched[60:64] = (1 << 20).to_bytes(4, "little")
        with self.assertRaises(TruncatedDataError):
            decode_ktx(bytes(patched))

    def test_image_size_past_end(self):
        with self.assertRaises(TruncatedDataError):
            decode_ktx(make_ktx(image_len=16, image_size=1024))

    def test_level0_larger_than_image(self):
        buf = make_ktx(PixelFormat.RGBA_DXT5, width=64, height=64,
                       mip_levels=2, image_len=100, trailing=bytes(8192))
        with self.assertRaises(TruncatedDataError):
            decode_ktx(buf)

    def test_view_starts_after_image_size(self):
        buf = bytearray(make_ktx(image_len=32))
        tex = decode_ktx(buf)
        buf[KTX_DATA_OFFSET] = 0xEE
        self.assertEqual(tex.buffer_view[0], 0xEE)

    def test_custom_catalog_is_consulted(self):
        empty = FormatCatalog(table={})
        with self.assertRaises(UnrecognizedFormatError):
            decode_ktx(make_ktx(), catalog=empty)

    def test_catalog_with_only_validity_methods(self):
        tex = decode_ktx(make_ktx(image_len=32), catalog=MinimalCatalog())
        self.assertIs(tex.internal_format, PixelFormat.RGB_DXT1)
        self.assertEqual(tex.byte_length, 32)

        buf = make_ktx(PixelFormat.RGBA_DXT5, mip_levels=2, image_len=80)
        tex = decode_ktx(buf, catalog=MinimalCatalog())
        self.assertEqual(tex.byte_length, 64)

    def test_catalog_accepting_unknown_code_still_fails_cleanly(self):
        catalog = MinimalCatalog(compressed=(0x9999,))
        with self.assertRaises(UnrecognizedFormatError):
            decode_ktx(make_ktx(0x9999, image_len=32), catalog=catalog)

    def test_decoding_twice_is_identical(self):
        buf = make_ktx(PixelFormat.RGBA_DXT3, mip_levels=2, image_len=80)
        first, second = decode_ktx(buf), decode_ktx(buf)
        self.assertEqual(first, second)
        self.assertEqual(first.tobytes(), second.tobytes())


if __name__ == "__main__":
    unittest.main(verbosity=2)
