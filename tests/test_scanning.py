"""Tests for texture scanning and manifest I/O."""

import os
import shutil
import tempfile
import unittest

from TexDecode.config import DecoderConfig
from TexDecode.core import (
    TextureRecord, file_hash, file_hash_bytes, inspect_file, inspect_texture,
    iter_textures, load_manifest, save_manifest, scan_textures,
)
from texture_builders import make_dds, make_ktx


class TestScanTextures(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self._write("brick.dds", make_dds("DXT5", 8, 8, mip_count=2, data_len=80))
        self._write(os.path.join("sub", "rock.ktx"), make_ktx(image_len=32))
        self._write("cube.ktx", make_ktx(faces=6))
        self._write("readme.txt", b"not a texture")

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _write(self, rel, data):
        path = os.path.join(self.tmpdir, rel)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        return path

    def test_scans_supported_extensions_only(self):
        records = scan_textures(self.tmpdir, DecoderConfig())
        self.assertEqual(
            [r.filepath for r in records], ["brick.dds", "cube.ktx", "sub/rock.ktx"]
        )

    def test_decoded_fields(self):
        records = {r.filename: r for r in scan_textures(self.tmpdir, DecoderConfig())}
        brick = records["brick.dds"]
        self.assertTrue(brick.ok)
        self.assertEqual(brick.container, "dds")
        self.assertEqual(brick.format_name, "RGBA_DXT5")
        self.assertEqual(brick.format_code, 0x83F3)
        self.assertEqual((brick.width, brick.height, brick.byte_length), (8, 8, 64))
        self.assertEqual(brick.file_hash, file_hash(os.path.join(self.tmpdir, "brick.dds")))

    def test_bad_file_is_recorded_and_scan_continues(self):
        with self.assertLogs("texture_decode", level="WARNING") as cm:
            records = {r.filename: r for r in scan_textures(self.tmpdir, DecoderConfig())}
        cube = records["cube.ktx"]
        self.assertEqual(cube.status, "error")
        self.assertIn("UnsupportedFeatureError", cube.error)
        self.assertTrue(records["rock.ktx"].ok)
        self.assertTrue(any("cube.ktx" in line for line in cm.output))

    def test_size_limit_marks_error(self):
        config = DecoderConfig()
        config.max_file_bytes = 64
        records = scan_textures(self.tmpdir, config)
        self.assertTrue(all(not r.ok for r in records))

    def test_custom_extensions(self):
        self._write("extra.tex", make_dds())
        config = DecoderConfig()
        config.scan.extensions = [".tex"]
        records = scan_textures(self.tmpdir, config)
        self.assertEqual([r.filename for r in records], ["extra.tex"])
        self.assertEqual(records[0].container, "dds")
        self.assertTrue(records[0].ok)

    def test_inspect_file(self):
        record = inspect_file(os.path.join(self.tmpdir, "sub", "rock.ktx"), DecoderConfig())
        self.assertEqual(record.filepath, "rock.ktx")
        self.assertEqual(record.format_name, "RGB_DXT1")

    def test_iter_textures_pairs_records_with_textures(self):
        items = list(iter_textures(self.tmpdir, DecoderConfig()))
        self.assertEqual([r.filepath for _, r, _ in items],
                         ["brick.dds", "cube.ktx", "sub/rock.ktx"])
        path, brick, texture = items[0]
        self.assertEqual(path, os.path.join(self.tmpdir, "brick.dds"))
        self.assertEqual(texture.byte_length, brick.byte_length)
        self.assertIsNone(items[1][2])

    def test_inspect_texture_returns_decoded_view(self):
        record, texture = inspect_texture(
            os.path.join(self.tmpdir, "sub", "rock.ktx"), DecoderConfig()
        )
        self.assertTrue(record.ok)
        self.assertEqual(texture.byte_length, 32)


class TestTextureRecord(unittest.TestCase):
    def test_normalizes_relative_path(self):
        r = TextureRecord(filepath="a\\b\\..\\c.dds", filename="c.dds")
        self.assertEqual(r.filepath, "a/c.dds")

    def test_rejects_absolute_and_escaping_paths(self):
        for bad in ("/abs/x.dds", "C:/x.dds", "../x.dds", "."):
            with self.assertRaises(ValueError):
                TextureRecord(filepath=bad, filename="x.dds")


class TestManifest(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_round_trip(self):
        records = [
            TextureRecord(
                filepath="a/brick.dds", filename="brick.dds", container="dds",
                format_name="RGB_DXT1", format_code=0x83F0, width=8, height=8,
                byte_length=32, file_size_kb=0.2, file_hash=file_hash_bytes(b"x"),
            ),
            TextureRecord(
                filepath="cube.ktx", filename="cube.ktx", container="ktx",
                status="error", error="UnsupportedFeatureError: Cubemaps are unsupported",
            ),
        ]
        path = os.path.join(self.tmpdir, "out", "manifest.csv")
        save_manifest(records, path)
        self.assertEqual(load_manifest(path), records)

    def test_bad_row_reports_row_number(self):
        path = os.path.join(self.tmpdir, "manifest.csv")
        with open(path, "w", encoding="utf-8") as f:
            f.write("filepath,filename,container,status,width\n")
            f.write("a.dds,a.dds,dds,ok,wide\n")
        with self.assertRaises(ValueError) as ctx:
            load_manifest(path)
        self.assertIn("row 2", str(ctx.exception))

    def test_missing_columns(self):
        path = os.path.join(self.tmpdir, "manifest.csv")
        with open(path, "w", encoding="utf-8") as f:
            f.write("filepath,filename\n")
            f.write("a.dds,a.dds\n")
        with self.assertRaises(ValueError):
            load_manifest(path)

    def test_missing_file(self):
        with self.assertRaises(OSError):
            load_manifest(os.path.join(self.tmpdir, "nope.csv"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
