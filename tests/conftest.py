"""Shared test fixtures."""

import shutil
import tempfile

import pytest

from TexDecode.config import DecoderConfig
from texture_builders import make_dds, make_ktx


@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp()
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def default_config():
    return DecoderConfig()


@pytest.fixture
def dds_bytes():
    return make_dds


@pytest.fixture
def ktx_bytes():
    return make_ktx
