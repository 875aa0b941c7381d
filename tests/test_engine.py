"""Tests for the embedding engine wrapper."""

import logging
import threading

import numpy as np
import pytest

from core.errors import EmbeddingError, EmbeddingTimeout
from core.inference.engine import EmbeddingEngine, EmbeddingProvider

IMAGE = np.zeros((4, 4, 3), dtype=np.uint8)


class StaticProvider(EmbeddingProvider):
    name = "static"

    def __init__(self, result):
        self.result = result

    def embed(self, image):
        return self.result


class CrashingProvider(EmbeddingProvider):
    name = "crashing"

    def embed(self, image):
        raise RuntimeError("model exploded")


class BlockingProvider(EmbeddingProvider):
    name = "blocking"

    def __init__(self):
        self.release = threading.Event()

    def embed(self, image):
        self.release.wait(5)
        return np.zeros(128)


class TestEmbeddingEngine:

    def test_returns_float_descriptor(self):
        engine = EmbeddingEngine(StaticProvider([1] * 128))
        try:
            descriptor = engine.embed(IMAGE)
            assert descriptor.dtype == np.float64
            assert descriptor.shape == (128,)
        finally:
            engine.close()

    def test_no_face_passes_through(self):
        engine = EmbeddingEngine(StaticProvider(None))
        try:
            assert engine.embed(IMAGE) is None
        finally:
            engine.close()

    def test_wrong_dimensions_rejected(self):
        engine = EmbeddingEngine(StaticProvider(np.zeros(64)))
        try:
            with pytest.raises(EmbeddingError):
                engine.embed(IMAGE)
        finally:
            engine.close()

    def test_provider_crash_becomes_embedding_error(self, caplog):
        engine = EmbeddingEngine(CrashingProvider())
        try:
            with caplog.at_level(logging.ERROR, logger="face_recognition"):
                with pytest.raises(EmbeddingError) as excinfo:
                    engine.embed(IMAGE)
            assert "model exploded" in excinfo.value.message
            assert any(
                record.name == "face_recognition" and "Recognition error" in record.getMessage()
                for record in caplog.records
            )
        finally:
            engine.close()

    def test_timeout(self):
        """A provider slower than the timeout raises EmbeddingTimeout."""
        provider = BlockingProvider()
        engine = EmbeddingEngine(provider, timeout=0.05)
        try:
            with pytest.raises(EmbeddingTimeout) as excinfo:
                engine.embed(IMAGE)
            assert excinfo.value.status_code == 503
        finally:
            provider.release.set()
            engine.close()

    def test_closed_engine_refuses_work(self):
        engine = EmbeddingEngine(StaticProvider(np.zeros(128)))
        engine.close()
        with pytest.raises(EmbeddingError):
            engine.embed(IMAGE)

    def test_describe(self):
        engine = EmbeddingEngine(StaticProvider(None), timeout=3)
        try:
            info = engine.describe()
            assert info["provider"] == "static"
            assert info["dimensions"] == 128
            assert info["timeout"] == 3
        finally:
            engine.close()
