"""Shared test helpers: a scripted embedding provider and image payloads."""

import base64
import io

import numpy as np
from PIL import Image

from core.inference.engine import EmbeddingProvider

DIMENSIONS = 128


class FakeEmbeddingProvider(EmbeddingProvider):
    """Scripted provider: the photo's colour selects the descriptor.

    Colours that were never registered behave like a photo without a face.
    """

    name = "fake"
    dimensions = DIMENSIONS

    def __init__(self):
        self.descriptors = {}
        self.calls = 0
        self.closed = False

    def register(self, color, descriptor):
        self.descriptors[tuple(color)] = np.asarray(descriptor, dtype=np.float64)

    def embed(self, image):
        self.calls += 1
        return self.descriptors.get(tuple(int(v) for v in image[0, 0]))

    def close(self):
        self.closed = True


def make_png_bytes(color=(10, 20, 30), size=(8, 8)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_data_uri(color=(10, 20, 30)):
    encoded = base64.b64encode(make_png_bytes(color)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def descriptor_at_distance(distance, dimensions=DIMENSIONS):
    """Descriptor whose Euclidean distance from the zero vector is ``distance``."""
    vector = np.zeros(dimensions)
    vector[0] = distance
    return vector
