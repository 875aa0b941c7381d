"""Face embedding provider abstractions.

The rest of the service only needs one capability from the face model:
``embed(image) -> descriptor | None``. Providers implement it; the
``EmbeddingEngine`` wraps a provider with a bounded worker pool so a slow model
call cannot hang a request forever.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Dict, Optional

import numpy as np

from core.errors import EmbeddingError, EmbeddingTimeout, SmartAttendError
from logging_config import face_recognition_logger

Descriptor = np.ndarray


class EmbeddingProvider:
    """Protocol-ish base class for duck-typed providers."""

    name: str = "provider"
    dimensions: int = 128

    def warmup(self, force: bool = False) -> None:
        return None

    def embed(self, image: np.ndarray) -> Optional[Descriptor]:  # pragma: no cover - interface
        raise NotImplementedError

    def is_ready(self) -> bool:
        return True

    def close(self) -> None:
        return None


class FaceRecognitionProvider(EmbeddingProvider):
    """dlib ResNet descriptors through the ``face_recognition`` package.

    Produces 128-d descriptors compared with Euclidean distance, where 0.6 is
    the conventional same-person threshold.
    """

    name = "face_recognition"
    dimensions = 128

    def __init__(
        self,
        *,
        detection_model: str = "hog",
        num_jitters: int = 1,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._detection_model = detection_model
        self._num_jitters = max(1, int(num_jitters))
        self._logger = logger or logging.getLogger(__name__)
        self._module: Any = None
        self._lock = threading.Lock()

    def warmup(self, force: bool = False) -> None:
        with self._lock:
            if self._module is not None and not force:
                return
            try:
                import face_recognition
            except ImportError as exc:
                raise EmbeddingError(
                    "face_recognition is not installed (pip install face_recognition)"
                ) from exc
            self._module = face_recognition
        self._logger.info(
            "[Embedding] face_recognition ready (detector=%s, jitters=%d)",
            self._detection_model,
            self._num_jitters,
        )

    def is_ready(self) -> bool:
        return self._module is not None

    def embed(self, image: np.ndarray) -> Optional[Descriptor]:
        if self._module is None:
            self.warmup()
        locations = self._module.face_locations(image, model=self._detection_model)
        if not locations:
            return None
        # (top, right, bottom, left); keep the largest face like a single-face detector
        primary = max(locations, key=lambda box: (box[2] - box[0]) * (box[1] - box[3]))
        encodings = self._module.face_encodings(
            image,
            known_face_locations=[primary],
            num_jitters=self._num_jitters,
        )
        if not encodings:
            return None
        return np.asarray(encodings[0], dtype=np.float64)


class EmbeddingEngine:
    """Runs a provider on a worker pool with a per-call timeout."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        *,
        timeout: float = 10.0,
        max_workers: int = 2,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._provider = provider
        self._timeout = timeout if timeout and timeout > 0 else None
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="embedding",
        )
        self._logger = logger or logging.getLogger(__name__)
        self._closed = False

    @property
    def name(self) -> str:
        return self._provider.name

    @property
    def dimensions(self) -> int:
        return int(self._provider.dimensions)

    def warmup(self, force: bool = False) -> None:
        self._provider.warmup(force=force)

    def embed(self, image: np.ndarray) -> Optional[Descriptor]:
        """Return the provider's descriptor for ``image`` or ``None`` when no face is found."""
        if self._closed:
            raise EmbeddingError("Embedding engine is closed")
        future = self._executor.submit(self._provider.embed, image)
        try:
            result = future.result(timeout=self._timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            self._logger.warning(
                "[Embedding] %s did not answer within %.1fs", self.name, self._timeout
            )
            raise EmbeddingTimeout() from exc
        except SmartAttendError:
            raise
        except Exception as exc:
            face_recognition_logger.log_recognition_error(f"{self.name} crashed: {exc}")
            raise EmbeddingError(f"Face embedding failed: {exc}") from exc

        if result is None:
            return None
        descriptor = np.asarray(result, dtype=np.float64).ravel()
        if descriptor.shape[0] != self.dimensions:
            raise EmbeddingError(
                f"Provider {self.name} returned {descriptor.shape[0]} values, expected {self.dimensions}"
            )
        return descriptor

    def describe(self) -> Dict[str, Any]:
        return {
            "provider": self.name,
            "dimensions": self.dimensions,
            "ready": self._provider.is_ready(),
            "timeout": self._timeout,
        }

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=False)
        self._provider.close()


__all__ = [
    "Descriptor",
    "EmbeddingProvider",
    "FaceRecognitionProvider",
    "EmbeddingEngine",
]
