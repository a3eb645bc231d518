"""
Shared test fixtures: deterministic in-process embedders.
"""

import sys
import threading
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from rag_core import RAGConfig, RAGEngine  # noqa: E402


class EmbedderBoom(Exception):
    """Stand-in for a provider error (network, auth, rate limit)."""


class KeywordEmbedder:
    """Embeds text as keyword counts, one dimension per keyword."""

    def __init__(self, keywords: Sequence[str] = ("apple", "banana", "cherry")):
        self.keywords = tuple(keywords)
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def embed(self, text: str) -> List[float]:
        with self._lock:
            self.calls.append(text)
        lowered = text.lower()
        return [float(lowered.count(k)) for k in self.keywords]


class MappingEmbedder:
    """Returns a fixed vector per exact text."""

    def __init__(self, mapping: Dict[str, Sequence[float]], default: Optional[Sequence[float]] = None):
        self.mapping = dict(mapping)
        self.default = default

    def embed(self, text: str) -> Sequence[float]:
        if text in self.mapping:
            return self.mapping[text]
        if self.default is not None:
            return self.default
        raise EmbedderBoom(f"no vector for {text!r}")


class ConstantEmbedder:
    """Same vector for every text."""

    def __init__(self, vector: Sequence[float] = (1.0, 0.0)):
        self.vector = list(vector)
        self.calls = 0
        self._lock = threading.Lock()

    def embed(self, text: str) -> List[float]:
        with self._lock:
            self.calls += 1
        return list(self.vector)


class FailingEmbedder:
    """Raises for any text containing ``marker``; otherwise delegates."""

    def __init__(self, inner, marker: str = "FAIL"):
        self.inner = inner
        self.marker = marker

    def embed(self, text: str):
        if self.marker in text:
            raise EmbedderBoom("embedding service unavailable")
        return self.inner.embed(text)


def write_pdf(path: Path, pages: Sequence[str]) -> Path:
    """Write a minimal PDF with one line of Helvetica text per page."""
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(len(pages)))
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode("ascii"),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for i, text in enumerate(pages):
        content = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1") if text else b""
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents {5 + 2 * i} 0 R "
            f"/Resources << /Font << /F1 3 0 R >> >> >>".encode("ascii")
        )
        objects.append(b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)

    path.write_bytes(bytes(out))
    return path


@pytest.fixture
def keyword_embedder():
    return KeywordEmbedder()


@pytest.fixture
def small_config():
    """Small chunks so short test documents produce several of them."""
    return RAGConfig(chunk_size=40, chunk_overlap=10, boundary_lookback=15)


@pytest.fixture
def engine(keyword_embedder, small_config):
    return RAGEngine(embedder=keyword_embedder, config=small_config)
