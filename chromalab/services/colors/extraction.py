"""
Image color extraction pipeline.

Reduces an already-decoded, already-downscaled RGBA buffer to a short list
of representative colors: alpha filtering, fixed-step quantization, greedy
perceptual merging in Oklab, dominance/colorfulness scoring and a final
dedup pass. Fully deterministic; no history and no randomness involved.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

import numpy as np
from loguru import logger

from .conversions import ColorRecord, create_color_record, rgb_to_hex
from .perceptual import oklab_array_chroma, rgb_array_to_oklab

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray, Sequence[int]]

# Active palette bounds for interactive slicing
MIN_ACTIVE = 2
MAX_ACTIVE = 10


@dataclass
class ExtractionPolicy:
    """Centralized thresholds for the extraction pipeline."""

    # Pixels below this alpha are ignored entirely
    alpha_threshold: int = 128

    # Quantization step per RGB channel
    bucket_size: int = 20

    # Oklab distance under which a bin is absorbed into a kept cluster
    merge_distance: float = 0.04

    # Oklab distance every emitted color must keep from the others
    output_distance: float = 0.08

    # Score multiplier 1 + k * chroma (Oklab chroma tops out near 0.32)
    chroma_weight: float = 3.0

    # Near-black / near-white discount (Oklab L bounds)
    dark_lightness: float = 0.18
    light_lightness: float = 0.96
    lightness_penalty: float = 0.7


DEFAULT_EXTRACTION_POLICY = ExtractionPolicy()


@dataclass
class ColorCandidate:
    """A merged cluster of pixels with its dominance score."""
    rgb: Tuple[int, int, int]
    count: int
    frequency: float
    chroma: float
    lightness: float
    score: float

    @property
    def hex(self) -> str:
        return rgb_to_hex(*self.rgb)

    def to_dict(self) -> dict:
        return {
            "hex": self.hex,
            "count": self.count,
            "frequency": round(self.frequency, 4),
            "chroma": round(self.chroma, 4),
            "lightness": round(self.lightness, 4),
            "score": round(self.score, 5),
        }


def _as_pixel_array(pixels: PixelBuffer, width: int, height: int) -> np.ndarray:
    """
    Normalise the supported buffer shapes to an (N, 4) uint8 RGBA array.

    Accepts a flat RGBA buffer of width*height*4 values or an image-shaped
    (height, width, 3|4) array; RGB input is treated as fully opaque.

    Raises:
        ValueError: If the buffer does not match the declared dimensions
    """
    if width < 0 or height < 0:
        raise ValueError(f"Invalid image dimensions {width}x{height}")

    if isinstance(pixels, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(pixels, dtype=np.uint8)
    else:
        arr = np.asarray(pixels)

    if arr.ndim == 3:
        if arr.shape[0] != height or arr.shape[1] != width or arr.shape[2] not in (3, 4):
            raise ValueError(
                f"Pixel array shape {arr.shape} does not match {height}x{width} RGB/RGBA"
            )
        channels = arr.shape[2]
    else:
        channels = 4
        if arr.size != width * height * channels:
            raise ValueError(
                f"Pixel buffer length {arr.size} does not match {width}x{height}x{channels}"
            )

    flat = np.clip(arr.reshape(-1, channels), 0, 255).astype(np.uint8)
    if channels == 3:
        flat = np.hstack([flat, np.full((flat.shape[0], 1), 255, dtype=np.uint8)])
    return flat


def _quantize(opaque: np.ndarray, bucket: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bin pixels by rounded RGB and average each bin.

    Returns:
        (bin keys, per-bin mean RGB (float64), per-bin pixel counts)
    """
    steps = np.round(opaque.astype(np.float64) / bucket).astype(np.int64)
    radix = 256 // bucket + 2
    packed = (steps[:, 0] * radix + steps[:, 1]) * radix + steps[:, 2]

    keys, inverse, counts = np.unique(packed, return_inverse=True, return_counts=True)
    sums = np.zeros((keys.shape[0], 3), dtype=np.float64)
    np.add.at(sums, inverse.reshape(-1), opaque.astype(np.float64))
    means = sums / counts[:, None]
    return keys, means, counts


def _merge_bins(means: np.ndarray, counts: np.ndarray, keys: np.ndarray,
                merge_distance: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Greedy perceptual merge, most populated bins first.

    Each bin joins the first kept cluster within merge_distance; the
    cluster color becomes the count-weighted mean, so it stays close to
    the more dominant member.
    """
    # descending count, ties broken by bin key for determinism
    order = np.lexsort((keys, -counts))
    labs = rgb_array_to_oklab(means)

    cluster_sums: List[np.ndarray] = []
    cluster_counts: List[int] = []
    cluster_labs: List[np.ndarray] = []

    for idx in order:
        count = int(counts[idx])
        if cluster_labs:
            distances = np.linalg.norm(np.vstack(cluster_labs) - labs[idx], axis=1)
            hits = np.flatnonzero(distances < merge_distance)
            if hits.size:
                target = int(hits[0])
                cluster_sums[target] = cluster_sums[target] + means[idx] * count
                cluster_counts[target] += count
                mean = cluster_sums[target] / cluster_counts[target]
                cluster_labs[target] = rgb_array_to_oklab(mean)[0]
                continue
        cluster_sums.append(means[idx] * count)
        cluster_counts.append(count)
        cluster_labs.append(labs[idx])

    merged_counts = np.array(cluster_counts, dtype=np.int64)
    merged_means = np.vstack(cluster_sums) / merged_counts[:, None]
    return merged_means, merged_counts


def analyze_pixels(pixels: PixelBuffer, width: int, height: int,
                   max_outputs: int = 20,
                   policy: ExtractionPolicy = DEFAULT_EXTRACTION_POLICY) -> List[ColorCandidate]:
    """
    Run the extraction pipeline and return scored candidates.

    Args:
        pixels: Flat RGBA buffer or (height, width, 3|4) array
        width, height: Declared image dimensions
        max_outputs: Maximum number of candidates to keep
        policy: Extraction thresholds

    Returns:
        Candidates in descending score order; empty for transparent or
        zero-size images

    Raises:
        ValueError: If the buffer does not match the declared dimensions
    """
    rgba = _as_pixel_array(pixels, width, height)
    if max_outputs <= 0 or rgba.shape[0] == 0:
        return []

    # 1) Alpha filtering
    opaque = rgba[rgba[:, 3] >= policy.alpha_threshold, :3]
    total = opaque.shape[0]
    if total == 0:
        logger.info("No opaque pixels; returning empty palette")
        return []

    # 2) Quantization and per-bin averaging
    keys, means, counts = _quantize(opaque, policy.bucket_size)

    # 3) Perceptual merge
    cluster_means, cluster_counts = _merge_bins(means, counts, keys, policy.merge_distance)
    logger.debug(
        f"Extraction stages: opaque={total} bins={keys.shape[0]} clusters={cluster_counts.shape[0]}"
    )

    # 4) Scoring: frequency x colorfulness x lightness penalty
    cluster_rgb = np.clip(np.round(cluster_means), 0, 255).astype(np.int64)
    labs = rgb_array_to_oklab(cluster_rgb)
    chroma = oklab_array_chroma(labs)
    lightness = labs[:, 0]
    frequency = cluster_counts / float(total)
    penalty = np.where(
        (lightness < policy.dark_lightness) | (lightness > policy.light_lightness),
        policy.lightness_penalty, 1.0,
    )
    scores = frequency * (1.0 + policy.chroma_weight * chroma) * penalty

    # descending score, then count, then packed rgb for a total order
    packed_rgb = (cluster_rgb[:, 0] << 16) | (cluster_rgb[:, 1] << 8) | cluster_rgb[:, 2]
    ranking = np.lexsort((packed_rgb, -cluster_counts, -scores))

    # 5) Output dedup
    kept: List[ColorCandidate] = []
    kept_labs: List[np.ndarray] = []
    for idx in ranking:
        if kept_labs:
            distances = np.linalg.norm(np.vstack(kept_labs) - labs[idx], axis=1)
            if distances.min() <= policy.output_distance:
                continue
        kept_labs.append(labs[idx])
        kept.append(ColorCandidate(
            rgb=tuple(int(v) for v in cluster_rgb[idx]),
            count=int(cluster_counts[idx]),
            frequency=float(frequency[idx]),
            chroma=float(chroma[idx]),
            lightness=float(lightness[idx]),
            score=float(scores[idx]),
        ))
        if len(kept) >= max_outputs:
            break

    logger.info(f"Extracted {len(kept)} candidates from {total} opaque pixels")
    return kept


def extract_palette(pixels: PixelBuffer, width: int, height: int,
                    max_outputs: int = 20,
                    policy: ExtractionPolicy = DEFAULT_EXTRACTION_POLICY) -> List[ColorRecord]:
    """Extract up to max_outputs representative colors as ColorRecords, best first."""
    return [create_color_record(c.hex) for c in analyze_pixels(pixels, width, height, max_outputs, policy)]


def clamp_active_count(requested: int, available: int) -> int:
    """
    Clamp an interactive palette size to what the extraction produced.

    The result lies in [2, min(10, available)]; with fewer than two
    candidates every candidate is active.
    """
    if available < MIN_ACTIVE:
        return max(available, 0)
    return max(MIN_ACTIVE, min(requested, MAX_ACTIVE, available))


def select_active_palette(candidates: Sequence[ColorRecord], requested: int) -> List[ColorRecord]:
    """Leading slice of the candidates sized by clamp_active_count."""
    return list(candidates[:clamp_active_count(requested, len(candidates))])
