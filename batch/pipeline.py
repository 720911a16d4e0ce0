"""Batch pipeline helpers (reusable by CLI and library callers)."""

from __future__ import annotations

import logging
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from tqdm import tqdm

from config import OUTPUT_EXTENSION, default_worker_count
from processing import LayoutError, PolychromeError, TransformStep
from sources import decode_image, encode_image

logger = logging.getLogger(__name__)


@dataclass
class ImageOutcome:
    """Result of transforming one source image.

    Exactly one of ``output`` and ``error`` is set.

    Attributes:
        source: Path of the source image.
        output: Path the result was saved to, on success.
        error: Error message, on failure.
        width: Source width in pixels (0 if never decoded).
        height: Source height in pixels (0 if never decoded).
        elapsed: Seconds spent on this image.
    """

    source: Path
    output: Path | None = None
    error: str | None = None
    width: int = 0
    height: int = 0
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "source": str(self.source),
            "output": str(self.output) if self.output else None,
            "error": self.error,
            "width": self.width,
            "height": self.height,
            "elapsed": round(self.elapsed, 3),
        }


@dataclass
class BatchReport:
    """Outcomes of a batch run, in input order."""

    transform: str
    outcomes: list[ImageOutcome] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> list[ImageOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> list[ImageOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def to_dict(self) -> dict:
        return {
            "transform": self.transform,
            "images_found": self.total,
            "images_converted": len(self.succeeded),
            "images_failed": len(self.failed),
            "elapsed": round(self.elapsed, 3),
        }


def output_path_for(source: Path, output_dir: Path, suffix: str) -> Path:
    """Get the result path for a source image: ``<output_dir>/<stem><suffix>.png``."""
    return Path(output_dir) / f"{Path(source).stem}{suffix}{OUTPUT_EXTENSION}"


def plan_output_paths(
    sources: Sequence[Path], output_dir: Path, suffix: str
) -> list[Path | None]:
    """Assign every source a distinct result path.

    Sources sharing a stem (``a.png`` and ``a.bmp``) keep their extension
    in the result name (``a.png_Sobel.png``). Names are compared
    case-insensitively. A source that still maps onto a taken path (the
    same file listed twice) gets ``None``.
    """
    stems = Counter(Path(source).stem.lower() for source in sources)
    planned: list[Path | None] = []
    taken: set[str] = set()
    for source in sources:
        source = Path(source)
        if stems[source.stem.lower()] > 1:
            path = Path(output_dir) / f"{source.name}{suffix}{OUTPUT_EXTENSION}"
        else:
            path = output_path_for(source, output_dir, suffix)
        key = path.name.lower()
        if key in taken:
            planned.append(None)
            continue
        taken.add(key)
        planned.append(path)
    return planned


def process_image(
    source: Path,
    step: TransformStep,
    output_dir: Path,
    output: Path | None = None,
) -> ImageOutcome:
    """Decode, transform and save a single image.

    The result goes to ``output`` when given, else to
    :func:`output_path_for`. Per-image failures are logged and returned as
    a failed outcome. Layout errors are programming errors and propagate.
    """
    source = Path(source)
    if output is None:
        output = output_path_for(source, output_dir, step.suffix)
    outcome = ImageOutcome(source=source)
    started = time.perf_counter()

    try:
        buffer = decode_image(source)
        outcome.width, outcome.height = buffer.size
        logger.debug(
            "Starting %s on %s (%dx%d)", step.name, source.name, buffer.width, buffer.height
        )
        result = step.apply(buffer)
        outcome.output = encode_image(result, output)
    except LayoutError:
        raise
    except PolychromeError as e:
        logger.error("Failed to convert %s: %s", source.name, e)
        outcome.error = str(e)
    except Exception as e:
        logger.exception("Error processing image %s: %s", source.name, e)
        outcome.error = f"{type(e).__name__}: {e}"
    finally:
        outcome.elapsed = time.perf_counter() - started

    return outcome


def run_batch(
    sources: Sequence[Path],
    step: TransformStep,
    output_dir: Path,
    workers: int | None = None,
    progress: bool = True,
) -> BatchReport:
    """Transform every source image on a worker pool.

    Images share no state, so each runs to completion on its own worker.
    A failing image never cancels its siblings; every outcome is collected
    after all images have finished.

    Args:
        sources: Image files to convert.
        step: Transform applied to each image.
        output_dir: Directory results are written to.
        workers: Pool size. Defaults to the processor count.
        progress: Show a progress bar.

    Returns:
        BatchReport with one outcome per source, in input order.
    """
    sources = [Path(source) for source in sources]
    report = BatchReport(transform=step.name)

    if not sources:
        logger.info("No images to process.")
        return report

    if workers is None:
        workers = default_worker_count()
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    total = len(sources)
    outcomes: list[ImageOutcome | None] = [None] * total
    started = time.perf_counter()

    planned = plan_output_paths(sources, output_dir, step.suffix)
    pending = []
    for index, (source, output) in enumerate(zip(sources, planned)):
        if output is None:
            logger.error("Skipping %s: output name already used in this batch", source)
            outcomes[index] = ImageOutcome(
                source=source, error=f"Duplicate output for {source.name}"
            )
        else:
            pending.append((index, source, output))

    logger.info("Running %s on %d images with %d workers", step.name, total, workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(process_image, source, step, output_dir, output): index
            for index, source, output in pending
        }
        done = total - len(pending)
        with tqdm(total=total, initial=done, desc="Processing", disable=not progress) as bar:
            for future in as_completed(futures):
                done += 1
                index = futures[future]
                outcome = future.result()
                outcomes[index] = outcome
                bar.update(1)
                logger.info(
                    "Done with %s (%d/%d)%s",
                    outcome.source.name,
                    done,
                    total,
                    "" if outcome.ok else " [failed]",
                )

    report.outcomes = [outcome for outcome in outcomes if outcome is not None]
    report.elapsed = time.perf_counter() - started
    logger.info("Time elapsed: %.2f seconds", report.elapsed)
    return report
