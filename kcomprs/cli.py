"""Command line front end: reduce the number of colours used in images."""

from __future__ import annotations

import argparse
import logging
import math
import os
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from kcomprs.cluster import euclidean_distance, euclidean_distance_squared
from kcomprs.model import Trainer

PHI = 1.618033988749894848204586834365638118

logger = logging.getLogger(__name__)


def default_concurrency() -> int:
    """Return the default number of images processed at a time."""
    return max(os.cpu_count() or 1, 1)


@dataclass
class ProcessImageConfig:
    """Settings applied to one image."""

    colors: int = 15
    rounds: int = 100
    jpeg: int = 0
    output: str | None = None
    overwrite: bool = False
    distance_algo: str = "EuclideanDistance"
    delta: float = 0.005
    palette: bool = False


@dataclass
class Options:
    """Parsed command line options."""

    files: list[str]
    colors: int = 15
    output: str | None = None
    series: int | None = None
    rounds: int = 100
    quick: bool = False
    overwrite: bool = False
    concurrency: int = 1
    kmeans_concurrency: int | None = None
    delta: float = 0.005
    distance_algo: str = "EuclideanDistance"
    jpeg: int | None = None
    palette: bool = False
    debug: bool = False

    def image_config(self) -> ProcessImageConfig:
        """Return the per-image settings these options describe."""
        return ProcessImageConfig(
            colors=self.colors,
            rounds=self.rounds,
            jpeg=self.jpeg or 0,
            output=self.output,
            overwrite=self.overwrite,
            distance_algo=self.distance_algo,
            delta=self.delta,
            palette=self.palette,
        )


@dataclass
class DecodedImage:
    """A decoded RGBA image together with the settings to process it with."""

    img: Image.Image
    format: str
    path: str
    config: ProcessImageConfig


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the command."""
    parser = argparse.ArgumentParser(
        prog="kcomprs", description="Reduce number of colors used in image"
    )
    parser.add_argument("files", nargs="+", help="Image files to compress")
    parser.add_argument(
        "-n", "--colors", type=int, default=15, help="Number of colors to use"
    )
    parser.add_argument("-o", "--output", help="Output directory name")
    parser.add_argument(
        "-s",
        "--series",
        type=int,
        help="Number of image to generate, series of output with increasing "
        "number of colors up util reached --colors parameter",
    )
    parser.add_argument(
        "-i",
        "--round",
        dest="rounds",
        type=int,
        default=100,
        help="Maximum number of round before stop adjusting (number of kmeans iterations)",
    )
    parser.add_argument(
        "-q", "--quick", action="store_true", help="Increase speed in exchange of accuracy"
    )
    parser.add_argument(
        "-w", "--overwrite", action="store_true", help="Overwrite output if exists"
    )
    parser.add_argument(
        "-t",
        "--concurrency",
        type=int,
        default=default_concurrency(),
        help="Maximum number image process at a time [0=auto]",
    )
    parser.add_argument(
        "--kcpu",
        dest="kmeans_concurrency",
        type=int,
        help="Maximum cpu used processing each image [unsupported]",
    )
    parser.add_argument(
        "-d",
        "--delta",
        type=float,
        default=0.005,
        help="Delta threshold of convergence (delta between kmeans old and new centroid's values)",
    )
    parser.add_argument(
        "--dalgo",
        dest="distance_algo",
        default="EuclideanDistance",
        help="Distance algo for kmeans [EuclideanDistance,EuclideanDistanceSquared]",
    )
    parser.add_argument(
        "--jpeg",
        type=int,
        help="Specify quality of output jpeg compression [0-100] [default 0 - output png]",
    )
    parser.add_argument(
        "--palette", action="store_true", help="Generate an additional palette image"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Options:
    """Parse the command line into :class:`Options`."""
    parser = build_parser()
    namespace = parser.parse_args(argv)
    options = Options(**vars(namespace))
    if options.series is not None and options.series < 1:
        parser.error("--series must be at least 1")
    if options.colors < 1:
        parser.error("--colors must be at least 1")
    if options.concurrency <= 0:
        options.concurrency = 1
    if options.quick:
        options.delta = 0.01
        options.rounds = 50
    return options


def read_images(options: Options, path: str) -> list[DecodedImage]:
    """Decode the image at ``path`` into one entry per colour count to produce."""
    try:
        with Image.open(path) as source:
            image_format = source.format
            source.load()
            img = source.convert("RGBA")
    except UnidentifiedImageError:
        logger.error("Not an image path=%s", path)
        return []
    except OSError as err:
        logger.error("Error opening image path=%s error=%s", path, err)
        return []
    except Exception as err:  # decoder failures surface as assorted errors
        logger.error("Error decoding image path=%s error=%s", path, err)
        return []

    base = options.image_config()
    images: list[DecodedImage] = []
    if options.series is not None:
        count = options.series
        step = options.colors // count
        start = 1
        if step <= 1:
            start = 2
            step = 1
            count = options.colors
        images.extend(
            DecodedImage(img, image_format, path, replace(base, colors=step * i))
            for i in range(start, count)
        )
    images.append(DecodedImage(img, image_format, path, base))
    return images


def scan_images(options: Options) -> list[DecodedImage]:
    """Collect the images named on the command line, expanding directories."""
    images: list[DecodedImage] = []
    for path in options.files:
        try:
            is_file = Path(path).is_file()
            os.stat(path)
        except OSError as err:
            logger.error("Error reading file metadata path=%s error=%s", path, err)
            continue
        if is_file:
            images.extend(read_images(options, path))
            continue
        with os.scandir(path) as entries:
            for entry in sorted(entries, key=lambda e: e.name):
                try:
                    if not entry.is_file():
                        continue
                except OSError as err:
                    logger.error(
                        "Error reading file metadata path=%s error=%s", entry.path, err
                    )
                    continue
                images.extend(read_images(options, entry.path))
    return images


def output_path(path: str, config: ProcessImageConfig) -> Path:
    """Return where the compressed version of ``path`` is written."""
    name = Path(path).name
    if not name:
        raise ValueError(f"Invalid filename: {path}")
    extension = "jpeg" if config.jpeg > 0 else "png"
    filename = f"{Path(name).stem}.kcp{config.rounds}n{config.colors}.{extension}"
    if config.output:
        return Path(config.output) / filename
    return Path(filename)


def _channel(value: float) -> int:
    if math.isnan(value) or value <= 0:
        return 0
    if value >= 255:
        return 255
    return int(math.floor(value + 0.5))


def _color(centroid: Sequence[float]) -> tuple[int, int, int, int]:
    r, g, b, a = (_channel(v) for v in centroid[:4])
    return r, g, b, a


def handle_image(image: DecodedImage) -> Path | None:
    """Compress one image; return the written path, or None if nothing was written."""
    config = image.config
    outfile = output_path(image.path, config)
    width, height = image.img.size
    logger.info(
        "Processing image cp=%d round=%d img=%s dimension=%dx%d format=%s",
        config.colors,
        config.rounds,
        Path(image.path).name,
        width,
        height,
        image.format,
    )

    if outfile.exists():
        logger.info(
            "File existed path=%s isDir=%s overwrite=%s",
            outfile,
            outfile.is_dir(),
            config.overwrite,
        )
        if not config.overwrite or not outfile.is_file():
            return None

    start = time.monotonic()
    matrix = [tuple(float(c) for c in pixel) for pixel in image.img.getdata()]
    logger.debug("Start partitioning cp=%d img=%s", config.colors, image.path)

    distance_fn = (
        euclidean_distance_squared
        if config.distance_algo == "EuclideanDistanceSquared"
        else euclidean_distance
    )
    trainer = Trainer(
        k=config.colors,
        distance_fn=distance_fn,
        max_iterations=config.rounds,
        delta=config.delta,
    )
    model = trainer.fit(matrix)

    colors = [_color(c) for c in model.centroids]
    result = Image.new("RGBA", (width, height))
    result.putdata([colors[cluster] for cluster in model.mapping])

    try:
        if config.jpeg > 0:
            result.convert("RGB").save(
                outfile, format="JPEG", quality=max(1, min(config.jpeg, 100))
            )
        else:
            result.save(outfile, format="PNG")
    except OSError as err:
        logger.error("Error writing image error=%s out=%s", err, outfile)
        return None

    if config.palette:
        gen_palette(model.centroids, outfile)
    logger.info(
        "Compress completed out=%s ms=%d iter=%d",
        outfile,
        int((time.monotonic() - start) * 1000),
        model.iterations,
    )
    return outfile


def gen_palette(centroids: Sequence[Sequence[float]], outfile: Path | str) -> Path | None:
    """Write an image of colour swatches next to ``outfile``; return its path."""
    outfile = Path(outfile)
    palette_file = outfile.with_name(f"{outfile.stem}.palette.png")
    count = len(centroids)
    swatch_width = 400
    if count > 1:
        swatch_width = 200 - min(7 * count - 2, 140)
    width = swatch_width * count
    height = int(width / PHI)

    img = Image.new("RGBA", (width, height))
    for index, centroid in enumerate(centroids):
        box = (index * swatch_width, 0, (index + 1) * swatch_width, height)
        img.paste(_color(centroid), box)

    try:
        img.save(palette_file, format="PNG")
    except OSError as err:
        logger.error("Error palette image error=%s out=%s", err, palette_file)
        return None
    return palette_file


def _process(image: DecodedImage) -> Path | None:
    try:
        return handle_image(image)
    except Exception as err:
        logger.error("Error processing image error=%s path=%s", err, image.path)
        return None


def _process_all(chunk: Sequence[DecodedImage]) -> list[Path]:
    return [out for out in map(_process, chunk) if out is not None]


def execute(options: Options) -> list[Path]:
    """Process every image the options name; return the files written."""
    images = scan_images(options)
    if not images:
        return []
    if len(images) == 1 or options.concurrency <= 1:
        return _process_all(images)

    size = options.concurrency
    chunks = [images[i : i + size] for i in range(0, len(images), size)]
    results: list[list[Path]] = [[] for _ in chunks]

    def work(slot: int, chunk: list[DecodedImage]) -> None:
        results[slot] = _process_all(chunk)

    threads = [
        threading.Thread(target=work, args=(slot, chunk))
        for slot, chunk in enumerate(chunks)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return [path for chunk_result in results for path in chunk_result]


def main(argv: Sequence[str] | None = None) -> None:
    """Run the command."""
    start = time.monotonic()
    options = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if options.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    try:
        execute(options)
    except Exception as err:
        logger.error("Error occurred error=%s", err)
        return
    logger.info(
        "Processing completed ms=%d", int((time.monotonic() - start) * 1000)
    )