# kcomprs

Reduce the number of colors used in an image with k-means clustering.

Each image is converted to RGBA and every pixel is treated as a point with
four channels. The points are grouped into a fixed number of clusters, seeded
with k-means++, and every pixel is replaced by the color of its cluster's
centroid (each channel rounded and clamped to 0-255).

## Installation

```
pip install .
```

## Usage

```
kcomprs [OPTIONS] FILES...
```

`FILES` may be image files or directories. A directory is scanned, in name
order, for image files, without descending into subdirectories. Files that
cannot be opened or decoded as images are logged and skipped.

The output for `photo.jpg` is named `photo.kcp<round>n<colors>.png` (or
`.jpeg` with `--jpeg`). It is written to the current working directory, or
to the directory given with `--output`. An existing output is skipped unless
`--overwrite` is given, and is never replaced if it is not a regular file.

### Options

| Option | Default | Meaning |
| --- | --- | --- |
| `-n`, `--colors` | `15` | Number of colors to use (at least 1) |
| `-o`, `--output` | | Output directory |
| `-s`, `--series` | | Produce a series of outputs with an increasing number of colors, up to `--colors` (at least 1) |
| `-i`, `--round` | `100` | Maximum number of k-means iterations |
| `-q`, `--quick` | | Trade accuracy for speed: sets delta to 0.01 and rounds to 50 |
| `-w`, `--overwrite` | | Overwrite existing outputs |
| `-t`, `--concurrency` | number of CPUs | Maximum number of images processed at a time; 0 or less processes one at a time |
| `--kcpu` | | Accepted but not used |
| `-d`, `--delta` | `0.005` | Clustering stops once fewer than `delta` times the number of pixels changed cluster in a round |
| `--dalgo` | `EuclideanDistance` | Distance function: `EuclideanDistance` or `EuclideanDistanceSquared` (any other value uses `EuclideanDistance`) |
| `--jpeg` | `0` | JPEG quality (clamped to 1-100); 0 writes PNG |
| `--palette` | | Also write `<output name>.palette.png`, a strip of swatches of the chosen colors |
| `--debug` | | Enable debug logging |

With `--series S` and `--colors N`, outputs are produced for
`N // S, 2 * (N // S), ...` colors below `S * (N // S)`, plus one with `N`
colors. When `N // S` is 1 or less, outputs are produced for every count from
2 to `N`.

### Examples

Reduce a photo to 8 colors and write the result to `out/`:

```
kcomprs -n 8 -o out photo.jpg
```

Produce four images with 4, 8, 12 and 16 colors, plus their palettes:

```
kcomprs -n 16 -s 4 --palette photo.png
```

Write a JPEG at quality 85 for every image in a directory:

```
kcomprs --jpeg 85 pictures/
```

## Library use

The clustering can be used on its own:

```python
import random

from kcomprs.cluster import euclidean_distance
from kcomprs.model import Trainer

trainer = Trainer(
    k=2,
    distance_fn=euclidean_distance,
    max_iterations=100,
    delta=0.005,
    rng=random.Random(1),
)
model = trainer.fit([(0, 0, 0, 255), (255, 255, 255, 255), (250, 250, 250, 255)])
print(model.centroids, model.mapping, model.iterations)
```

`Trainer.fit` raises `ValueError` for an empty dataset or `k` below 1. A
cluster that ends a round with no points gets a centroid of NaN values.

`kcomprs.cli.execute(options)` processes the images described by an
`Options` value (as returned by `kcomprs.cli.parse_args`) and returns the
paths of the files it wrote.