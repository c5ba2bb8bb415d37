"""
Synthetic Datasets
==================

Generators for the three built-in playground datasets:

    xor    - The four boolean input pairs and their XOR truth values
    circle - 100 random points in the unit disk, labelled by an inner radius
    sine   - 100 evenly spaced samples of sin(x) over [0, 2*pi)

Every call builds a fresh Dataset; nothing is cached or updated in place.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from nn_playground.utils.logger import get_logger

_logger = get_logger(__name__)

CLASSIFICATION = 'classification'
REGRESSION = 'regression'

CIRCLE_SAMPLES = 100
CIRCLE_INNER_RADIUS = 0.5
SINE_SAMPLES = 100

DEFAULT_DATASET = 'xor'


@dataclass(frozen=True)
class Sample:
    """A single labelled example."""
    input: Tuple[float, ...]
    output: Tuple[float, ...]


@dataclass(frozen=True)
class Dataset:
    """An ordered, immutable collection of samples."""
    name: str
    samples: Tuple[Sample, ...]
    kind: str

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def input_width(self) -> int:
        return len(self.samples[0].input) if self.samples else 0

    @property
    def output_width(self) -> int:
        return len(self.samples[0].output) if self.samples else 0

    @property
    def inputs(self) -> np.ndarray:
        """Inputs as a (n_samples, input_width) array."""
        return np.array([s.input for s in self.samples], dtype=float)

    @property
    def outputs(self) -> np.ndarray:
        """Outputs as a (n_samples, output_width) array."""
        return np.array([s.output for s in self.samples], dtype=float)

    @property
    def is_classification(self) -> bool:
        return self.kind == CLASSIFICATION


def make_xor() -> Dataset:
    """The XOR truth table."""
    pairs = [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (1.0, 1.0)]
    samples = tuple(
        Sample(input=(a, b), output=(float(int(a) ^ int(b)),))
        for a, b in pairs
    )
    return Dataset(name='xor', samples=samples, kind=CLASSIFICATION)


def make_circle(rng: Optional[np.random.Generator] = None) -> Dataset:
    """
    Random points in the unit disk.

    Angle and radius are both drawn uniformly, so points cluster toward the
    centre. Points with radius < 0.5 are class 1, all others class 0.
    """
    rng = rng if rng is not None else np.random.default_rng()
    samples = []
    for _ in range(CIRCLE_SAMPLES):
        angle = rng.uniform(0.0, 2 * math.pi)
        radius = rng.uniform(0.0, 1.0)
        x = math.cos(angle) * radius
        y = math.sin(angle) * radius
        label = 1.0 if radius < CIRCLE_INNER_RADIUS else 0.0
        samples.append(Sample(input=(x, y), output=(label,)))
    return Dataset(name='circle', samples=tuple(samples), kind=CLASSIFICATION)


def make_sine() -> Dataset:
    """sin(x) sampled at SINE_SAMPLES evenly spaced points over [0, 2*pi)."""
    samples = []
    for i in range(SINE_SAMPLES):
        x = (i / SINE_SAMPLES) * math.pi * 2
        samples.append(Sample(input=(x,), output=(math.sin(x),)))
    return Dataset(name='sine', samples=tuple(samples), kind=REGRESSION)


GENERATORS: Dict[str, Callable[[Optional[np.random.Generator]], Dataset]] = {
    'xor': lambda rng: make_xor(),
    'circle': make_circle,
    'sine': lambda rng: make_sine(),
}


def generate(dataset_id: str, rng: Optional[np.random.Generator] = None) -> Dataset:
    """
    Build the dataset for an identifier.

    Args:
        dataset_id: 'xor', 'circle' or 'sine'
        rng: Optional random generator (only 'circle' samples randomly)

    Returns:
        A new Dataset. Unknown identifiers fall back to 'xor'.
    """
    generator = GENERATORS.get(dataset_id)
    if generator is None:
        _logger.warning(f"Unknown dataset '{dataset_id}', falling back to '{DEFAULT_DATASET}'")
        generator = GENERATORS[DEFAULT_DATASET]

    dataset = generator(rng)
    _logger.debug(f"Generated dataset '{dataset.name}' ({len(dataset)} samples, {dataset.kind})")
    return dataset
