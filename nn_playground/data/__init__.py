"""
Data Module
===========

Synthetic datasets the playground can train on.

Classes:
    Sample  - One labelled example
    Dataset - Immutable ordered collection of samples

Dataset Registry:
    Use generate(name) to build a dataset by name
    Use list_datasets() to get all available dataset names
    Use get_dataset_info(name) to get metadata about a dataset
"""

from typing import Any, Dict, List, Optional

from .datasets import (
    Sample,
    Dataset,
    generate,
    CLASSIFICATION,
    REGRESSION,
    DEFAULT_DATASET,
)


# =============================================================================
# DATASET REGISTRY
# =============================================================================
# Maps dataset names to display metadata.
# To add a new dataset:
#   1. Write a make_<name>() generator in datasets.py
#   2. Add it to GENERATORS in datasets.py
#   3. Add an entry to DATASET_REGISTRY below

DATASET_REGISTRY: Dict[str, Dict[str, Any]] = {
    'xor': {
        'name': 'XOR Problem',
        'description': 'Four boolean pairs; not linearly separable',
        'kind': CLASSIFICATION,
    },
    'circle': {
        'name': 'Circle Classification',
        'description': 'Inner disk versus outer ring in the unit circle',
        'kind': CLASSIFICATION,
    },
    'sine': {
        'name': 'Sine Wave Regression',
        'description': 'Fit sin(x) over one full period',
        'kind': REGRESSION,
    },
}


def list_datasets() -> List[str]:
    """
    Get a list of all available dataset names.

    Example:
        >>> list_datasets()
        ['xor', 'circle', 'sine']
    """
    return list(DATASET_REGISTRY.keys())


def get_dataset_info(name: str) -> Optional[Dict[str, Any]]:
    """
    Get metadata about a dataset.

    Args:
        name: Dataset identifier

    Returns:
        Dictionary with 'name', 'description' and 'kind', or None if not found
    """
    entry = DATASET_REGISTRY.get(name.lower())
    if entry:
        return dict(entry)
    return None


def next_dataset(name: str) -> str:
    """Cycle to the dataset after `name` in registry order."""
    names = list_datasets()
    if name not in names:
        return names[0]
    return names[(names.index(name) + 1) % len(names)]


__all__ = [
    'Sample',
    'Dataset',
    'generate',
    'CLASSIFICATION',
    'REGRESSION',
    'DEFAULT_DATASET',
    'DATASET_REGISTRY',
    'list_datasets',
    'get_dataset_info',
    'next_dataset',
]
