# artifacts.py

import logging
import os
import tempfile
from pathlib import Path

import torch

from config import FEATURE_NAMES
from errors import ArtifactCorruptError, ArtifactNotFoundError
from model import RainClassifier
from normalization import NormalizationStats

logger = logging.getLogger(__name__)

ARTIFACT_FORMAT_VERSION = 1


def save_artifact(path, model, stats):
    """
    Save the trained model and its normalization stats as one file.

    Parameters:
        path (str or Path): Destination file.
        model (RainClassifier): The trained model.
        stats (NormalizationStats): The stats the model was trained with.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    bundle = {
        'format_version': ARTIFACT_FORMAT_VERSION,
        'architecture': model.architecture,
        'feature_names': list(FEATURE_NAMES),
        'state_dict': model.state_dict(),
        'normalization': stats.to_dict(),
    }

    # Write next to the target, then swap in, so readers never see half a file
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix='.tmp')
    os.close(fd)
    try:
        torch.save(bundle, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.info("Model saved at '%s'", path)


def load_artifact(path):
    """
    Load a model and its normalization stats, both or neither.

    Parameters:
        path (str or Path): Artifact file written by save_artifact.

    Returns:
        model (RainClassifier): The model in eval mode.
        stats (NormalizationStats): The matching stats.
    """
    path = Path(path)
    if not path.exists():
        raise ArtifactNotFoundError(f"No saved model at '{path}'")

    try:
        bundle = torch.load(path, map_location='cpu', weights_only=True)
    except Exception as exc:
        raise ArtifactCorruptError(f"Unreadable model artifact '{path}': {exc}") from exc

    if not isinstance(bundle, dict):
        raise ArtifactCorruptError(f"Model artifact '{path}' has an unexpected layout")
    if bundle.get('format_version') != ARTIFACT_FORMAT_VERSION:
        raise ArtifactCorruptError(
            f"Model artifact '{path}' has format version {bundle.get('format_version')!r}, "
            f"expected {ARTIFACT_FORMAT_VERSION}")
    if bundle.get('feature_names') != list(FEATURE_NAMES):
        raise ArtifactCorruptError(f"Model artifact '{path}' was trained on different features")

    model = RainClassifier()
    if bundle.get('architecture') != model.architecture:
        raise ArtifactCorruptError(
            f"Model artifact '{path}' has architecture {bundle.get('architecture')!r}")

    if 'normalization' not in bundle:
        raise ArtifactCorruptError(f"Model artifact '{path}' has no normalization stats")
    try:
        stats = NormalizationStats.from_dict(bundle['normalization'])
    except ValueError as exc:
        raise ArtifactCorruptError(f"Invalid normalization stats in '{path}': {exc}") from exc

    state_dict = bundle.get('state_dict')
    if not isinstance(state_dict, dict):
        raise ArtifactCorruptError(f"Model artifact '{path}' has no model weights")
    try:
        model.load_state_dict(state_dict)
    except RuntimeError as exc:
        raise ArtifactCorruptError(f"Invalid model weights in '{path}': {exc}") from exc

    model.eval()
    logger.info("Model and normalization loaded from '%s'", path)
    return model, stats


def discard_artifact(path):
    """Remove an artifact that failed to load so it is rebuilt from scratch."""
    path = Path(path)
    if path.exists():
        path.unlink()
        logger.warning("Discarded model artifact '%s'", path)
