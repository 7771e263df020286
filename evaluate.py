# evaluate.py

import argparse
import sys

from artifacts import load_artifact
from config import AppConfig
from data_preparation import load_and_preprocess_data, split_train_test
from errors import ArtifactError, DatasetError
from logging_utils import configure_logging
from normalization import apply_normalization
from train_utils import evaluate_model, make_loader


def evaluate_artifact(artifact_path, dataset_path, test_size=0.2, class_cap=5000, plot_path=None):
    """
    Evaluate a saved model on the ordered hold-out tail of the dataset.

    train_predictor never fits on this tail, provided `test_size` and
    `class_cap` match the values the model was trained with.

    Parameters:
        artifact_path (str or Path): Saved model file.
        dataset_path (str or Path): Historical weather CSV.
        test_size (float): Fraction of the balanced dataset held out.
        class_cap (int): Per-class cap used when loading the dataset.
        plot_path (str or Path): Optional confusion matrix image path.

    Returns:
        dict: Metrics from evaluate_model.
    """
    if not 0 < test_size < 1:
        raise ValueError("test_size must be between 0 and 1")
    model, stats = load_artifact(artifact_path)
    training_set = load_and_preprocess_data(dataset_path, class_cap=class_cap)
    _, X_test, _, y_test = split_train_test(training_set.features, training_set.labels, test_size=test_size)

    # Scale with the stats saved alongside the model
    X_test_scaled = apply_normalization(stats, X_test)
    test_loader = make_loader(X_test_scaled, y_test, batch_size=128, shuffle=False)
    return evaluate_model(model, test_loader, plot_path=plot_path)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Evaluate a saved rain classifier.")
    parser.add_argument('--dataset', help="Path to weatherAUS.csv")
    parser.add_argument('--artifact', help="Saved model path")
    parser.add_argument('--test-size', type=float, help="Must match the value used for training")
    parser.add_argument('--plot', help="Save a confusion matrix image here")
    parser.add_argument('--log-level', default='INFO')
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    config = AppConfig()
    dataset_path = args.dataset or config.dataset_path
    artifact_path = args.artifact or config.artifact_path
    test_size = config.training.test_size if args.test_size is None else args.test_size

    try:
        metrics = evaluate_artifact(artifact_path, dataset_path, test_size=test_size,
                                    class_cap=config.training.class_cap, plot_path=args.plot)
    except (ArtifactError, DatasetError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("Confusion Matrix:")
    print(metrics['confusion_matrix'])
    print("\nClassification Report:")
    print(metrics['report'])
    print(f"Test F1-Score: {metrics['f1']:.4f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
