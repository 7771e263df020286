# train.py

import argparse
import sys

from artifacts import save_artifact
from config import AppConfig
from errors import DatasetError
from logging_utils import configure_logging
from predictor import train_predictor


def main(argv=None):
    parser = argparse.ArgumentParser(description="Train the rain classifier and save it.")
    parser.add_argument('--dataset', help="Path to weatherAUS.csv")
    parser.add_argument('--artifact', help="Where to save the trained model")
    parser.add_argument('--epochs', type=int)
    parser.add_argument('--batch-size', type=int)
    parser.add_argument('--learning-rate', type=float)
    parser.add_argument('--class-cap', type=int)
    parser.add_argument('--test-size', type=float, help="Trailing share held out for evaluate.py")
    parser.add_argument('--imbalance', choices=['none', 'smote'])
    parser.add_argument('--seed', type=int)
    parser.add_argument('--log-level', default='INFO')
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    config = AppConfig()
    if args.dataset:
        config.dataset_path = args.dataset
    if args.artifact:
        config.artifact_path = args.artifact
    training = config.training
    if args.epochs is not None:
        training.num_epochs = args.epochs
    if args.batch_size is not None:
        training.batch_size = args.batch_size
    if args.learning_rate is not None:
        training.learning_rate = args.learning_rate
    if args.class_cap is not None:
        training.class_cap = args.class_cap
    if args.test_size is not None:
        training.test_size = args.test_size
    if args.imbalance is not None:
        training.imbalance_method = args.imbalance
    training.seed = args.seed
    config.validate()

    try:
        predictor, history = train_predictor(config.dataset_path, training)
    except DatasetError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # Save the trained model together with its normalization stats
    save_artifact(config.artifact_path, predictor.model, predictor.stats)
    print(f"Trained model saved at '{config.artifact_path}'")
    print(f"Final loss: {history['train_loss'][-1]:.4f}, accuracy: {history['train_acc'][-1]:.4f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
