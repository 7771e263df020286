# train_utils.py

import logging

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
import torch
import torch.nn as nn
import torch.optim as optim
from sklearn.metrics import confusion_matrix, classification_report, f1_score
from torch.utils.data import DataLoader, TensorDataset

from model import RainClassifier

logger = logging.getLogger(__name__)


def make_loader(X, y, batch_size=32, shuffle=True):
    """
    Wrap normalized features and labels in a DataLoader.

    Parameters:
        X (np.ndarray): Normalized feature matrix.
        y (np.ndarray): Binary labels.
        batch_size (int): Mini-batch size.
        shuffle (bool): Reshuffle the examples on every pass.

    Returns:
        DataLoader: Yields (inputs, targets) with targets of shape (batch, 1).
    """
    X_tensor = torch.tensor(np.asarray(X), dtype=torch.float32)
    y_tensor = torch.tensor(np.asarray(y), dtype=torch.float32).unsqueeze(1)
    return DataLoader(TensorDataset(X_tensor, y_tensor), batch_size=batch_size, shuffle=shuffle)


def train_model(model, criterion, optimizer, train_loader, val_loader=None, num_epochs=30):
    """
    Train the network for a fixed number of epochs.

    Parameters:
        model (nn.Module): The neural network model, returning logits.
        criterion (nn.Module): Loss function.
        optimizer (torch.optim.Optimizer): Optimizer.
        train_loader (DataLoader): DataLoader for training data.
        val_loader (DataLoader): Optional DataLoader for validation data.
        num_epochs (int): Number of passes over the training data.

    Returns:
        model (nn.Module): The trained model.
        history (dict): Training (and validation) loss and accuracy history.
    """
    history = {'train_loss': [], 'train_acc': [], 'val_loss': [], 'val_acc': []}

    for epoch in range(num_epochs):
        # Training Phase
        model.train()
        total_loss = 0.0
        total_correct = 0
        total_seen = 0
        for inputs, targets in train_loader:
            optimizer.zero_grad()
            logits = model(inputs)
            loss = criterion(logits, targets)
            loss.backward()
            optimizer.step()
            total_loss += loss.item() * len(targets)

            preds = (torch.sigmoid(logits) > 0.5).float()
            total_correct += (preds == targets).sum().item()
            total_seen += len(targets)

        avg_loss = total_loss / max(total_seen, 1)
        avg_acc = total_correct / max(total_seen, 1)
        history['train_loss'].append(avg_loss)
        history['train_acc'].append(avg_acc)

        if val_loader is None:
            logger.info("Epoch [%d/%d], loss=%.4f, accuracy=%.4f",
                        epoch + 1, num_epochs, avg_loss, avg_acc)
            continue

        # Validation Phase
        val_loss, val_acc = _evaluate_loss(model, criterion, val_loader)
        history['val_loss'].append(val_loss)
        history['val_acc'].append(val_acc)
        logger.info("Epoch [%d/%d], loss=%.4f, accuracy=%.4f, val_loss=%.4f, val_accuracy=%.4f",
                    epoch + 1, num_epochs, avg_loss, avg_acc, val_loss, val_acc)

    model.eval()
    return model, history


def _evaluate_loss(model, criterion, loader):
    model.eval()
    total_loss = 0.0
    total_correct = 0
    total_seen = 0
    with torch.no_grad():
        for inputs, targets in loader:
            logits = model(inputs)
            total_loss += criterion(logits, targets).item() * len(targets)
            preds = (torch.sigmoid(logits) > 0.5).float()
            total_correct += (preds == targets).sum().item()
            total_seen += len(targets)
    return total_loss / max(total_seen, 1), total_correct / max(total_seen, 1)


def fit_classifier(X, y, config):
    """
    Build and train a fresh RainClassifier on normalized features.

    Parameters:
        X (np.ndarray): Normalized feature matrix.
        y (np.ndarray): Binary labels.
        config (TrainingConfig): Hyperparameters.

    Returns:
        model (RainClassifier): The trained model, in eval mode.
        history (dict): Per-epoch loss and accuracy.
    """
    if config.seed is not None:
        torch.manual_seed(config.seed)

    model = RainClassifier()
    criterion = nn.BCEWithLogitsLoss()
    optimizer = optim.Adam(model.parameters(), lr=config.learning_rate)
    train_loader = make_loader(X, y, batch_size=config.batch_size, shuffle=True)

    logger.info("Training model on %d examples", len(y))
    model, history = train_model(model, criterion, optimizer, train_loader,
                                 num_epochs=config.num_epochs)
    logger.info("Model training complete.")
    return model, history


def _predict_labels(model, loader):
    model.eval()
    all_preds = []
    all_targets = []
    with torch.no_grad():
        for inputs, targets in loader:
            preds = (model.predict_proba(inputs) > 0.5).int()
            all_preds.extend(preds.cpu().numpy().flatten())
            all_targets.extend(targets.int().cpu().numpy().flatten())
    return np.array(all_targets), np.array(all_preds)


def evaluate_model(model, test_loader, plot_path=None):
    """
    Evaluate the model on the test set.

    Parameters:
        model (nn.Module): The trained model.
        test_loader (DataLoader): DataLoader for test data.
        plot_path (str or Path): Where to save a confusion matrix heatmap, if given.

    Returns:
        dict: 'confusion_matrix', 'report' and 'f1' for the "Rain" class.
    """
    all_targets, all_preds = _predict_labels(model, test_loader)

    cm = confusion_matrix(all_targets, all_preds, labels=[0, 1])
    report = classification_report(all_targets, all_preds, labels=[0, 1],
                                   target_names=['No Rain', 'Rain'], zero_division=0)

    if plot_path is not None:
        labels = ['No Rain', 'Rain']
        fig = plt.figure(figsize=(6, 5))
        sns.heatmap(cm, annot=True, fmt='d', cmap='Blues', xticklabels=labels, yticklabels=labels)
        plt.ylabel('Actual')
        plt.xlabel('Predicted')
        plt.title('Confusion Matrix')
        fig.savefig(plot_path)
        plt.close(fig)
        logger.info("Confusion matrix saved at '%s'", plot_path)

    f1 = f1_score(all_targets, all_preds, pos_label=1, zero_division=0)
    return {'confusion_matrix': cm, 'report': report, 'f1': f1}


def evaluate_f1(model, X_val, y_val):
    """
    Evaluate the F1-Score for the "Rain" class on a validation set.

    Parameters:
        model (nn.Module): The trained model.
        X_val (np.ndarray): Normalized validation features.
        y_val (np.ndarray): Validation labels.

    Returns:
        f1 (float): F1-Score for the "Rain" class.
    """
    model.eval()
    with torch.no_grad():
        inputs = torch.tensor(np.asarray(X_val), dtype=torch.float32)
        preds = (model.predict_proba(inputs) > 0.5).int().numpy().flatten()
    return f1_score(np.asarray(y_val).flatten(), preds, pos_label=1, zero_division=0)
