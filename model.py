# model.py

import torch
import torch.nn as nn

from config import HIDDEN_SIZES, NUM_FEATURES


class RainClassifier(nn.Module):

    def __init__(self, input_size=NUM_FEATURES, hidden_sizes=HIDDEN_SIZES):
        """
        Parameters:
            input_size (int): Number of input features
            hidden_sizes (tuple): Width of each hidden layer, in order
        """
        super(RainClassifier, self).__init__()
        self.input_size = input_size
        self.hidden_sizes = tuple(hidden_sizes)
        layers = []
        current_input = input_size
        for hidden_size in self.hidden_sizes:
            layers.append(nn.Linear(current_input, hidden_size))
            layers.append(nn.ReLU())
            current_input = hidden_size
        layers.append(nn.Linear(current_input, 1))  # Output layer, one logit
        self.network = nn.Sequential(*layers)

    @property
    def architecture(self):
        return [self.input_size, *self.hidden_sizes, 1]

    def forward(self, x):
        """
        Forward pass of the network, returning logits
        """
        return self.network(x)

    def predict_proba(self, x):
        """
        Probability of rain tomorrow for each row of x
        """
        return torch.sigmoid(self.forward(x))
