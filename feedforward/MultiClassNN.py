from .FeedForwardNN import FeedForwardNN
from .loss.SoftmaxLoss import SoftmaxLoss


class MultiClassNN(FeedForwardNN):
    """
    Categorical cross-entropy network. The output layer should be a
    PlainLinearLayer: the fused softmax gradient assumes identity activation.
    """
    def __init__(self, inputs, one_hot_labels, output_layer, verbose=1):
        super().__init__(inputs, one_hot_labels, output_layer, SoftmaxLoss(), verbose=verbose)
