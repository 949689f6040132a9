class Layer:
    # Subclasses override as needed
    def feed_forward(self, inputs):
        # Return (signals, outputs)
        raise NotImplementedError

    def back_propagate(self, signals, tgradient):
        # Hidden layer: return (gradient, gradient for the preceding layer)
        raise NotImplementedError

    def seed_back_prop(self, signals, gradient):
        # Output layer: same contract, seeded from the loss gradient
        raise NotImplementedError

    def update_weights(self, inputs, gradient, lr):
        raise NotImplementedError

    def params(self):
        # Return list of parameter ndarrays (e.g., [W])
        return []
