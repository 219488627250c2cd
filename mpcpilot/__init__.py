"""Model-predictive flight control and simulation for multirotor aircraft."""

__version__ = "0.1.0"