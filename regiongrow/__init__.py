"""regiongrow — greedy mutual-best-match region-growing image segmenter."""

__version__ = "0.1.0"
