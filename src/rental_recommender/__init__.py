"""
Rental Recommender - explainable, rule-based property recommendations.

Scores a local property catalog against a user's preferences and
interaction history, and builds personalized, trending, new-listing and
similar-property lists.
"""

__version__ = "0.1.0"
