"""
embedding-lab - multi-method document retrieval and per-embedding-model
article classification over dense text embeddings.
"""

__version__ = "0.1.0"
