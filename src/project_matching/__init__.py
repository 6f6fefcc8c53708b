"""
Project Matching Subsystem

Embedding-based matching for pitch videos: similar-project search,
personalised recommendations, collaborator discovery and pairwise
compatibility, plus the analysis pipeline that produces the embeddings.
"""

__version__ = "0.1.0"
