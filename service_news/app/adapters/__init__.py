"""
Adapters for the collaborators the news cache sits in front of.
"""
