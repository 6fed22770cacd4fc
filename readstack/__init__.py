"""
readstack - save articles, read them later, search them by meaning.
"""
