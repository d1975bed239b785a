"""
Grammar rules and the input views they run over.
"""
