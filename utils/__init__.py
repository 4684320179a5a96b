"""
Utility modules for the Pandorabots client
"""
