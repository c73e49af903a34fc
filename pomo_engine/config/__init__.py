"""
Configuration: defaults, YAML loading with override precedence, and validation.
"""
