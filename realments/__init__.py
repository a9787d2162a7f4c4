"""
Realments: declarative HTML forms with a JSON wire payload and
CSS-framework-aware rendering.
"""

__version__ = "0.1.0"
