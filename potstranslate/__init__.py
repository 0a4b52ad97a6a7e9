"""
Pot's Translate - batch machine translation of .pot catalogs.

Placeholders, inline markup and @commands are shielded from the translator
and restored afterwards; manual dictionaries, a persistent cache and review
lists wrap every translation call.
"""

__version__ = "1.1.0"
