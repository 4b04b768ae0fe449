"""Star Empires: a turn-based 4X space conquest simulation engine."""

__version__ = "0.1.0"
