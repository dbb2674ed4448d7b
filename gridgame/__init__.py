"""gridgame: tres en raya generalizado (N×N) como sesión con estado."""

__version__ = "0.1.0"
