"""GA Dashboard: multi-property Google Analytics 4 summaries"""

__version__ = "1.2.0"
