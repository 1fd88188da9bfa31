"""Price Chart API: MongoDB close prices reshaped for charting libraries"""

__version__ = "2.0.0"
