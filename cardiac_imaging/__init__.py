"""
Medicare cardiac imaging utilization trends, 2013-2022
"""
__version__ = "0.1.0"
