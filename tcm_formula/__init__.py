"""
TCM 方剂识别系统
输入药物清单，识别其最可能对应的经典方剂
"""

__version__ = "1.0.0"
