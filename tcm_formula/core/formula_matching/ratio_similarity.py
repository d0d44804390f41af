"""
剂量比例相似度
药味相同的情况下，用余弦相似度区分剂量配比不同的类方
"""

from typing import List, Mapping

import numpy as np

from .models import HerbEntry

# 共有药物少于此数时无法判断比例
MIN_COMMON_HERBS = 2


def calculate_ratio_similarity(input_herbs: List[HerbEntry], standard_dosage: Mapping[str, float]) -> float:
    """
    计算输入剂量与标准剂量的余弦相似度

    只比较双方都有剂量的药物；共有药物不足两味时返回 1（不判定为异常）
    """
    input_dosage = {}
    for herb in input_herbs:
        if herb.dosage > 0 and standard_dosage.get(herb.name) and herb.name not in input_dosage:
            input_dosage[herb.name] = herb.dosage

    if len(input_dosage) < MIN_COMMON_HERBS:
        return 1.0

    common_names = list(input_dosage)
    input_vector = np.array([input_dosage[name] for name in common_names], dtype=float)
    standard_vector = np.array([standard_dosage[name] for name in common_names], dtype=float)

    input_norm = np.linalg.norm(input_vector)
    standard_norm = np.linalg.norm(standard_vector)
    if input_norm == 0 or standard_norm == 0:
        return 0.0

    similarity = float(np.dot(input_vector, standard_vector) / (input_norm * standard_norm))
    return min(max(similarity, 0.0), 1.0)
